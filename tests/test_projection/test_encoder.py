"""Tests for rendering search results and created issues.

Covers:
- Full-object JSON/YAML rendering
- Filtered JSON/YAML projections
- TSV with default and custom columns, sanitization, empty results
- Text summaries
- Created-issue rendering
"""

from __future__ import annotations

import json

import pytest
import yaml

from ticketron.models import CreateIssueResponse, SearchIssuesResponse
from ticketron.projection.encoder import (
    DEFAULT_TSV_FIELDS,
    NO_RECORDS,
    RenderMode,
    render_created,
    render_search,
    render_tsv,
)


@pytest.fixture
def empty_response() -> SearchIssuesResponse:
    return SearchIssuesResponse(total=0, issues=[])


# ---------------------------------------------------------------------------
# Full-object rendering
# ---------------------------------------------------------------------------


class TestFullObject:
    def test_json_is_the_whole_response_by_alias(self, search_response: SearchIssuesResponse) -> None:
        data = json.loads(render_search(search_response, RenderMode.JSON))
        assert data["total"] == 2
        assert data["maxResults"] == 20
        assert data["issues"][0]["self"].endswith("/issue/10001")
        assert data["issues"][0]["fields"]["issuetype"] == {"name": "Bug"}
        assert data["issues"][1]["fields"]["status"] is None

    def test_json_is_indented(self, search_response: SearchIssuesResponse) -> None:
        assert render_search(search_response, "json").startswith('{\n  "startAt": 0')

    def test_yaml_is_the_issue_list(self, search_response: SearchIssuesResponse) -> None:
        data = yaml.safe_load(render_search(search_response, RenderMode.YAML))
        assert [issue["key"] for issue in data] == ["BE-1", "BE-2"]
        assert data[0]["fields"]["status"]["name"] == "In Progress"

    def test_empty_json(self, empty_response: SearchIssuesResponse) -> None:
        assert json.loads(render_search(empty_response, "json"))["issues"] == []

    def test_empty_yaml(self, empty_response: SearchIssuesResponse) -> None:
        assert yaml.safe_load(render_search(empty_response, "yaml")) == []


# ---------------------------------------------------------------------------
# Filtered rendering
# ---------------------------------------------------------------------------


class TestFiltered:
    def test_json_projection(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "json", ["key", "fields.status.name"])
        assert json.loads(out) == [
            {"key": "BE-1", "fields.status.name": "In Progress"},
            {"key": "BE-2", "fields.status.name": None},
        ]

    def test_nested_record_is_dumped_by_alias(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "json", ["fields"])
        assert "issuetype" in json.loads(out)[0]["fields"]

    def test_yaml_projection_keeps_order(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "yaml", ["key", "fields.summary"])
        first = out.splitlines()[:2]
        assert first == ["- key: BE-1", "  fields.summary: Fix login redirect"]

    def test_empty_collection(self, empty_response: SearchIssuesResponse) -> None:
        assert render_search(empty_response, "json", ["key"]) == "[]"

    def test_unicode_is_preserved(self) -> None:
        response = SearchIssuesResponse.model_validate(
            {"issues": [{"key": "BE-9", "fields": {"summary": "Überprüfung"}}]}
        )
        assert "Überprüfung" in render_search(response, "json", ["fields.summary"])


# ---------------------------------------------------------------------------
# TSV rendering
# ---------------------------------------------------------------------------


class TestTsv:
    def test_default_columns(self, search_response: SearchIssuesResponse) -> None:
        lines = render_search(search_response, RenderMode.TSV).splitlines()
        assert lines[0] == "\t".join(DEFAULT_TSV_FIELDS)
        assert lines[1] == "BE-1\tFix login redirect\tIn Progress\tBug"
        assert lines[2] == "BE-2\tAdd retry to webhook\t\tTask"
        assert len(lines) == 3

    def test_custom_columns(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "tsv", ["fields.issuetype.name", "key"])
        assert out.splitlines() == ["fields.issuetype.name\tkey", "Bug\tBE-1", "Task\tBE-2"]

    def test_empty_collection_is_one_sentinel_line(self, empty_response: SearchIssuesResponse) -> None:
        out = render_search(empty_response, "tsv", ["key"])
        assert out.splitlines() == [NO_RECORDS]

    def test_control_characters_become_spaces(self) -> None:
        response = SearchIssuesResponse.model_validate(
            {"issues": [{"key": "BE-3", "fields": {"summary": "line one\nline\ttwo\r"}}]}
        )
        row = render_search(response, "tsv", ["key", "fields.summary"]).splitlines()[1]
        assert row == "BE-3\tline one line two "

    def test_missing_column_is_empty_cell(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "tsv", ["key", "nope", "key"])
        assert out.splitlines()[1] == "BE-1\t\tBE-1"

    def test_record_cell_is_json(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, "tsv", ["key", "fields.status"])
        assert out.splitlines()[1] == 'BE-1\t{"name": "In Progress"}'

    def test_mapping_cell_stays_on_one_line(self) -> None:
        row = render_tsv([{"key": "X-1", "meta": {"note": "a\nb"}}], ["key", "meta"]).splitlines()[1]
        assert row == 'X-1\t{"note": "a\\nb"}'


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------


class TestText:
    def test_summary_lines(self, search_response: SearchIssuesResponse) -> None:
        out = render_search(search_response, RenderMode.TEXT)
        assert out.splitlines() == [
            "Found 2 issues:",
            "- BE-1 - In Progress - Fix login redirect",
            "- BE-2 -  - Add retry to webhook",
        ]

    def test_fields_are_ignored(self, search_response: SearchIssuesResponse) -> None:
        assert render_search(search_response, "text", ["key"]).startswith("Found 2 issues:")

    def test_empty(self, empty_response: SearchIssuesResponse) -> None:
        assert render_search(empty_response, "text") == NO_RECORDS


# ---------------------------------------------------------------------------
# Created issues
# ---------------------------------------------------------------------------


class TestCreated:
    @pytest.fixture
    def created(self) -> CreateIssueResponse:
        return CreateIssueResponse.model_validate(
            {"key": "BE-42", "id": "10042", "self": "https://jira.example.com/browse/BE-42"}
        )

    def test_text_block(self, created: CreateIssueResponse) -> None:
        assert render_created(created) == (
            "Successfully created JIRA issue:\nKey: BE-42\nURL: https://jira.example.com/browse/BE-42"
        )

    def test_json(self, created: CreateIssueResponse) -> None:
        assert json.loads(render_created(created, "json")) == {
            "key": "BE-42",
            "id": "10042",
            "self": "https://jira.example.com/browse/BE-42",
        }
