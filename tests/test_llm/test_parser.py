"""Tests for turning model completions into ticket drafts.

Covers:
- Fence extraction (backticks, tildes, json tag in any case, longer fences)
- Bare-object fallback and its failure modes
- Unterminated and empty fences
- Required-field order and null handling
- Malformed JSON versus missing fields
- The full parse pipeline on a chatty completion
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ticketron.exceptions import (
    LLMResponseError,
    MalformedJSON,
    MissingRequiredField,
    NormalizationFailure,
)
from ticketron.llm.parser import normalize_response, parse_llm_response, validate_response
from ticketron.models import TicketDraft


FULL_OBJECT = '{"summary":"S","description":"D","project_name_suggestion":"P"}'


# ---------------------------------------------------------------------------
# normalize_response
# ---------------------------------------------------------------------------


class TestNormalizeFenced:
    def test_json_tagged_fence(self) -> None:
        raw = 'Sure!\n```json\n{"summary": "x"}\n```\nLet me know.'
        assert normalize_response(raw) == '{"summary": "x"}'

    def test_untagged_fence_is_accepted(self) -> None:
        raw = 'Here you go:\n```\n{"summary": "x"}\n```'
        assert normalize_response(raw) == '{"summary": "x"}'

    def test_tag_is_case_insensitive(self) -> None:
        raw = '```JSON\n{"summary": "x"}\n```'
        assert normalize_response(raw) == '{"summary": "x"}'

    def test_tilde_fence(self) -> None:
        raw = '~~~json\n{"summary": "x"}\n~~~'
        assert normalize_response(raw) == '{"summary": "x"}'

    def test_interior_is_returned_trimmed(self) -> None:
        interior = '{\n  "summary": "x",\n  "project_name_suggestion": "Web"\n}'
        raw = f"intro\n```json\n   \n{interior}\n\t\n```\noutro"
        assert normalize_response(raw) == interior

    def test_longer_fence_may_contain_shorter_run(self) -> None:
        raw = '````json\n{"summary": "use ``` blocks"}\n````'
        assert normalize_response(raw) == '{"summary": "use ``` blocks"}'

    def test_only_first_block_is_used(self) -> None:
        raw = '```json\n{"summary": "first"}\n```\nand\n```json\n{"summary": "second"}\n```'
        assert normalize_response(raw) == '{"summary": "first"}'

    def test_fence_wins_over_surrounding_braces(self) -> None:
        raw = '{ignored} ```\n{"summary": "x"}\n``` {ignored}'
        assert normalize_response(raw) == '{"summary": "x"}'

    def test_code_block_inside_description_does_not_close_fence(self) -> None:
        interior = (
            '{"summary": "Add build step", '
            '"description": "Run:\\n```bash\\nmake\\n```", '
            '"project_name_suggestion": "Web"}'
        )
        raw = f"```json\n{interior}\n```"
        assert normalize_response(raw) == interior
        draft = parse_llm_response(raw)
        assert draft.description == "Run:\n```bash\nmake\n```"

    def test_closing_fence_right_after_object(self) -> None:
        assert normalize_response('```json {"summary": "x"}```') == '{"summary": "x"}'


class TestNormalizeBare:
    def test_bare_object(self) -> None:
        assert normalize_response('  \n{"summary": "x"}\n ') == '{"summary": "x"}'

    def test_prose_without_braces_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response("I could not create a ticket for that request.")

    def test_bare_object_may_mention_fences(self) -> None:
        raw = '{"summary": "x", "description": "wrap logs in ``` fences"}'
        assert normalize_response(raw) == raw

    def test_embedded_object_in_prose_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response('The ticket is {"summary": "x"} as requested.')

    def test_empty_input_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response("")

    def test_whitespace_input_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response(" \n\t ")


class TestNormalizeBrokenFences:
    def test_unterminated_fence_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response('```json\n{"summary": "x"}')

    def test_unterminated_fence_does_not_fall_back_to_braces(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response('{"summary": "x"}\n```')

    def test_mismatched_markers_fail(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response('```json\n{"summary": "x"}\n~~~')

    def test_empty_fence_fails(self) -> None:
        with pytest.raises(NormalizationFailure):
            normalize_response("```json\n   \n```")

    def test_failure_is_an_llm_response_error(self) -> None:
        with pytest.raises(LLMResponseError):
            normalize_response("nothing here")


# ---------------------------------------------------------------------------
# validate_response
# ---------------------------------------------------------------------------


class TestValidate:
    def test_full_object(self) -> None:
        draft = validate_response(FULL_OBJECT)
        assert draft == TicketDraft(summary="S", description="D", project_suggestion="P")

    def test_round_trip_through_normalizer(self) -> None:
        draft = validate_response(normalize_response(FULL_OBJECT))
        assert (draft.summary, draft.description, draft.project_suggestion) == ("S", "D", "P")

    def test_description_defaults_to_empty(self) -> None:
        draft = validate_response('{"summary": "S", "project_name_suggestion": "P"}')
        assert draft.description == ""

    def test_null_description_is_empty(self) -> None:
        draft = validate_response('{"summary": "S", "description": null, "project_name_suggestion": "P"}')
        assert draft.description == ""

    def test_unknown_keys_are_ignored(self) -> None:
        draft = validate_response(
            '{"summary": "S", "project_name_suggestion": "P", "issue_type": "Bug", "labels": ["a"]}'
        )
        assert draft.project_suggestion == "P"

    def test_summary_checked_first(self) -> None:
        with pytest.raises(MissingRequiredField) as exc_info:
            validate_response('{"description": "D"}')
        assert exc_info.value.field_name == "summary"

    def test_missing_project_suggestion(self) -> None:
        with pytest.raises(MissingRequiredField) as exc_info:
            validate_response('{"summary": "S"}')
        assert exc_info.value.field_name == "project_name_suggestion"
        assert "project_name_suggestion" in str(exc_info.value)

    def test_null_summary_is_missing(self) -> None:
        with pytest.raises(MissingRequiredField) as exc_info:
            validate_response('{"summary": null, "project_name_suggestion": "P"}')
        assert exc_info.value.field_name == "summary"

    def test_empty_summary_is_missing(self) -> None:
        with pytest.raises(MissingRequiredField) as exc_info:
            validate_response('{"summary": "", "project_name_suggestion": "P"}')
        assert exc_info.value.field_name == "summary"

    @pytest.mark.parametrize(
        "candidate",
        [
            '{"summary": "S", "project_name_suggestion": "P"',
            '["summary", "S"]',
            '"just a string"',
            '{"summary": 42, "project_name_suggestion": "P"}',
            '{"summary": "S", "project_name_suggestion": ["P"]}',
        ],
    )
    def test_malformed_candidates(self, candidate: str) -> None:
        with pytest.raises(MalformedJSON):
            validate_response(candidate)

    def test_malformed_is_not_a_missing_field(self) -> None:
        with pytest.raises(LLMResponseError) as exc_info:
            validate_response("{not json}")
        assert not isinstance(exc_info.value, MissingRequiredField)


class TestTicketDraft:
    def test_draft_is_frozen(self) -> None:
        draft = validate_response(FULL_OBJECT)
        with pytest.raises(ValidationError):
            draft.summary = "changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# parse_llm_response
# ---------------------------------------------------------------------------


class TestParsePipeline:
    def test_chatty_completion(self) -> None:
        blob = 'Here:\n```json\n{"summary":"Fix bug","project_name_suggestion":"Web"}\n```\nThanks'
        draft = parse_llm_response(blob)
        assert draft == TicketDraft(summary="Fix bug", description="", project_suggestion="Web")

    def test_normalization_errors_propagate(self) -> None:
        with pytest.raises(NormalizationFailure):
            parse_llm_response("Sorry, I can't help with that.")

    def test_validation_errors_propagate(self) -> None:
        with pytest.raises(MissingRequiredField):
            parse_llm_response('```json\n{"project_name_suggestion": "Web"}\n```')
