"""Render search results and created issues as text, JSON, YAML, or TSV.

Every function here returns a string; writing it to stdout is the
caller's job (see :func:`ticketron.output.print_data`).

Render modes for search results:

* **Full-object** -- no field list: JSON serializes the whole
  :class:`~ticketron.models.SearchIssuesResponse`, YAML serializes its
  issue list.
* **Filtered** -- a field list was given: JSON/YAML serialize one ordered
  projection per issue (see :mod:`ticketron.projection.projector`).
* **Delimited** -- TSV with a header row; :data:`DEFAULT_TSV_FIELDS` when no
  field list was given. An empty result prints :data:`NO_RECORDS` instead
  of a header.
* **Text** -- a short human-readable summary line per issue.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Sequence

import yaml
from pydantic import BaseModel

from ticketron.models import CreateIssueResponse, Issue, SearchIssuesResponse
from ticketron.projection.projector import project_records
from ticketron.projection.resolver import resolve_path


class RenderMode(str, Enum):
    """Output encodings selectable with ``--output``."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TSV = "tsv"


DEFAULT_TSV_FIELDS: tuple[str, ...] = (
    "key",
    "fields.summary",
    "fields.status.name",
    "fields.issuetype.name",
)

NO_RECORDS = "No issues found."

_CELL_SANITIZER = str.maketrans({"\t": " ", "\r": " ", "\n": " "})


def render_search(
    response: SearchIssuesResponse,
    mode: RenderMode | str = RenderMode.TEXT,
    fields: Optional[Sequence[str]] = None,
) -> str:
    """Render a search response in the requested mode.

    Args:
        response: The decoded search response.
        mode: One of :class:`RenderMode` (or its string value).
        fields: Already-parsed field paths; empty or ``None`` selects the
            full-object (JSON/YAML) or default-column (TSV) rendering.

    Returns:
        The rendered text without a trailing newline.
    """
    mode = RenderMode(mode)
    if mode == RenderMode.TSV:
        return render_tsv(response.issues, fields or DEFAULT_TSV_FIELDS)
    if mode == RenderMode.TEXT:
        return render_text(response.issues)
    if fields:
        return encode(project_records(response.issues, fields), mode)
    if mode == RenderMode.JSON:
        return encode(response, mode)
    return encode(response.issues, mode)


def render_tsv(records: Sequence[Any], fields: Sequence[str]) -> str:
    """Render *records* as tab-separated rows under a header of *fields*."""
    if not records:
        return NO_RECORDS
    lines = ["\t".join(fields)]
    for record in records:
        cells = []
        for path in fields:
            value, found = resolve_path(record, path)
            cells.append(_cell(value) if found else "")
        lines.append("\t".join(cells))
    return "\n".join(lines)


def render_text(issues: Sequence[Issue]) -> str:
    """Render a ``Found N issues:`` summary, one ``KEY - STATUS - SUMMARY`` per line."""
    if not issues:
        return NO_RECORDS
    lines = [f"Found {len(issues)} issues:"]
    for issue in issues:
        status, _ = resolve_path(issue, "fields.status.name")
        lines.append(f"- {issue.key} - {status or ''} - {issue.fields.summary}")
    return "\n".join(lines)


def render_created(response: CreateIssueResponse, mode: RenderMode | str = RenderMode.TEXT) -> str:
    """Render the result of a successful issue creation.

    JSON mode serializes the response; every other mode prints the text block.
    """
    if RenderMode(mode) == RenderMode.JSON:
        return encode(response, RenderMode.JSON)
    return f"Successfully created JIRA issue:\nKey: {response.key}\nURL: {response.self_url}"


def encode(data: Any, mode: RenderMode) -> str:
    """Serialize *data* as indented JSON, or as YAML when *mode* is YAML."""
    plain = to_plain(data)
    if mode == RenderMode.YAML:
        text = yaml.safe_dump(plain, sort_keys=False, allow_unicode=True, default_flow_style=False)
        return text.rstrip("\n")
    return json.dumps(plain, indent=2, ensure_ascii=False, default=str)


def to_plain(value: Any) -> Any:
    """Convert records nested anywhere in *value* to dicts keyed by alias."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, Mapping):
        return {str(key): to_plain(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(child) for child in value]
    return value


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (BaseModel, Mapping, list, tuple)):
        # Nested values use the same JSON shape as the json/yaml modes.
        text = json.dumps(to_plain(value), ensure_ascii=False, default=str)
    else:
        text = str(value)
    return text.translate(_CELL_SANITIZER)

