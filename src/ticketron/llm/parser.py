"""Turn a free-form model completion into a validated :class:`TicketDraft`.

Models asked for "JSON only" still wrap their answer in prose, markdown
headers or code fences. Parsing happens in two pure steps:

1. :func:`normalize_response` locates a single JSON-object candidate,
   preferring the first fenced code block and falling back to a bare
   ``{...}`` answer.
2. :func:`validate_response` parses the candidate and enforces the
   required fields, in a fixed order.

:func:`parse_llm_response` chains both. Every failure is a subclass of
:class:`~ticketron.exceptions.LLMResponseError`.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from ticketron.exceptions import MalformedJSON, MissingRequiredField, NormalizationFailure
from ticketron.models import TicketDraft

# A run of three or more backticks or tildes, optionally tagged "json", up to
# the next run of exactly the same markers that starts a line or follows the
# closing brace. A run inside a JSON string follows an escaped \n, never a
# real line break, so it cannot close the block. The look-arounds keep a run
# of four from being read as a run of three.
_FENCED_BLOCK = re.compile(
    r"(?<![`~])(?P<fence>`{3,}(?!`)|~{3,}(?!~))"
    r"(?:[jJ][sS][oO][nN])?"
    r"(?P<body>.*?)"
    r"(?:(?<=\n)|(?<=\}))[ \t]*(?P=fence)(?![`~\w])",
    re.DOTALL,
)
_FENCE_MARKER = re.compile(r"`{3,}|~{3,}")

REQUIRED_FIELDS = ("summary", "project_name_suggestion")


class _CompletionPayload(BaseModel):
    """The JSON object the prompt asks the model to produce."""

    model_config = ConfigDict(extra="ignore")

    summary: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    project_name_suggestion: Optional[StrictStr] = None


def normalize_response(raw: str) -> str:
    """Extract the JSON-object candidate from a model completion.

    Args:
        raw: The completion text exactly as returned by the provider.

    Returns:
        The trimmed candidate string.

    Raises:
        NormalizationFailure: If the text is empty, holds an unterminated
            code fence, or is neither fenced nor a bare ``{...}`` object.

    Example::

        normalize_response('Sure!\\n```json\\n{"summary": "x"}\\n```')
        # '{"summary": "x"}'
    """
    match = _FENCED_BLOCK.search(raw)
    trimmed = raw.strip()
    if match is not None:
        candidate = match.group("body")
    elif trimmed.startswith("{") and trimmed.endswith("}"):
        # Markers here can only sit inside the object, so no fence is open.
        candidate = trimmed
    elif _FENCE_MARKER.search(raw):
        raise NormalizationFailure("LLM response contains an unterminated code fence")
    else:
        raise NormalizationFailure(
            "Could not find a JSON object in code fences or as a standalone object"
        )

    candidate = candidate.strip()
    if not candidate:
        raise NormalizationFailure("LLM response contains an empty code block")
    return candidate


def validate_response(candidate: str) -> TicketDraft:
    """Parse a normalized candidate and check the required fields.

    Unknown keys are ignored and ``null`` counts as empty. ``summary`` is
    checked before ``project_name_suggestion``; ``description`` is optional.

    Raises:
        MalformedJSON: If *candidate* is not a JSON object with string
            (or null) values for the known keys.
        MissingRequiredField: If a required field is empty or absent.
    """
    try:
        payload = _CompletionPayload.model_validate_json(candidate)
    except ValidationError as exc:
        raise MalformedJSON(f"Failed to parse LLM response JSON: {exc}") from exc

    values = {
        "summary": payload.summary or "",
        "description": payload.description or "",
        "project_name_suggestion": payload.project_name_suggestion or "",
    }
    for name in REQUIRED_FIELDS:
        if not values[name]:
            raise MissingRequiredField(name)

    return TicketDraft(
        summary=values["summary"],
        description=values["description"],
        project_suggestion=values["project_name_suggestion"],
    )


def parse_llm_response(raw: str) -> TicketDraft:
    """Normalize then validate *raw*; see the two steps for error semantics."""
    return validate_response(normalize_response(raw))
