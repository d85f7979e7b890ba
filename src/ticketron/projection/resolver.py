"""Resolve dot-separated field paths against nested records.

A path such as ``fields.status.name`` addresses a value inside an
:class:`~ticketron.models.Issue`. Traversal understands three shapes:

* **Registered records** -- pydantic models decorated with
  :func:`~ticketron.projection.descriptors.record_type`. A segment matches a
  member by declared name first, then by serialization alias, both
  case-insensitively. Members excluded from serialization never match.
* **String-keyed mappings** -- exact key first, then a case-insensitive scan.
* **Absent references** -- ``None`` anywhere along the path (or at its end)
  means "not found".

Anything else is a terminal value: if path segments remain, the path does
not resolve. Not resolving is an ordinary outcome and is reported through
the ``found`` flag, never raised.

The single public function is :func:`resolve_path`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence

from pydantic import BaseModel

from ticketron.exceptions import ProjectionError
from ticketron.projection.descriptors import descriptors_for

MAX_PATH_DEPTH = 32
"""Paths with more segments than this never resolve."""

_MISSING = object()


def resolve_path(value: Any, path: str) -> tuple[Any, bool]:
    """Resolve *path* against *value*.

    Args:
        value: A registered record, a mapping, or any other value.
        path: Dot-separated segments, e.g. ``"fields.issuetype.name"``.

    Returns:
        ``(resolved, True)`` when every segment matched and the final value
        is not ``None``; ``(None, False)`` otherwise.

    Raises:
        ProjectionError: If traversal reaches a pydantic model whose type
            was never registered for projection.

    Example::

        resolve_path(issue, "Fields.IssueType.Name")   # ("Bug", True)
        resolve_path(issue, "fields.nope")             # (None, False)
    """
    segments = path.split(".")
    if len(segments) > MAX_PATH_DEPTH:
        return None, False
    return _resolve(value, segments)


def _resolve(current: Any, segments: Sequence[str]) -> tuple[Any, bool]:
    if current is None:
        return None, False
    if not segments:
        return current, True

    segment, remaining = segments[0], segments[1:]

    table = descriptors_for(type(current))
    if table is not None:
        descriptor = table.lookup(segment)
        if descriptor is None:
            return None, False
        return _resolve(getattr(current, descriptor.name), remaining)

    if isinstance(current, BaseModel):
        raise ProjectionError(
            f"{type(current).__name__} is not registered for field projection"
        )

    if isinstance(current, Mapping):
        child = _lookup_key(current, segment)
        if child is _MISSING:
            return None, False
        return _resolve(child, remaining)

    return None, False


def _lookup_key(mapping: Mapping[Any, Any], segment: str) -> Any:
    """Exact string key first, then the first case-insensitive match."""
    if segment in mapping:
        return mapping[segment]
    folded = segment.casefold()
    for key, child in mapping.items():
        if isinstance(key, str) and key.casefold() == folded:
            return child
    return _MISSING
