"""Project records onto a caller-selected, ordered list of field paths."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from ticketron.projection.resolver import resolve_path


def parse_field_list(raw: Optional[str]) -> list[str]:
    """Split a ``--output-fields`` value on commas, trimming and dropping blanks.

    Example::

        parse_field_list(" key, ,fields.summary ")  # ["key", "fields.summary"]
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def project_record(record: Any, fields: Sequence[str]) -> dict[str, Any]:
    """Resolve every path in *fields* against *record*.

    The result has one entry per requested path, in request order. Paths
    that do not resolve map to ``None`` so that "absent" stays
    distinguishable from "present but empty".
    """
    projected: dict[str, Any] = {}
    for path in fields:
        value, found = resolve_path(record, path)
        projected[path] = value if found else None
    return projected


def project_records(records: Iterable[Any], fields: Sequence[str]) -> list[dict[str, Any]]:
    """Apply :func:`project_record` to each record independently."""
    return [project_record(record, fields) for record in records]
