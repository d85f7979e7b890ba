"""Path-addressed field projection over nested records.

Sub-modules:

* :mod:`~ticketron.projection.descriptors` -- explicit per-type member
  tables (declared name, serialization alias, excluded flag) registered with
  :func:`record_type`.
* :mod:`~ticketron.projection.resolver` -- :func:`resolve_path`, which walks
  one dot-separated path through records, mappings and ``None``.
* :mod:`~ticketron.projection.projector` -- ordered per-record projections
  for a list of requested paths.
* :mod:`~ticketron.projection.encoder` -- text/JSON/YAML/TSV rendering. It is
  not re-exported here because it depends on :mod:`ticketron.models`, which
  itself registers its records through this package.
"""

from ticketron.projection.descriptors import (
    DescriptorTable,
    FieldDescriptor,
    descriptors_for,
    record_type,
    register_record,
)
from ticketron.projection.projector import parse_field_list, project_record, project_records
from ticketron.projection.resolver import MAX_PATH_DEPTH, resolve_path

__all__ = [
    "DescriptorTable",
    "FieldDescriptor",
    "MAX_PATH_DEPTH",
    "descriptors_for",
    "parse_field_list",
    "project_record",
    "project_records",
    "record_type",
    "register_record",
    "resolve_path",
]
