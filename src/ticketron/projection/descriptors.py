"""Explicit member descriptor tables for records exposed to field projection.

The resolver never inspects record instances to discover their members.
Instead each exposed record type is registered once, at class-definition
time, with a table of :class:`FieldDescriptor` entries::

    @record_type
    class Status(BaseModel):
        name: str = ""

For pydantic models the table is derived from the class's declared fields:
the declared attribute name, its serialization alias (falling back to the
name) and whether the field is excluded from serialization. Types that are
not pydantic models can be registered by hand with :func:`register_record`.

Both the name and alias columns are folded to one canonical case when the
table is built, so a lookup is a dictionary hit instead of two scans.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=type)


class FieldDescriptor(NamedTuple):
    """One member of a record type.

    Attributes:
        name: The declared attribute name (``issue_type``).
        alias: The key the member is encoded under (``issuetype``).
        excluded: ``True`` when the member is never serialized; such a
            member cannot be resolved by name or by alias.
    """

    name: str
    alias: str
    excluded: bool = False


class DescriptorTable:
    """Case-folded lookup over the descriptors of one record type.

    When two members collide on the same folded key, the one declared first
    wins. A declared-name match always takes precedence over an alias match,
    even when the alias belongs to a different member.
    """

    def __init__(self, descriptors: Iterable[FieldDescriptor]) -> None:
        self.descriptors: tuple[FieldDescriptor, ...] = tuple(descriptors)
        self._by_name: dict[str, FieldDescriptor] = {}
        self._by_alias: dict[str, FieldDescriptor] = {}
        for descriptor in self.descriptors:
            self._by_name.setdefault(descriptor.name.casefold(), descriptor)
            self._by_alias.setdefault(descriptor.alias.casefold(), descriptor)

    def lookup(self, segment: str) -> Optional[FieldDescriptor]:
        """Find the member addressed by *segment*, or ``None``."""
        key = segment.casefold()
        by_name = self._by_name.get(key)
        if by_name is not None and not by_name.excluded:
            return by_name
        by_alias = self._by_alias.get(key)
        if by_alias is not None and not by_alias.excluded:
            return by_alias
        return None

    def __len__(self) -> int:
        return len(self.descriptors)


_REGISTRY: dict[type, DescriptorTable] = {}


def model_descriptors(model: type[BaseModel]) -> list[FieldDescriptor]:
    """Build descriptors from a pydantic model class's declared fields."""
    descriptors = []
    for name, field in model.model_fields.items():
        alias = field.serialization_alias or field.alias or name
        descriptors.append(FieldDescriptor(name=name, alias=alias, excluded=bool(field.exclude)))
    return descriptors


def register_record(cls: type, descriptors: Iterable[FieldDescriptor]) -> DescriptorTable:
    """Register an explicit descriptor table for *cls* and return it."""
    table = DescriptorTable(descriptors)
    _REGISTRY[cls] = table
    return table


def record_type(cls: T) -> T:
    """Class decorator registering a pydantic model for field projection."""
    if not (isinstance(cls, type) and issubclass(cls, BaseModel)):
        raise TypeError(f"@record_type expects a pydantic model class, got {cls!r}")
    register_record(cls, model_descriptors(cls))
    return cls


def descriptors_for(cls: type) -> Optional[DescriptorTable]:
    """Return the table registered for *cls* or its nearest registered base."""
    for klass in cls.__mro__:
        table = _REGISTRY.get(klass)
        if table is not None:
            return table
    return None
