"""Export metadata merging.

Repeated metadata names never overwrite each other: the first value is kept
as a scalar and a second write promotes the entry to an ordered collection,
to which every further write appends.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from typedparts.attributes import ExportAttribute, ExportMetadataAttribute, is_metadata_attribute
from typedparts.discovery.types import NO_METADATA

logger = logging.getLogger(__name__)

__all__ = ["MetadataBuilder", "read_loose_metadata", "read_metadata_attribute"]


@dataclass(frozen=True)
class _Scalar:
    value: Any


@dataclass(frozen=True)
class _Collection:
    values: tuple[Any, ...]


_Entry = Union[_Scalar, _Collection]


class MetadataBuilder:
    """Collects metadata for a single export, in encounter order."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add_metadata(self, name: str, value: Any) -> None:
        """Add ``value`` under ``name``, merging with any earlier value."""
        existing = self._entries.get(name)
        if existing is None:
            self._entries[name] = _Scalar(value)
        elif isinstance(existing, _Collection):
            self._entries[name] = _Collection(existing.values + (value,))
        else:
            logger.debug("Metadata name '%s' repeated, promoting to a collection", name)
            self._entries[name] = _Collection((existing.value, value))

    def build(self) -> Mapping[str, Any]:
        """Finalize into a read-only mapping; collections become tuples."""
        if not self._entries:
            return NO_METADATA
        return MappingProxyType(
            {
                name: entry.values if isinstance(entry, _Collection) else entry.value
                for name, entry in self._entries.items()
            }
        )


def _declared_member_names(attribute_type: type) -> list[str]:
    """Public data members declared on the attribute class itself, in order."""
    own = inspect.get_annotations(attribute_type)
    if dataclasses.is_dataclass(attribute_type):
        names = [f.name for f in dataclasses.fields(attribute_type) if f.name in own]
    else:
        names = list(own)
    names.extend(
        name
        for name, value in vars(attribute_type).items()
        if isinstance(value, property) and value.fget is not None and name not in names
    )
    return [name for name in names if not name.startswith("_")]


def read_metadata_attribute(attribute: Any, builder: MetadataBuilder) -> None:
    """Add the declared fields of a metadata-tagged attribute to ``builder``.

    Attributes whose class is not tagged with ``@metadata_attribute``
    contribute nothing.
    """
    attribute_type = type(attribute)
    if not is_metadata_attribute(attribute_type):
        return

    for name in _declared_member_names(attribute_type):
        builder.add_metadata(name, getattr(attribute, name))


def read_loose_metadata(applied: Iterable[Any], builder: MetadataBuilder) -> None:
    """Add metadata from every non-export attribute applied to a member."""
    for attribute in applied:
        if isinstance(attribute, ExportAttribute):
            continue
        if isinstance(attribute, ExportMetadataAttribute):
            builder.add_metadata(attribute.name, attribute.value)
        else:
            read_metadata_attribute(attribute, builder)
