"""Attribute providers: the only way discovery reads declarative metadata.

``AttributedModelProvider`` is the seam between part discovery and the source
of attributes. ``DeclaredAttributeProvider`` reads the attributes attached by
the decorators in :mod:`typedparts.attributes`; ``ConventionProvider`` layers
rule-based attributes over another provider so that classes can become parts
without being decorated.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from typedparts.attributes import (
    ExportAttribute,
    ExportMetadataAttribute,
    PartNotDiscoverableAttribute,
    declared_attributes,
)
from typedparts.discovery.types import PropertyMember
from typedparts.errors import DuplicateAttributeError

logger = logging.getLogger(__name__)

__all__ = [
    "AttributedModelProvider",
    "ConventionProvider",
    "DeclaredAttributeProvider",
    "PartConventionBuilder",
]

_A = TypeVar("_A")


def _member_name(reflected_type: type, member: Any) -> str:
    if isinstance(member, PropertyMember):
        return f"{reflected_type.__qualname__}.{member.name}"
    return reflected_type.__qualname__


class AttributedModelProvider(ABC):
    """Supplies the attributes applied to a type or to one of its properties.

    ``member`` is either the reflected type itself (type-level attributes) or a
    :class:`~typedparts.discovery.types.PropertyMember` of it.
    """

    @abstractmethod
    def get_declared_attributes(
        self,
        reflected_type: type,
        member: Any,
        kind: type | None = None,
    ) -> list[Any]:
        """Return the attributes on ``member``, optionally only those of ``kind``."""

    def get_declared_attribute(self, kind: type[_A], reflected_type: type, member: Any) -> _A | None:
        """Return the single attribute of ``kind`` on ``member``, or None.

        Raises:
            DuplicateAttributeError: If more than one attribute of ``kind`` is present.
        """
        found = self.get_declared_attributes(reflected_type, member, kind)
        if not found:
            return None
        if len(found) > 1:
            raise DuplicateAttributeError(
                kind=kind,
                member=_member_name(reflected_type, member),
                count=len(found),
            )
        return found[0]


def _filter(attributes: list[Any], kind: type | None) -> list[Any]:
    if kind is None:
        return attributes
    return [a for a in attributes if isinstance(a, kind)]


class DeclaredAttributeProvider(AttributedModelProvider):
    """Reads attributes attached with ``@export``, ``@export_metadata`` and ``@annotate``."""

    def get_declared_attributes(
        self,
        reflected_type: type,
        member: Any,
        kind: type | None = None,
    ) -> list[Any]:
        target = member.descriptor if isinstance(member, PropertyMember) else member
        return _filter(list(declared_attributes(target)), kind)


class PartConventionBuilder:
    """Attributes that a convention applies to every type it selects."""

    def __init__(self, predicate: Callable[[type], bool]) -> None:
        self._predicate = predicate
        self._type_attributes: list[Any] = []
        self._property_rules: list[tuple[Callable[[str], bool], list[Any]]] = []

    def matches(self, reflected_type: type) -> bool:
        return self._predicate(reflected_type)

    def export(
        self,
        contract_type: Any = None,
        contract_name: str | None = None,
    ) -> PartConventionBuilder:
        """Export selected types. Metadata from add_metadata applies to every such export."""
        self._type_attributes.append(ExportAttribute(contract_type=contract_type, contract_name=contract_name))
        return self

    def export_properties(
        self,
        predicate: Callable[[str], bool],
        contract_type: Any = None,
        contract_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PartConventionBuilder:
        """Export every property whose name satisfies ``predicate``."""
        attributes: list[Any] = [ExportAttribute(contract_type=contract_type, contract_name=contract_name)]
        attributes.extend(ExportMetadataAttribute(name=k, value=v) for k, v in (metadata or {}).items())
        self._property_rules.append((predicate, attributes))
        return self

    def add_metadata(self, name: str, value: Any) -> PartConventionBuilder:
        self._type_attributes.append(ExportMetadataAttribute(name=name, value=value))
        return self

    def not_discoverable(self) -> PartConventionBuilder:
        self._type_attributes.append(PartNotDiscoverableAttribute())
        return self

    def attributes_for(self, reflected_type: type, member: Any) -> list[Any]:
        if isinstance(member, PropertyMember):
            result: list[Any] = []
            for predicate, attributes in self._property_rules:
                if predicate(member.name):
                    result.extend(attributes)
            return result
        if member is reflected_type:
            return list(self._type_attributes)
        return []


class ConventionProvider(AttributedModelProvider):
    """Adds convention attributes after those supplied by ``base``.

    Example:
        conventions = ConventionProvider()
        conventions.for_types_derived_from(Handler).export(contract_type=Handler)
        inspector = PartInspector(conventions)
    """

    def __init__(self, base: AttributedModelProvider | None = None) -> None:
        self._base = base if base is not None else DeclaredAttributeProvider()
        self._conventions: list[PartConventionBuilder] = []

    def for_types_matching(self, predicate: Callable[[type], bool]) -> PartConventionBuilder:
        builder = PartConventionBuilder(predicate)
        self._conventions.append(builder)
        return builder

    def for_type(self, target: type) -> PartConventionBuilder:
        return self.for_types_matching(lambda t: t is target)

    def for_types_derived_from(self, base: type) -> PartConventionBuilder:
        """Select strict subclasses of ``base``."""
        return self.for_types_matching(lambda t: inspect.isclass(t) and t is not base and issubclass(t, base))

    def get_declared_attributes(
        self,
        reflected_type: type,
        member: Any,
        kind: type | None = None,
    ) -> list[Any]:
        attributes = list(self._base.get_declared_attributes(reflected_type, member))
        for convention in self._conventions:
            if convention.matches(reflected_type):
                added = convention.attributes_for(reflected_type, member)
                if added:
                    logger.debug(
                        "Convention added %d attribute(s) to %s",
                        len(added),
                        _member_name(reflected_type, member),
                    )
                attributes.extend(added)
        return _filter(attributes, kind)
