"""Discovery types: ContractKey, DiscoveredExport variants, DiscoveredPart."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from typedparts.errors import TypedPartsError

__all__ = [
    "NO_METADATA",
    "ContractKey",
    "DiscoveredExport",
    "DiscoveredInstanceExport",
    "DiscoveredPart",
    "DiscoveredPartBuilder",
    "DiscoveredPropertyExport",
    "InspectionResult",
    "PropertyMember",
]

NO_METADATA: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class ContractKey:
    """Identity of an export: a contract type plus an optional contract name."""

    contract_type: Any
    contract_name: str | None = None

    def __str__(self) -> str:
        type_name = getattr(self.contract_type, "__qualname__", None) or repr(self.contract_type)
        if self.contract_name:
            return f"{type_name} \"{self.contract_name}\""
        return type_name


@dataclass(frozen=True)
class PropertyMember:
    """A public, readable property of a part type."""

    name: str
    descriptor: property = field(repr=False)
    declaring_type: type

    def get_value(self, instance: Any) -> Any:
        return self.descriptor.__get__(instance, type(instance))


@dataclass(frozen=True)
class DiscoveredExport:
    """Base for exports found on a part. Metadata is final once constructed."""

    contract: ContractKey
    metadata: Mapping[str, Any] = field(hash=False)


@dataclass(frozen=True)
class DiscoveredInstanceExport(DiscoveredExport):
    """The activated part instance itself is the exported value."""


@dataclass(frozen=True)
class DiscoveredPropertyExport(DiscoveredExport):
    """The value of a property of the activated part instance is exported."""

    member: PropertyMember

    def get_value(self, instance: Any) -> Any:
        """Read the exported value from an activated part instance."""
        return self.member.get_value(instance)


@dataclass(frozen=True)
class DiscoveredPart:
    """A class that declares at least one export.

    Attributes:
        part_type: The inspected class.
        activation_features: Opaque features forwarded unchanged from the inspector.
        exports: Exports in discovery order (instance exports first).
    """

    part_type: type
    activation_features: tuple[Any, ...] = field(hash=False)
    exports: tuple[DiscoveredExport, ...]


class DiscoveredPartBuilder:
    """Accumulates exports for one part type; created on the first export."""

    def __init__(self, part_type: type, activation_features: tuple[Any, ...]) -> None:
        self._part_type = part_type
        self._activation_features = activation_features
        self._exports: list[DiscoveredExport] = []

    def add_discovered_export(self, export: DiscoveredExport) -> None:
        self._exports.append(export)

    def build(self) -> DiscoveredPart:
        return DiscoveredPart(
            part_type=self._part_type,
            activation_features=self._activation_features,
            exports=tuple(self._exports),
        )


@dataclass(frozen=True)
class InspectionResult:
    """Outcome of inspecting one type without raising.

    Exactly one of ``part`` or ``error`` is set when the type is a part or is
    defective; both are ``None`` when the type simply declares no exports.
    """

    part_type: Any
    part: DiscoveredPart | None = None
    error: TypedPartsError | None = field(default=None, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.error is None
