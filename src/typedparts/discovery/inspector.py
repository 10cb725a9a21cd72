"""Part inspection: decides whether a class is a part and describes its exports."""

from __future__ import annotations

import enum
import inspect
import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping

from typedparts.attributes import ExportAttribute, PartNotDiscoverableAttribute
from typedparts.conventions import load_conventions, resolve_reference
from typedparts.discovery.compatibility import (
    check_instance_export_compatibility,
    check_property_export_compatibility,
)
from typedparts.discovery.metadata import MetadataBuilder, read_loose_metadata, read_metadata_attribute
from typedparts.discovery.relations import property_type
from typedparts.discovery.types import (
    ContractKey,
    DiscoveredExport,
    DiscoveredInstanceExport,
    DiscoveredPart,
    DiscoveredPartBuilder,
    DiscoveredPropertyExport,
    InspectionResult,
    PropertyMember,
)
from typedparts.errors import TypedPartsError
from typedparts.provider import AttributedModelProvider, DeclaredAttributeProvider

if TYPE_CHECKING:
    from typedparts.config import Config

logger = logging.getLogger(__name__)

__all__ = ["PartInspector"]


def _public_properties(part_type: type) -> Iterator[PropertyMember]:
    """Public readable properties, most-derived definition first.

    A name defined by a subclass hides any base property of the same name,
    whether or not the subclass definition is itself a property.
    """
    seen: set[str] = set()
    for cls in part_type.__mro__:
        for name, value in vars(cls).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith("_") or not isinstance(value, property) or value.fget is None:
                continue
            yield PropertyMember(name=name, descriptor=value, declaring_type=cls)


class PartInspector:
    """Inspects classes for exports and produces DiscoveredPart descriptors.

    The inspector only holds its provider and activation features and never
    mutates them, so one instance may inspect many types concurrently.
    """

    def __init__(
        self,
        provider: AttributedModelProvider | None = None,
        activation_features: Iterable[Any] = (),
    ) -> None:
        """Initialize the PartInspector.

        Args:
            provider: Source of attributes. Defaults to DeclaredAttributeProvider.
            activation_features: Opaque features attached unchanged to every part.
        """
        self._provider = provider if provider is not None else DeclaredAttributeProvider()
        self._activation_features = tuple(activation_features)

    @classmethod
    def from_config(cls, config: Config, provider: AttributedModelProvider | None = None) -> PartInspector:
        """Build an inspector from ``discovery.*`` configuration keys."""
        conventions_path = config.get("discovery.conventions")
        if conventions_path:
            provider = load_conventions(conventions_path, base=provider)
        features = [resolve_reference(ref) for ref in config.get("discovery.activation_features", []) or []]
        return cls(provider=provider, activation_features=features)

    @property
    def provider(self) -> AttributedModelProvider:
        return self._provider

    @property
    def activation_features(self) -> tuple[Any, ...]:
        return self._activation_features

    # ----- Public API -----

    def inspect_type_for_part(self, part_type: Any) -> DiscoveredPart | None:
        """Return the part described by ``part_type``, or None if it is not a part.

        Raises:
            CompositionFailedError: On the first export incompatible with its contract.
            TypeResolutionError: If an exported property's return annotation cannot be resolved.
            DuplicateAttributeError: If a provider reports ambiguous attributes.
        """
        if not self._is_candidate(part_type):
            return None

        builder: DiscoveredPartBuilder | None = None
        for export in self._discover_exports(part_type):
            if builder is None:
                builder = DiscoveredPartBuilder(part_type, self._activation_features)
            builder.add_discovered_export(export)

        if builder is None:
            return None
        part = builder.build()
        logger.info("Discovered part %s with %d export(s)", part_type.__qualname__, len(part.exports))
        return part

    def try_inspect_type(self, part_type: Any) -> InspectionResult:
        """Like inspect_type_for_part, but reports inspection failures as a value.

        Any TypedPartsError raised while inspecting becomes the result's ``error``.
        """
        try:
            part = self.inspect_type_for_part(part_type)
        except TypedPartsError as e:
            return InspectionResult(part_type=part_type, error=e)
        return InspectionResult(part_type=part_type, part=part)

    def inspect_types(self, types: Iterable[Any]) -> list[InspectionResult]:
        """Inspect every type, collecting failures instead of stopping at the first."""
        results: list[InspectionResult] = []
        for part_type in types:
            result = self.try_inspect_type(part_type)
            if result.error is not None:
                logger.warning("Type %r is not a valid part: %s", part_type, result.error)
            results.append(result)
        return results

    # ----- Discovery -----

    def _is_candidate(self, part_type: Any) -> bool:
        if not inspect.isclass(part_type) or inspect.isabstract(part_type):
            return False
        if getattr(part_type, "_is_protocol", False) or issubclass(part_type, enum.Enum):
            return False
        if self._provider.get_declared_attributes(part_type, part_type, PartNotDiscoverableAttribute):
            logger.debug("Type %s is marked not discoverable", part_type.__qualname__)
            return False
        return True

    def _discover_exports(self, part_type: type) -> Iterator[DiscoveredExport]:
        yield from self._discover_instance_exports(part_type)
        yield from self._discover_property_exports(part_type)

    def _discover_instance_exports(self, part_type: type) -> Iterator[DiscoveredExport]:
        for export in self._provider.get_declared_attributes(part_type, part_type, ExportAttribute):
            applied = self._provider.get_declared_attributes(part_type, part_type)
            metadata = self._read_metadata(export, applied)

            contract_type = export.contract_type if export.contract_type is not None else part_type
            check_instance_export_compatibility(part_type, contract_type)

            contract = ContractKey(contract_type, export.contract_name)
            logger.debug("Instance export %s on %s", contract, part_type.__qualname__)
            yield DiscoveredInstanceExport(contract=contract, metadata=metadata)

    def _discover_property_exports(self, part_type: type) -> Iterator[DiscoveredExport]:
        for member in _public_properties(part_type):
            exports = self._provider.get_declared_attributes(part_type, member, ExportAttribute)
            if not exports:
                continue
            member_type = property_type(member)
            for export in exports:
                applied = self._provider.get_declared_attributes(part_type, member)
                metadata = self._read_metadata(export, applied)

                contract_type = export.contract_type if export.contract_type is not None else member_type
                check_property_export_compatibility(part_type, member, member_type, contract_type)

                contract = ContractKey(contract_type, export.contract_name)
                logger.debug("Property export %s on %s.%s", contract, part_type.__qualname__, member.name)
                yield DiscoveredPropertyExport(contract=contract, metadata=metadata, member=member)

    @staticmethod
    def _read_metadata(export: ExportAttribute, applied: list[Any]) -> Mapping[str, Any]:
        builder = MetadataBuilder()
        read_metadata_attribute(export, builder)
        read_loose_metadata(applied, builder)
        return builder.build()
