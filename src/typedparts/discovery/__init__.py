"""typedparts part discovery.

Inspects classes for exports and produces immutable part descriptors.

Usage::

    from typedparts.discovery import PartInspector

    inspector = PartInspector()
    part = inspector.inspect_type_for_part(GreetingService)
"""

from __future__ import annotations

from typedparts.discovery.types import (
    NO_METADATA,
    ContractKey,
    DiscoveredExport,
    DiscoveredInstanceExport,
    DiscoveredPart,
    DiscoveredPropertyExport,
    InspectionResult,
    PropertyMember,
)
from typedparts.discovery.metadata import MetadataBuilder
from typedparts.discovery.compatibility import (
    check_generic_contract_compatibility,
    check_instance_export_compatibility,
    check_property_export_compatibility,
)
from typedparts.discovery.inspector import PartInspector
from typedparts.discovery.describe import describe_part, export_parts

__all__ = [
    "NO_METADATA",
    "ContractKey",
    "DiscoveredExport",
    "DiscoveredInstanceExport",
    "DiscoveredPart",
    "DiscoveredPropertyExport",
    "InspectionResult",
    "MetadataBuilder",
    "PartInspector",
    "PropertyMember",
    "check_generic_contract_compatibility",
    "check_instance_export_compatibility",
    "check_property_export_compatibility",
    "describe_part",
    "export_parts",
]
