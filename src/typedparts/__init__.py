"""typedparts - Attributed part discovery for composition containers."""

from __future__ import annotations

# Discovery
from typedparts.discovery import (
    NO_METADATA,
    ContractKey,
    DiscoveredExport,
    DiscoveredInstanceExport,
    DiscoveredPart,
    DiscoveredPropertyExport,
    InspectionResult,
    PartInspector,
    describe_part,
    export_parts,
)

# Attributes
from typedparts.attributes import (
    ExportAttribute,
    ExportMetadataAttribute,
    PartNotDiscoverableAttribute,
    annotate,
    export,
    export_metadata,
    metadata_attribute,
    part_not_discoverable,
)

# Providers
from typedparts.provider import AttributedModelProvider, ConventionProvider, DeclaredAttributeProvider
from typedparts.conventions import load_conventions

# Config
from typedparts.config import Config

# Errors
from typedparts.errors import (
    CompositionFailedError,
    ConfigError,
    ConfigNotFoundError,
    ContractNotAssignableError,
    DuplicateAttributeError,
    ErrorCodes,
    ExportedContractTypeNotAssignableError,
    ExportNotCompatibleError,
    GenericArgumentMismatchError,
    NonGenericContractError,
    TypedPartsError,
    TypeResolutionError,
)

__version__ = "0.1.0"

__all__ = [
    # Discovery
    "PartInspector",
    "ContractKey",
    "DiscoveredPart",
    "DiscoveredExport",
    "DiscoveredInstanceExport",
    "DiscoveredPropertyExport",
    "InspectionResult",
    "NO_METADATA",
    "describe_part",
    "export_parts",
    # Attributes
    "ExportAttribute",
    "ExportMetadataAttribute",
    "PartNotDiscoverableAttribute",
    "annotate",
    "export",
    "export_metadata",
    "metadata_attribute",
    "part_not_discoverable",
    # Providers
    "AttributedModelProvider",
    "DeclaredAttributeProvider",
    "ConventionProvider",
    "load_conventions",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "TypedPartsError",
    "CompositionFailedError",
    "ContractNotAssignableError",
    "ExportedContractTypeNotAssignableError",
    "NonGenericContractError",
    "GenericArgumentMismatchError",
    "ExportNotCompatibleError",
    "DuplicateAttributeError",
    "ConfigError",
    "ConfigNotFoundError",
    "TypeResolutionError",
]
