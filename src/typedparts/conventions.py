"""YAML convention files for declaring parts without decorating classes."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from typedparts.errors import ConfigError, ConfigNotFoundError, TypeResolutionError
from typedparts.provider import AttributedModelProvider, ConventionProvider

logger = logging.getLogger(__name__)

__all__ = [
    "ConventionFile",
    "ExportDeclaration",
    "PartDeclaration",
    "PropertyExportDeclaration",
    "load_conventions",
    "resolve_reference",
]


class ExportDeclaration(BaseModel):
    """One type-level export of a declared part.

    Type-level metadata is declared once on the part and applies to every
    export of it, as with ``@export_metadata`` on a class.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    contract: str | None = None
    contract_name: str | None = None


class PropertyExportDeclaration(ExportDeclaration):
    """An export of a named property of a declared part."""

    name: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class PartDeclaration(BaseModel):
    """Selects types by exact reference or by base class and applies exports."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str | None = None
    derived_from: str | None = None
    discoverable: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)
    exports: list[ExportDeclaration] = Field(default_factory=list)
    properties: list[PropertyExportDeclaration] = Field(default_factory=list)

    @model_validator(mode="after")
    def _exactly_one_selector(self) -> PartDeclaration:
        if (self.type is None) == (self.derived_from is None):
            raise ValueError("exactly one of 'type' or 'derived_from' is required")
        return self


class ConventionFile(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    parts: list[PartDeclaration] = Field(default_factory=list)


def resolve_reference(reference: str) -> Any:
    """Resolve ``'package.module:Qualified.Name'`` to the object it names."""
    if ":" not in reference:
        raise TypeResolutionError(reference=reference, reason="expected 'module.path:Name'")

    module_path, qualname = reference.split(":", 1)
    try:
        target: Any = importlib.import_module(module_path)
    except ImportError as exc:
        raise TypeResolutionError(reference=reference, reason=f"cannot import '{module_path}'") from exc

    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise TypeResolutionError(
                reference=reference,
                reason=f"'{part}' not found in '{module_path}'",
            ) from exc
    return target


def _resolve_optional(reference: str | None) -> Any:
    return resolve_reference(reference) if reference is not None else None


def _apply(declaration: PartDeclaration, conventions: ConventionProvider) -> None:
    if declaration.type is not None:
        builder = conventions.for_type(resolve_reference(declaration.type))
    else:
        builder = conventions.for_types_derived_from(resolve_reference(declaration.derived_from))

    if not declaration.discoverable:
        builder.not_discoverable()
    for export in declaration.exports:
        builder.export(
            contract_type=_resolve_optional(export.contract),
            contract_name=export.contract_name,
        )
    for name, value in declaration.metadata.items():
        builder.add_metadata(name, value)
    for prop in declaration.properties:
        builder.export_properties(
            lambda candidate, wanted=prop.name: candidate == wanted,
            contract_type=_resolve_optional(prop.contract),
            contract_name=prop.contract_name,
            metadata=prop.metadata,
        )


def load_conventions(path: str | Path, base: AttributedModelProvider | None = None) -> ConventionProvider:
    """Build a ConventionProvider from a YAML convention file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigError: If the YAML is malformed or does not match the expected layout.
        TypeResolutionError: If a referenced type cannot be imported.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigNotFoundError(config_path=str(path))

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in convention file: {path}") from e

    try:
        parsed = ConventionFile.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(message=f"Invalid convention file {path}: {e}") from e

    conventions = ConventionProvider(base=base)
    for declaration in parsed.parts:
        _apply(declaration, conventions)
    logger.info("Loaded %d part convention(s) from %s", len(parsed.parts), path)
    return conventions
