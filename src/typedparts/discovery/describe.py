"""Plain-data views of discovered parts for hosts, tooling, and diagnostics."""

from __future__ import annotations

import json
from typing import Any, Iterable

import yaml

from typedparts.discovery.types import DiscoveredPart, DiscoveredPropertyExport

__all__ = ["describe_part", "export_parts", "type_name"]


def type_name(tp: Any) -> str:
    """``'module:QualName'`` for classes, ``repr()`` for generic aliases."""
    if isinstance(tp, type):
        return f"{tp.__module__}:{tp.__qualname__}"
    return repr(tp)


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, type):
        return type_name(value)
    return str(value)


def describe_part(part: DiscoveredPart) -> dict[str, Any]:
    """Build a JSON/YAML friendly dict describing ``part`` and its exports."""
    exports: list[dict[str, Any]] = []
    for export in part.exports:
        entry: dict[str, Any] = {
            "kind": "property" if isinstance(export, DiscoveredPropertyExport) else "instance",
            "contract_type": type_name(export.contract.contract_type),
            "contract_name": export.contract.contract_name,
            "metadata": {name: _plain(value) for name, value in export.metadata.items()},
        }
        if isinstance(export, DiscoveredPropertyExport):
            entry["property"] = export.member.name
        exports.append(entry)

    return {
        "part_type": type_name(part.part_type),
        "activation_features": [_plain(f) for f in part.activation_features],
        "exports": exports,
    }


def export_parts(parts: Iterable[DiscoveredPart], format: str = "json") -> str:
    """Serialize descriptions of ``parts`` as a JSON or YAML string."""
    described = [describe_part(p) for p in parts]
    if format == "json":
        return json.dumps(described, indent=2)
    if format == "yaml":
        return yaml.safe_dump(described, default_flow_style=False, sort_keys=False)
    raise ValueError(f"Unsupported format: {format!r}")
