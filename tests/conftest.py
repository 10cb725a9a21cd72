"""Shared test fixtures for the typedparts test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from typedparts.discovery import PartInspector
from typedparts.provider import ConventionProvider, DeclaredAttributeProvider


class ActivationFeatureStub:
    """Opaque activation feature; the inspector must never look inside."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"ActivationFeatureStub({self.name!r})"


@pytest.fixture
def provider() -> DeclaredAttributeProvider:
    """The default decorator-backed attribute provider."""
    return DeclaredAttributeProvider()


@pytest.fixture
def inspector(provider: DeclaredAttributeProvider) -> PartInspector:
    """Inspector with the declared-attribute provider and no activation features."""
    return PartInspector(provider)


@pytest.fixture
def conventions() -> ConventionProvider:
    """An empty convention provider over the declared-attribute provider."""
    return ConventionProvider()


@pytest.fixture
def activation_features() -> list[ActivationFeatureStub]:
    return [ActivationFeatureStub("lifetime"), ActivationFeatureStub("disposal")]


@pytest.fixture
def conventions_yaml(tmp_path: Path) -> Path:
    """Write a convention file referencing classes in part_helpers."""
    content = """
parts:
  - type: "part_helpers:Undecorated"
    metadata:
      source: yaml
    exports:
      - contract_name: "by-convention"
  - derived_from: "part_helpers:Plugin"
    metadata:
      kind: plugin
    exports:
      - contract: "part_helpers:Plugin"
  - type: "part_helpers:Greeter"
    discoverable: false
"""
    path = tmp_path / "conventions.yaml"
    path.write_text(content)
    return path
