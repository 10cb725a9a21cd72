"""Tests for Config and PartInspector.from_config."""

from __future__ import annotations

from pathlib import Path

import pytest

import part_helpers as h
from typedparts.config import Config
from typedparts.discovery import ContractKey, PartInspector
from typedparts.errors import ConfigError, ConfigNotFoundError
from typedparts.provider import ConventionProvider, DeclaredAttributeProvider


class TestConfig:
    def test_dot_path_access(self) -> None:
        config = Config({"discovery": {"conventions": "parts.yaml"}})
        assert config.get("discovery.conventions") == "parts.yaml"

    def test_missing_key_returns_default(self) -> None:
        config = Config({"discovery": {}})
        assert config.get("discovery.conventions") is None
        assert config.get("discovery.activation_features", []) == []
        assert config.get("nothing.here", 5) == 5

    def test_non_mapping_intermediate(self) -> None:
        config = Config({"discovery": "flat"})
        assert config.get("discovery.conventions", "x") == "x"

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "typedparts.yaml"
        path.write_text("discovery:\n  activation_features:\n    - part_helpers:Plugin\n")
        config = Config.load(path)
        assert config.get("discovery.activation_features") == ["part_helpers:Plugin"]

    def test_load_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load(path).get("discovery") is None

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError) as exc_info:
            Config.load(tmp_path / "absent.yaml")
        assert exc_info.value.details["config_path"].endswith("absent.yaml")

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            Config.load(path)

    def test_load_malformed(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("discovery: {\n")
        with pytest.raises(ConfigError):
            Config.load(path)


class TestInspectorFromConfig:
    def test_empty_config(self) -> None:
        inspector = PartInspector.from_config(Config())
        assert isinstance(inspector.provider, DeclaredAttributeProvider)
        assert inspector.activation_features == ()

    def test_activation_features_resolved(self) -> None:
        config = Config({"discovery": {"activation_features": ["part_helpers:Plugin", "part_helpers:Language"]}})
        inspector = PartInspector.from_config(config)
        assert inspector.activation_features == (h.Plugin, h.Language)
        part = inspector.inspect_type_for_part(h.Greeter)
        assert part.activation_features == (h.Plugin, h.Language)

    def test_conventions_loaded(self, conventions_yaml: Path) -> None:
        config = Config({"discovery": {"conventions": str(conventions_yaml)}})
        inspector = PartInspector.from_config(config)
        assert isinstance(inspector.provider, ConventionProvider)
        part = inspector.inspect_type_for_part(h.Undecorated)
        assert part.exports[0].contract == ContractKey(h.Undecorated, "by-convention")

    def test_conventions_over_given_provider(self, conventions_yaml: Path) -> None:
        base = DeclaredAttributeProvider()
        config = Config({"discovery": {"conventions": str(conventions_yaml)}})
        inspector = PartInspector.from_config(config, provider=base)
        assert inspector.inspect_type_for_part(h.FormalGreeter) is not None

    def test_provider_used_without_conventions(self) -> None:
        conventions = ConventionProvider()
        inspector = PartInspector.from_config(Config(), provider=conventions)
        assert inspector.provider is conventions
