"""
Tests for Config — Extraction settings and their sources

These tests validate:
- Config hierarchy (env > project > user > defaults)
- YAML and environment spellings of booleans
- Validation returns an error string instead of raising
"""

import pytest
import yaml

from intl_extract.config import ConfigManager, ExtractionConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """No INTL_EXTRACT_* variables leak in from the host."""
    for name in ("SUPPRESS_WARNINGS", "WARNINGS_ARE_ERRORS", "ALLOW_EMBEDDED_PLURALS_AND_GENDERS",
                 "EXAMPLES_REQUIRED", "DESCRIPTION_REQUIRED", "INCLUDE_SOURCE_TEXT"):
        monkeypatch.delenv(f"INTL_EXTRACT_{name}", raising=False)


def manager(tmp_path):
    return ConfigManager(tmp_path / "project", user_config_path=tmp_path / "user" / "config.yaml")


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data))


class TestExtractionConfig:
    """Settings dataclass."""

    def test_defaults(self):
        config = ExtractionConfig()

        assert config.suppress_warnings is False
        assert config.warnings_are_errors is False
        assert config.allow_embedded_plurals_and_genders is True
        assert config.examples_required is False
        assert config.description_required is False
        assert config.include_source_text is False
        assert config.validate() is None

    def test_from_dict_coerces_strings(self):
        config = ExtractionConfig.from_dict({"suppress_warnings": "yes", "include_source_text": "0"})

        assert config.suppress_warnings is True
        assert config.include_source_text is False

    def test_from_dict_ignores_unknown(self):
        config = ExtractionConfig.from_dict({"output_format": "arb"})

        assert config == ExtractionConfig()

    def test_validate_rejects_non_bool(self):
        config = ExtractionConfig.from_dict({"examples_required": "sometimes"})

        error = config.validate()

        assert "examples_required" in error

    def test_round_trip_dict(self):
        config = ExtractionConfig(warnings_are_errors=True)

        assert ExtractionConfig.from_dict(config.to_dict()) == config


class TestConfigManager:
    """Layered loading and saving."""

    def test_defaults_without_files(self, tmp_path):
        assert manager(tmp_path).load() == ExtractionConfig()

    def test_user_config(self, tmp_path):
        write_yaml(tmp_path / "user" / "config.yaml", {"suppress_warnings": True})

        assert manager(tmp_path).load().suppress_warnings is True

    def test_project_overrides_user(self, tmp_path):
        write_yaml(tmp_path / "user" / "config.yaml", {"warnings_are_errors": True})
        write_yaml(tmp_path / "project" / "intl_extract.yaml", {"warnings_are_errors": False})

        assert manager(tmp_path).load().warnings_are_errors is False

    def test_environment_overrides_project(self, tmp_path, monkeypatch):
        write_yaml(tmp_path / "project" / "intl_extract.yaml", {"description_required": False})
        monkeypatch.setenv("INTL_EXTRACT_DESCRIPTION_REQUIRED", "true")

        assert manager(tmp_path).load().description_required is True

    def test_malformed_yaml_ignored(self, tmp_path):
        path = tmp_path / "project" / "intl_extract.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("suppress_warnings: [unclosed")

        assert manager(tmp_path).load() == ExtractionConfig()

    def test_set_saves_project_config(self, tmp_path):
        error = manager(tmp_path).set("examples_required", "true")

        assert error is None
        assert manager(tmp_path).load().examples_required is True
        saved = yaml.safe_load((tmp_path / "project" / "intl_extract.yaml").read_text())
        assert saved["examples_required"] is True

    def test_set_unknown_key(self, tmp_path):
        error = manager(tmp_path).set("output_format", "arb")

        assert error.startswith("Unknown setting: output_format")

    def test_set_invalid_value(self, tmp_path):
        config_manager = manager(tmp_path)

        error = config_manager.set("examples_required", "maybe")

        assert "examples_required" in error
        assert not config_manager.project_config_path.exists()
