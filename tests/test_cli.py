"""
Tests for CLI — intl-extract command

These tests validate:
- Flags layered over the config files
- JSON output and exit status
"""

import json

import pytest

from intl_extract.cli import build_parser, main, resolve_config

from tests.test_dart_parsing import requires_tree_sitter


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty project with no user config or INTL_EXTRACT_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("intl_extract.config.ConfigManager.USER_CONFIG_FILE", tmp_path / "no-user.yaml")
    for name in ("SUPPRESS_WARNINGS", "WARNINGS_ARE_ERRORS", "ALLOW_EMBEDDED_PLURALS_AND_GENDERS",
                 "EXAMPLES_REQUIRED", "DESCRIPTION_REQUIRED", "INCLUDE_SOURCE_TEXT"):
        monkeypatch.delenv(f"INTL_EXTRACT_{name}", raising=False)


class TestResolveConfig:
    """Command line flags over config sources."""

    def test_defaults(self):
        args = build_parser().parse_args(["a.dart"])

        config = resolve_config(args)

        assert config.allow_embedded_plurals_and_genders is True
        assert config.warnings_are_errors is False

    def test_flags(self):
        args = build_parser().parse_args([
            "a.dart", "--no-embedded-plurals", "--warnings-are-errors", "--require-description",
        ])

        config = resolve_config(args)

        assert config.allow_embedded_plurals_and_genders is False
        assert config.warnings_are_errors is True
        assert config.description_required is True

    def test_project_file(self, tmp_path):
        (tmp_path / "intl_extract.yaml").write_text("include_source_text: true\n")
        args = build_parser().parse_args(["a.dart"])

        assert resolve_config(args).include_source_text is True


class TestMain:
    """Exit status and output."""

    def test_file_without_messages(self, tmp_path, capsys):
        (tmp_path / "plain.dart").write_text("void main() {}\n")

        status = main(["plain.dart"])

        assert status == 0
        assert json.loads(capsys.readouterr().out) == {}

    def test_missing_file(self, capsys):
        status = main(["missing.dart"])

        assert status == 1
        assert "cannot read missing.dart" in capsys.readouterr().err

    @requires_tree_sitter
    def test_writes_json(self, tmp_path):
        (tmp_path / "strings.dart").write_text(
            "greet(name) => Intl.message('Hello $name', name: 'greet', args: [name], desc: 'Hi');\n")

        status = main(["strings.dart", "--output", "out.json"])

        data = json.loads((tmp_path / "out.json").read_text())
        assert status == 0
        assert data == {"greet": {
            "name": "greet",
            "text": "Hello {name}",
            "arguments": ["name"],
            "description": "Hi",
        }}

    @requires_tree_sitter
    def test_first_file_wins(self, tmp_path):
        (tmp_path / "a.dart").write_text("hi() => Intl.message('Hi from a', name: 'hi');\n")
        (tmp_path / "b.dart").write_text("hi() => Intl.message('Hi from b', name: 'hi');\n")

        main(["a.dart", "b.dart", "-o", "out.json"])

        data = json.loads((tmp_path / "out.json").read_text())
        assert data["hi"]["text"] == "Hi from a"

    @requires_tree_sitter
    def test_warnings_are_errors(self, tmp_path, capsys):
        (tmp_path / "bad.dart").write_text("final a = 1, b = Intl.message('Hi', name: 'b');\n")

        assert main(["bad.dart"]) == 0
        assert main(["bad.dart", "--warnings-are-errors"]) == 1
        assert "Skipping invalid Intl.message invocation" in capsys.readouterr().err

    @requires_tree_sitter
    def test_parse_error(self, tmp_path):
        (tmp_path / "broken.dart").write_text("greet( => Intl.message('x', ;\n")

        assert main(["broken.dart", "-o", "out.json"]) == 1
