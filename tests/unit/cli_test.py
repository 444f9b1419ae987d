"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from auto_filename.cli.app import app
from auto_filename.config import SETTINGS_ENV_VAR

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["derive"],
        ["rename"],
        ["rename-all"],
        ["rename-selection"],
        ["watch"],
    ],
    ids=["root", "derive", "rename", "rename-all", "rename-selection", "watch"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


class TestDerive:
    def test_from_text(self) -> None:
        result = runner.invoke(app, ["derive", "--text", "# Hello: World\nbody"])
        assert result.exit_code == 0
        assert result.output.strip() == "Hello World"

    def test_from_file(self, tmp_path: Path) -> None:
        file = tmp_path / "note.md"
        file.write_text("Just a plain line\nsecond line", encoding="utf-8")

        result = runner.invoke(app, ["derive", str(file), "--first-line"])

        assert result.exit_code == 0
        assert result.output.strip() == "Just a plain line..."

    def test_char_count_option(self) -> None:
        result = runner.invoke(app, ["derive", "--text", "abcdefghijklmnop", "--char-count", "10"])
        assert result.output.strip() == "abcdefghij..."

    def test_settings_file(self, tmp_path: Path) -> None:
        settings = tmp_path / "data.json"
        settings.write_text(json.dumps({"useHeader": False}), encoding="utf-8")

        result = runner.invoke(app, ["derive", "--text", "# Title", "--settings", str(settings)])

        assert result.output.strip() == "Title"

    def test_needs_exactly_one_source(self) -> None:
        result = runner.invoke(app, ["derive"])
        assert result.exit_code == 1
        assert "either a FILE or --text" in result.output

    def test_file_and_text_together(self, tmp_path: Path) -> None:
        file = tmp_path / "note.md"
        file.write_text("body", encoding="utf-8")

        result = runner.invoke(app, ["derive", str(file), "--text", "other"])

        assert result.exit_code == 1
        assert "either a FILE or --text" in result.output

    def test_file_with_byte_order_mark(self, tmp_path: Path) -> None:
        file = tmp_path / "note.md"
        file.write_bytes("\ufeff# Hello World\nbody".encode())

        result = runner.invoke(app, ["derive", str(file)])

        assert result.output.strip() == "Hello World"

    def test_invalid_settings(self, tmp_path: Path) -> None:
        settings = tmp_path / "data.json"
        settings.write_text(json.dumps({"charCount": "many"}), encoding="utf-8")

        result = runner.invoke(app, ["derive", "--text", "x", "--settings", str(settings)])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestRename:
    def test_rename_one(self, vault: Path) -> None:
        (vault / "Untitled.md").write_text("# Groceries\n- eggs", encoding="utf-8")

        result = runner.invoke(app, ["rename", str(vault), "Untitled.md"])

        assert result.exit_code == 0
        assert "Groceries.md" in result.output
        assert (vault / "Groceries.md").exists()

    def test_rename_one_nothing_to_do(self, vault: Path) -> None:
        (vault / "Groceries.md").write_text("# Groceries\n- eggs", encoding="utf-8")

        result = runner.invoke(app, ["rename", str(vault), "Groceries.md"])

        assert result.exit_code == 0
        assert "Nothing to rename" in result.output

    def test_rename_missing_document(self, vault: Path) -> None:
        result = runner.invoke(app, ["rename", str(vault), "missing.md"])

        assert result.exit_code == 1
        assert "Rename failed" in result.output

    def test_rename_all(self, vault: Path) -> None:
        (vault / "journal").mkdir()
        (vault / "a.md").write_text("Same", encoding="utf-8")
        (vault / "b.md").write_text("Same", encoding="utf-8")
        (vault / "journal" / "c.md").write_text("Entry", encoding="utf-8")

        result = runner.invoke(app, ["rename-all", str(vault)])

        assert result.exit_code == 0
        assert "Renamed 3/3 files." in result.output
        assert sorted(p.relative_to(vault).as_posix() for p in vault.rglob("*.md")) == [
            "Same (2).md",
            "Same.md",
            "journal/Entry.md",
        ]

    def test_rename_all_uses_vault_settings(self, vault: Path) -> None:
        (vault / "journal").mkdir()
        (vault / "a.md").write_text("Alpha", encoding="utf-8")
        (vault / "journal" / "b.md").write_text("Beta", encoding="utf-8")
        (vault / ".auto-filename.json").write_text(json.dumps({"includeFolders": ["journal"]}), encoding="utf-8")

        result = runner.invoke(app, ["rename-all", str(vault)])

        assert "Renamed 1/1 files." in result.output
        assert (vault / "a.md").exists()
        assert (vault / "journal" / "Beta.md").exists()

    def test_rename_selection(self, vault: Path) -> None:
        (vault / "draft.md").write_text("long body", encoding="utf-8")

        result = runner.invoke(app, ["rename-selection", str(vault), "draft.md", "Chosen: name"])

        assert result.exit_code == 0
        assert (vault / "Chosen name.md").exists()

    def test_rename_selection_empty(self, vault: Path) -> None:
        (vault / "draft.md").write_text("long body", encoding="utf-8")

        result = runner.invoke(app, ["rename-selection", str(vault), "draft.md", ""])

        assert result.exit_code == 1
        assert "Select the text" in result.output
