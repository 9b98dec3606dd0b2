"""Tests for the command-line interface."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from md2llm import __version__
from md2llm.cli import app

runner = CliRunner()

DOC = "# Install\n\nRun the installer.\n\n```sh\n./install.sh\n```\n"


@pytest.fixture
def docs_dir(tmp_path, monkeypatch):
    """A docs tree with one document, with the cwd set to tmp_path."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "setup.md").write_text(DOC)
    return tmp_path / "docs"


def test_basic_conversion(docs_dir, tmp_path) -> None:
    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir)])

    assert result.exit_code == 0, result.output
    content = (tmp_path / "rules" / "setup.md").read_text()
    assert "SOURCE: docs/setup.md\n" in content
    assert content.endswith("\n@setup\n")


def test_mdc_format_with_glob(docs_dir, tmp_path) -> None:
    result = runner.invoke(
        app, [str(tmp_path / "rules"), str(docs_dir), "--format", "mdc", "--apply-glob", "*.sh"]
    )

    assert result.exit_code == 0, result.output
    assert 'glob: "*.sh"' in (tmp_path / "rules" / "setup.mdc").read_text()


def test_no_always_apply(docs_dir, tmp_path) -> None:
    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir), "-f", "mdc", "--no-always-apply"])

    assert result.exit_code == 0, result.output
    assert "alwaysApply: false" in (tmp_path / "rules" / "setup.mdc").read_text()


def test_glob_with_always_apply_is_rejected(docs_dir, tmp_path) -> None:
    """Test that the conflict is reported before anything is written."""
    result = runner.invoke(
        app,
        [str(tmp_path / "rules"), str(docs_dir), "-f", "mdc", "--always-apply", "--apply-glob", "*.ts"],
    )

    assert result.exit_code == 1
    assert not (tmp_path / "rules").exists()


def test_invalid_format(docs_dir, tmp_path) -> None:
    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir), "--format", "txt"])

    assert result.exit_code != 0
    assert not (tmp_path / "rules").exists()


def test_invalid_source_url(docs_dir, tmp_path) -> None:
    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir), "--source-url", "example.com"])

    assert result.exit_code == 1
    assert "Invalid source URL" in result.output
    assert not (tmp_path / "rules").exists()


def test_source_url(docs_dir, tmp_path) -> None:
    result = runner.invoke(
        app, [str(tmp_path / "rules"), str(docs_dir), "-s", "https://github.com/u/r/blob/main"]
    )

    assert result.exit_code == 0, result.output
    content = (tmp_path / "rules" / "setup.md").read_text()
    assert "SOURCE: https://github.com/u/r/blob/main/docs/setup.md\n" in content


def test_config_file_is_used(docs_dir, tmp_path) -> None:
    (tmp_path / "md2llm.toml").write_text('[md2llm]\nformat = "mdc"\n')

    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "rules" / "setup.mdc").is_file()


def test_failure_exit_code(docs_dir, tmp_path) -> None:
    """Test that a per-file failure makes the command fail after the batch."""
    (tmp_path / "rules").mkdir()
    # Directory in the place of the output file
    (tmp_path / "rules" / "setup.md").mkdir()
    (docs_dir / "other.md").write_text(DOC)

    result = runner.invoke(app, [str(tmp_path / "rules"), str(docs_dir)])

    assert result.exit_code == 1
    assert (tmp_path / "rules" / "other.md").is_file()


def test_missing_sources(tmp_path) -> None:
    result = runner.invoke(app, [str(tmp_path / "rules")])
    assert result.exit_code != 0


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
