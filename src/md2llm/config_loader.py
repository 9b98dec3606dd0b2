"""
Configuration file loader for md2llm.

Supports loading defaults from:
- md2llm.toml / .md2llm.toml
- md2llm.yml / .md2llm.yml / md2llm.yaml / .md2llm.yaml

CLI flags override config file values.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import ConvertOptions

# Config file search order (first found wins)
CONFIG_FILE_NAMES = [
    "md2llm.toml",
    ".md2llm.toml",
    "md2llm.yml",
    ".md2llm.yml",
    "md2llm.yaml",
    ".md2llm.yaml",
]

SECTION_NAME = "md2llm"


@dataclass
class ProjectConfig:
    """
    Project-level configuration loaded from a config file.

    All fields are optional - CLI flags override any values set here.
    """

    format: str | None = None
    exclude: list[str] | None = None
    source_url: str | None = None
    always_apply: bool | None = None
    apply_glob: str | None = None

    # Source file path (for debugging)
    _config_file: Path | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert set values to a dictionary with sorted keys."""
        result: dict[str, Any] = {}

        if self.format is not None:
            result["format"] = self.format
        if self.exclude is not None:
            result["exclude"] = list(self.exclude)
        if self.source_url is not None:
            result["source_url"] = self.source_url
        if self.always_apply is not None:
            result["always_apply"] = self.always_apply
        if self.apply_glob is not None:
            result["apply_glob"] = self.apply_glob
        if self._config_file is not None:
            result["_loaded_from"] = str(self._config_file)

        return dict(sorted(result.items()))


def find_config_file(root: Path) -> Path | None:
    """
    Find a configuration file in a directory.

    Returns:
        Path to the first config file found, or None
    """
    for name in CONFIG_FILE_NAMES:
        config_path = root / name
        if config_path.is_file():
            return config_path
    return None


def _section(data: dict[str, Any]) -> dict[str, Any]:
    # Support both flat files and a nested [md2llm] section
    if SECTION_NAME in data and isinstance(data[SECTION_NAME], dict):
        return dict(data[SECTION_NAME])
    return data


def _parse_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        data: dict[str, Any] = tomllib.load(f)
    return _section(data)


def _parse_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    if not isinstance(raw_data, dict):
        return {}
    return _section(dict(raw_data))


def _normalize_exclude(value: Any) -> list[str] | None:
    """Normalize exclude input (comma-separated string or list) to a list of names."""
    if value is None:
        return None

    if isinstance(value, str):
        value = value.split(",")

    if not isinstance(value, (list, tuple, set)):
        return None

    result = [str(v).strip() for v in value if str(v).strip()]
    return result if result else None


def load_config(root: Path, config_path: Path | None = None) -> ProjectConfig:
    """
    Load configuration from a config file.

    Args:
        root: Directory searched for a config file when `config_path` is None
        config_path: Explicit path to a config file (optional)

    Returns:
        ProjectConfig with loaded values (unset values remain None). Missing or
        unparseable files give an empty config.
    """
    if config_path is None:
        config_path = find_config_file(root)

    if config_path is None or not config_path.is_file():
        return ProjectConfig()

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            data = _parse_toml(config_path)
        elif suffix in (".yml", ".yaml"):
            data = _parse_yaml(config_path)
        else:
            return ProjectConfig()
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError):
        # CLI works without a config file
        return ProjectConfig()

    config = ProjectConfig(_config_file=config_path)

    if data.get("format") is not None:
        config.format = str(data["format"]).lower()
    config.exclude = _normalize_exclude(data.get("exclude") or data.get("exclude_dirs"))
    if data.get("source_url"):
        config.source_url = str(data["source_url"])
    if "always_apply" in data:
        config.always_apply = bool(data["always_apply"])
    if data.get("apply_glob") is not None:
        config.apply_glob = str(data["apply_glob"])

    return config


def merge_cli_with_config(
    config: ProjectConfig,
    *,
    fmt: str | None = None,
    exclude: str | None = None,
    source_url: str | None = None,
    always_apply: bool | None = None,
    apply_glob: str | None = None,
    repo_root: Path | None = None,
) -> ConvertOptions:
    """Merge CLI arguments with config file values (CLI wins).

    A glob or always-apply flag given on the command line replaces both rule
    settings from the config file, so the two sources never combine into a
    conflicting pair.

    Raises:
        ConfigError: If the merged values are invalid.
    """
    if always_apply is not None or apply_glob is not None:
        merged_always_apply, merged_glob = always_apply, apply_glob
    else:
        merged_always_apply, merged_glob = config.always_apply, config.apply_glob

    return ConvertOptions(
        format=fmt or config.format or "md",
        exclude_dirs=exclude if exclude is not None else config.exclude,
        source_url=source_url or config.source_url,
        always_apply=merged_always_apply,
        apply_glob=merged_glob,
        repo_root=repo_root,
    )
