"""
Package resolution and grouping for md2llm.

Finds the `package.json` that owns a markdown file and partitions input files
into package groups and standalone files.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .config import (
    MANIFEST_FILE_NAME,
    MAX_PACKAGE_DEPTH,
    GroupedFiles,
    PackageGroup,
    PackageInfo,
)

_SCOPED_NAME_RE = re.compile(r"^(@[^/]+)/(.+)$")


def parse_package_name(package_name: Any) -> tuple[str | None, str]:
    """Split an npm package name into `(scope, name)`.

    Args:
        package_name: Name as declared in the manifest, e.g. `@scope/pkg`.

    Returns:
        `("@scope", "pkg")` for scoped names, `(None, name)` otherwise and
        `(None, "")` for missing or non-string input.
    """
    if not package_name or not isinstance(package_name, str):
        return None, ""

    match = _SCOPED_NAME_RE.match(package_name)
    if match:
        return match.group(1), match.group(2)
    return None, package_name


def read_package_json(manifest_path: Path) -> dict[str, Any] | None:
    """Read and parse a package manifest.

    Returns:
        The parsed object, or None if the file is missing, unreadable, not
        valid JSON, or not a JSON object.
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None

    return data if isinstance(data, dict) else None


def _load_package(directory: Path) -> PackageInfo | None:
    manifest_path = directory / MANIFEST_FILE_NAME
    if not manifest_path.is_file():
        return None

    manifest = read_package_json(manifest_path)
    if manifest is None:
        return None

    scope, name = parse_package_name(manifest.get("name"))
    if not name:
        return None

    return PackageInfo(
        name=name,
        scope=scope,
        directory=directory,
        manifest_path=manifest_path,
        manifest=manifest,
    )


def resolve_package(file_path: Path, max_depth: int = MAX_PACKAGE_DEPTH) -> PackageInfo | None:
    """
    Find the package that owns a markdown file.

    The file's own directory is checked first, then up to `max_depth` ancestor
    directories. The nearest manifest with a non-empty name wins; unreadable
    or nameless manifests are skipped.

    Args:
        file_path: Path to the markdown file.
        max_depth: Number of ancestor directories searched above the file's directory.

    Returns:
        PackageInfo for the owning package, or None.
    """
    current_dir = Path(file_path).resolve().parent

    package = _load_package(current_dir)
    if package is not None:
        return package

    for _ in range(max_depth):
        parent_dir = current_dir.parent
        if parent_dir == current_dir:
            break

        package = _load_package(parent_dir)
        if package is not None:
            return package

        current_dir = parent_dir

    return None


def group_files(file_paths: Iterable[Path], max_depth: int = MAX_PACKAGE_DEPTH) -> GroupedFiles:
    """
    Group markdown files by the manifest that owns them.

    Files are keyed on the manifest's path, not the package name, so two
    manifests declaring the same name form separate groups. Group order and
    membership order follow the input order.

    Returns:
        GroupedFiles with package groups and the files that have no package.
    """
    groups: dict[Path, PackageGroup] = {}
    standalone: list[Path] = []

    for file_path in file_paths:
        package = resolve_package(file_path, max_depth=max_depth)
        if package is None:
            standalone.append(file_path)
            continue

        group = groups.get(package.manifest_path)
        if group is None:
            group = PackageGroup(package_info=package)
            groups[package.manifest_path] = group
        group.files.append(file_path)

    return GroupedFiles(package_groups=list(groups.values()), standalone_files=standalone)
