"""
Output naming for md2llm.

Decides where each rule file is written, which at-tag it carries, and which
source path or URL is recorded on its snippets.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .config import (
    MANIFEST_FILE_NAME,
    README_FILE_NAME,
    OutputFormat,
    OutputInfo,
    PackageInfo,
    PackageOutputInfo,
)
from .packages import read_package_json, resolve_package
from .utils import ensure_directory, relative_posix_path, strip_markdown_extension

_NODE_MODULES_RE = re.compile(r"^node_modules/(@[^/]+/[^/]+|[^/]+)/(.*)$")


def get_output_extension(fmt: OutputFormat | str) -> str:
    """Return `.mdc` for the mdc format and `.md` otherwise."""
    return ".mdc" if fmt == OutputFormat.MDC else ".md"


def _repository_url(repository: Any) -> str | None:
    if isinstance(repository, str) and repository:
        return repository
    if isinstance(repository, dict) and repository.get("url"):
        return str(repository["url"])
    return None


def _node_modules_url(relative_path: str, repo_root: Path) -> str | None:
    """Homepage or repository URL of the installed package a file belongs to."""
    match = _NODE_MODULES_RE.match(relative_path)
    if not match:
        return None

    manifest = read_package_json(repo_root / "node_modules" / match.group(1) / MANIFEST_FILE_NAME)
    if manifest is None:
        return None

    homepage = manifest.get("homepage")
    if isinstance(homepage, str) and homepage:
        return homepage
    return _repository_url(manifest.get("repository"))


def get_source_url(
    file_path: Path,
    *,
    source_url: str | None = None,
    repo_root: Path | None = None,
) -> str:
    """Return the source recorded on a file's snippets.

    Args:
        file_path: Markdown file being converted.
        source_url: Base URL (ending in `/`) prepended to the repo-relative path.
        repo_root: Root that relative paths are computed from (defaults to cwd).

    Returns:
        `source_url + relative path` when a base URL is given; for files inside
        `node_modules/<pkg>/` the package homepage or repository URL; otherwise
        the repo-relative path with forward slashes.
    """
    root = Path(repo_root) if repo_root else Path.cwd()
    relative_path = relative_posix_path(Path(file_path), root)

    if source_url:
        return f"{source_url}{relative_path}"

    return _node_modules_url(relative_path, root) or relative_path


def determine_output_info(
    file_path: Path,
    dest_root: Path,
    fmt: OutputFormat | str,
    *,
    source_url: str | None = None,
    repo_root: Path | None = None,
) -> OutputInfo:
    """
    Work out the output location for a file converted on its own.

    The output is named after the input file. A `README.md` that belongs to a
    package is named after the package instead, and scoped packages are nested
    under a directory named after the scope (e.g. `@acme`).

    Args:
        file_path: Markdown file being converted.
        dest_root: Destination root directory.
        fmt: Output format.
        source_url: Optional base URL for the snippets' source.
        repo_root: Root that relative source paths are computed from.

    Returns:
        OutputInfo for the file.
    """
    file_path = Path(file_path)
    output_file_name = strip_markdown_extension(file_path.name)
    at_tag = output_file_name
    output_dir = Path(dest_root)

    if file_path.name == README_FILE_NAME:
        package = resolve_package(file_path)
        if package is not None:
            output_file_name = package.name
            at_tag = package.name
            if package.scope:
                output_dir = ensure_directory(output_dir / package.scope)

    return OutputInfo(
        output_path=output_dir / f"{output_file_name}{get_output_extension(fmt)}",
        output_dir=output_dir,
        output_file_name=output_file_name,
        at_tag=at_tag,
        source=get_source_url(file_path, source_url=source_url, repo_root=repo_root),
    )


def determine_package_output_info(
    package_info: PackageInfo,
    dest_root: Path,
    fmt: OutputFormat | str,
) -> PackageOutputInfo:
    """
    Create the output directory for a package with several documentation files.

    The directory is `dest_root/<scope>/<name>` for scoped packages and
    `dest_root/<name>` otherwise.
    """
    package_dir = Path(dest_root)
    if package_info.scope:
        package_dir = package_dir / package_info.scope
    package_dir = ensure_directory(package_dir / package_info.name)

    return PackageOutputInfo(
        package_dir=package_dir,
        package_name=package_info.name,
        package_scope=package_info.scope,
    )


def determine_package_file_output_info(
    file_path: Path,
    package_output: PackageOutputInfo,
    fmt: OutputFormat | str,
    *,
    source_url: str | None = None,
    repo_root: Path | None = None,
) -> OutputInfo:
    """Output location for one file of a multi-file package.

    Every file keeps its own base name, README included.
    """
    file_path = Path(file_path)
    output_file_name = strip_markdown_extension(file_path.name)

    return OutputInfo(
        output_path=package_output.package_dir / f"{output_file_name}{get_output_extension(fmt)}",
        output_dir=package_output.package_dir,
        output_file_name=output_file_name,
        at_tag=output_file_name,
        source=get_source_url(file_path, source_url=source_url, repo_root=repo_root),
    )
