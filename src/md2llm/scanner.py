"""
Markdown file scanner for md2llm.

Collects markdown files from source directories (or single files), skipping
excluded directory names and non-documentation files.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from .config import EXCLUDED_DOC_FILES, MARKDOWN_EXTENSIONS


def is_markdown_file(file_name: str) -> bool:
    """Check if a file name has a markdown extension (case-insensitive)."""
    return bool(file_name) and file_name.lower().endswith(MARKDOWN_EXTENSIONS)


def is_documentation_file(file_path: Path) -> bool:
    """Check that a file is not one of the well-known non-documentation files."""
    return file_path.name not in EXCLUDED_DOC_FILES


class MarkdownScanner:
    """
    Scans source paths for markdown files.

    Directory names listed in `exclude_dirs` are skipped at any depth,
    compared case-insensitively.
    """

    def __init__(self, exclude_dirs: Iterable[str] = (), console: Console | None = None):
        """
        Initialize the scanner.

        Args:
            exclude_dirs: Directory names to skip
            console: Console used for warnings about unreadable paths
        """
        self.exclude_dirs = {d.lower() for d in exclude_dirs}
        self.console = console or Console()

    def collect(self, sources: Iterable[Path]) -> list[Path]:
        """
        Collect markdown files from every source path, in order.

        Returns:
            Absolute paths of the markdown files found
        """
        results: list[Path] = []
        for source in sources:
            results.extend(self._collect_one(Path(source)))
        return results

    def _collect_one(self, source: Path) -> list[Path]:
        try:
            if source.is_file():
                return [source.resolve()] if is_markdown_file(source.name) else []
            if source.is_dir():
                return list(self._walk_files(source.resolve()))
        except OSError as e:
            self.console.print(f"[yellow]Warning: Could not access {source}: {e}[/yellow]")
            return []

        self.console.print(f"[yellow]Warning: Could not access {source}: path does not exist[/yellow]")
        return []

    def _walk_files(self, dir_path: Path) -> Iterable[Path]:
        """Depth-first walk in sorted name order for deterministic output."""
        try:
            with os.scandir(dir_path) as entries:
                entries_list = sorted(entries, key=lambda e: e.name)
        except OSError as e:
            self.console.print(f"[yellow]Warning: Could not read directory {dir_path}: {e}[/yellow]")
            return

        for entry in entries_list:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if entry.name.lower() in self.exclude_dirs:
                        continue
                    yield from self._walk_files(Path(entry.path))
                elif entry.is_file(follow_symlinks=False) and is_markdown_file(entry.name):
                    yield Path(entry.path)
            except OSError:
                continue


def collect_markdown_files(
    sources: Iterable[Path],
    exclude_dirs: Iterable[str] = (),
    console: Console | None = None,
) -> list[Path]:
    """
    Convenience function to collect documentation markdown files.

    Runs the scanner and drops files such as CHANGELOG.md or LICENSE.md.

    Returns:
        Markdown file paths, in discovery order
    """
    scanner = MarkdownScanner(exclude_dirs=exclude_dirs, console=console)
    return [f for f in scanner.collect(sources) if is_documentation_file(f)]
