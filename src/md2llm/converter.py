"""
Conversion orchestrator for md2llm.

Collects markdown files, groups them by package, and writes one rule file per
document that contains code blocks.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from .config import (
    ConfigError,
    ConversionResult,
    ConvertOptions,
    OutputFormat,
    OutputInfo,
    PackageGroup,
    RenderOptions,
)
from .extractor import extract_snippets, parse_markdown
from .naming import (
    determine_output_info,
    determine_package_file_output_info,
    determine_package_output_info,
)
from .packages import group_files
from .renderer import render
from .scanner import collect_markdown_files
from .utils import ensure_directory, normalize_line_endings, read_file_safe, write_text_atomic

# Errors that fail a single item without stopping the batch
ITEM_ERRORS = (OSError, UnicodeError, ValueError)


def process_markdown_file(
    file_path: Path,
    output_info: OutputInfo,
    fmt: OutputFormat | str,
    render_options: RenderOptions | None = None,
) -> int:
    """
    Convert one markdown file into a rule file.

    Returns:
        Number of snippets written; 0 when the file produced no output.

    Raises:
        OSError: If the markdown file cannot be read or the output cannot be written.
    """
    text, _ = read_file_safe(file_path)
    tokens = parse_markdown(normalize_line_endings(text))
    snippets = extract_snippets(tokens, output_info.source)

    content = render(snippets, output_info, fmt, render_options)
    if not content:
        return 0

    write_text_atomic(output_info.output_path, content)
    return sum(1 for s in snippets if s.title and s.code)


class Converter:
    """
    Runs a conversion batch.

    Errors on individual files are reported and counted; the batch keeps
    going and the result reports the failure at the end.
    """

    def __init__(self, dest_root: Path, options: ConvertOptions, console: Console | None = None):
        self.dest_root = Path(dest_root)
        self.options = options
        self.console = console or Console()
        self.result = ConversionResult()

    def run(self, source_roots: Sequence[Path]) -> ConversionResult:
        ensure_directory(self.dest_root)

        files = collect_markdown_files(
            source_roots, exclude_dirs=self.options.exclude_dirs, console=self.console
        )
        self.console.print(f"Found {len(files)} documentation files to process")

        grouped = group_files(files)

        for group in grouped.package_groups:
            if group.has_multiple_files:
                self._convert_package(group)
            else:
                self._convert_file(group.files[0])

        for file_path in grouped.standalone_files:
            self._convert_file(file_path)

        return self.result

    def _convert_package(self, group: PackageGroup) -> None:
        try:
            package_output = determine_package_output_info(
                group.package_info, self.dest_root, self.options.format
            )
        except ITEM_ERRORS as e:
            for file_path in group.files:
                self._record_error(file_path, e)
            return

        for file_path in group.files:
            try:
                output_info = determine_package_file_output_info(
                    file_path,
                    package_output,
                    self.options.format,
                    source_url=self.options.source_url,
                    repo_root=self.options.repo_root,
                )
                self._write(file_path, output_info)
            except ITEM_ERRORS as e:
                self._record_error(file_path, e)

    def _convert_file(self, file_path: Path) -> None:
        try:
            output_info = determine_output_info(
                file_path,
                self.dest_root,
                self.options.format,
                source_url=self.options.source_url,
                repo_root=self.options.repo_root,
            )
            self._write(file_path, output_info)
        except ITEM_ERRORS as e:
            self._record_error(file_path, e)

    def _write(self, file_path: Path, output_info: OutputInfo) -> None:
        written = process_markdown_file(
            file_path, output_info, self.options.format, self.options.render_options
        )
        self.result.processed_count += 1

        if written == 0:
            self.result.skipped_count += 1
            self.console.print(f"[dim]No snippets found in {file_path}[/dim]")
            return

        self.result.files_written.append(output_info.output_path)
        self.console.print(f"[green]Wrote {written} snippets to {output_info.output_path}[/green]")

    def _record_error(self, file_path: Path, error: Exception) -> None:
        self.result.error_count += 1
        self.console.print(f"[red]Error processing {file_path}: {error}[/red]")


def convert(
    dest_root: Path | None,
    source_roots: Sequence[Path] | None,
    options: ConvertOptions | None = None,
    console: Console | None = None,
) -> ConversionResult:
    """
    Convert markdown documentation into rule files.

    Args:
        dest_root: Directory the rule files are written to.
        source_roots: Directories (or single files) to scan for markdown.
        options: Validated conversion options (defaults when None).
        console: Console used for progress and error output.

    Returns:
        ConversionResult with processed and error counts; `ok` is False when
        any file failed.

    Raises:
        ConfigError: If the destination or source paths are missing.
        OSError: If the destination directory cannot be created.
    """
    if not dest_root or not source_roots:
        raise ConfigError("Destination directory and source paths are required")

    return Converter(Path(dest_root), options or ConvertOptions(), console).run(
        [Path(p) for p in source_roots]
    )
