"""
CLI entry point for md2llm.

Converts markdown documentation into rule files for LLM/IDE consumption.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .config import ConfigError, OutputFormat
from .config_loader import load_config, merge_cli_with_config
from .converter import convert

# Initialize CLI app
app = typer.Typer(
    name="md2llm",
    help="A CLI tool for converting markdown to LLM rules.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"md2llm version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    dest: Path = typer.Argument(
        ...,
        help="Destination directory for output files.",
        file_okay=False,
        dir_okay=True,
    ),
    sources: List[Path] = typer.Argument(
        ...,
        help="Source directories (or markdown files) to convert.",
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--format", "-f",
        help="Output format: 'md' or 'mdc' (default: md).",
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude", "-e",
        help=(
            "Comma-separated directory names to exclude "
            "(default: images,node_modules,dist,build,coverage,test,cjs,generator,lib,src)."
        ),
    ),
    source_url: Optional[str] = typer.Option(
        None,
        "--source-url", "-s",
        help="Base URL for source links (e.g., https://github.com/user/repo/blob/main/).",
    ),
    always_apply: Optional[bool] = typer.Option(
        None,
        "--always-apply/--no-always-apply",
        help="Set alwaysApply in mdc frontmatter (default: true).",
    ),
    apply_glob: Optional[str] = typer.Option(
        None,
        "--apply-glob",
        help="Use a glob pattern instead of alwaysApply in mdc frontmatter.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to a config file (default: md2llm.toml or .md2llm.yml in the current directory).",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    version: bool = typer.Option(
        False,
        "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """
    Convert markdown files under SOURCES into rule files in DEST.

    Examples:

        # Convert a docs tree into .md rules
        md2llm ./rules ./docs

        # Cursor-style .mdc rules scoped to TypeScript files
        md2llm ./.cursor/rules ./packages --format mdc --apply-glob "**/*.ts"

        # Link snippets back to GitHub
        md2llm ./rules ./docs -s https://github.com/user/repo/blob/main/
    """
    try:
        project_config = load_config(Path.cwd(), config_path)
        options = merge_cli_with_config(
            project_config,
            fmt=output_format.value if output_format else None,
            exclude=exclude,
            source_url=source_url,
            always_apply=always_apply,
            apply_glob=apply_glob,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"Converting markdown files from {', '.join(str(s) for s in sources)} to {dest}")
    console.print(f"Output format: {options.format.value}")
    console.print(f"Excluding directories: {', '.join(options.exclude_dirs)}")

    try:
        result = convert(dest, sources, options, console=console)
    except (ConfigError, OSError) as e:
        console.print(f"[red]Error during conversion: {e}[/red]")
        raise typer.Exit(1)

    console.print()
    console.print("[cyan]Conversion completed:[/cyan]")
    console.print(f"  Files processed: {result.processed_count}")
    console.print(f"  Files written: {len(result.files_written)}")
    console.print(f"  Errors: {result.error_count}")
    console.print(f"  Output directory: {dest}")

    if not result.ok:
        console.print(f"[red]Conversion failed for {result.error_count} file(s).[/red]")
        raise typer.Exit(1)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
