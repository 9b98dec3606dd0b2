"""
Configuration models and defaults for md2llm.

Holds the constants shared by the pipeline, the dataclasses passed between
stages, and the validated `ConvertOptions` used by the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ConfigError(ValueError):
    """Invalid configuration detected before any file is processed."""

    pass


class OutputFormat(str, Enum):
    """Output format for generated rule files."""

    MD = "md"
    MDC = "mdc"


VALID_FORMATS: tuple[str, ...] = tuple(f.value for f in OutputFormat)

# Directory names skipped while collecting markdown files
DEFAULT_EXCLUDE_DIRS: list[str] = [
    "images",
    "node_modules",
    "dist",
    "build",
    "coverage",
    "test",
    "cjs",
    "generator",
    "lib",
    "src",
]

# Markdown files that are never treated as documentation (matched on base name)
EXCLUDED_DOC_FILES: frozenset[str] = frozenset(
    {
        "CHANGELOG.md",
        "CONTRIBUTING.md",
        "CODE_OF_CONDUCT.md",
        "SECURITY.md",
        "LICENSE.md",
    }
)

MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md", ".markdown")

MANIFEST_FILE_NAME = "package.json"
README_FILE_NAME = "README.md"

# How many ancestor directories are searched for a package manifest
MAX_PACKAGE_DEPTH = 3

SNIPPET_SEPARATOR = "-" * 40
DEFAULT_FRONTMATTER_DESCRIPTION = "Generated LLM rules"


@dataclass(frozen=True)
class Snippet:
    """A code block extracted from a markdown document.

    Attributes:
        title: Nearest preceding heading, or `Snippet N`.
        description: Text immediately preceding the code block (may be empty).
        source: Path or URL the snippet came from.
        language: Fence info string, `text` when absent.
        code: Code block content, trimmed.
    """

    title: str
    description: str = ""
    source: str = ""
    language: str = "text"
    code: str = ""


@dataclass
class PackageInfo:
    """A package manifest that owns one or more documentation files.

    Attributes:
        name: Package name without its scope (never empty).
        scope: `@scope` prefix, or None for unscoped packages.
        directory: Directory containing the manifest.
        manifest_path: Path to the manifest file itself (the grouping key).
        manifest: Parsed manifest content.
    """

    name: str
    scope: str | None
    directory: Path
    manifest_path: Path
    manifest: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def full_name(self) -> str:
        """Return the package name as declared in the manifest."""
        return f"{self.scope}/{self.name}" if self.scope else self.name


@dataclass
class PackageGroup:
    """Markdown files that resolve to the same package manifest."""

    package_info: PackageInfo
    files: list[Path] = field(default_factory=list)

    @property
    def has_multiple_files(self) -> bool:
        return len(self.files) > 1

    @property
    def readme_file(self) -> Path | None:
        """Return the group's README.md, if it has one."""
        for file_path in self.files:
            if file_path.name.lower() == README_FILE_NAME.lower():
                return file_path
        return None


@dataclass
class GroupedFiles:
    """Result of partitioning input files by package."""

    package_groups: list[PackageGroup] = field(default_factory=list)
    standalone_files: list[Path] = field(default_factory=list)


@dataclass
class OutputInfo:
    """Where and under which tag one rule file is written.

    Attributes:
        output_path: Full path of the file to write.
        output_dir: Directory the file is written into.
        output_file_name: File name without extension (also the mdc description).
        at_tag: Handle appended to the end of the rule file.
        source: Source path or URL recorded on every snippet.
    """

    output_path: Path
    output_dir: Path
    output_file_name: str
    at_tag: str
    source: str


@dataclass
class PackageOutputInfo:
    """Output directory for a package with several documentation files."""

    package_dir: Path
    package_name: str
    package_scope: str | None = None


@dataclass
class RenderOptions:
    """Frontmatter options for the `mdc` format.

    `apply_glob` takes precedence over `always_apply` when both are set.
    """

    always_apply: bool = True
    apply_glob: str | None = None


@dataclass
class ConversionResult:
    """Counters gathered over one conversion run."""

    processed_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    files_written: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error_count == 0


def parse_exclude_dirs(value: Any) -> list[str]:
    """Parse comma-separated directory names.

    Accepts a string or a list. Blank input falls back to `DEFAULT_EXCLUDE_DIRS`.
    """
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = [str(v) for v in value]
    else:
        return DEFAULT_EXCLUDE_DIRS.copy()

    parsed = [item.strip() for item in items if item.strip()]
    return parsed if parsed else DEFAULT_EXCLUDE_DIRS.copy()


def normalize_source_url(url: str | None) -> str | None:
    """Validate a source URL base and make sure it ends with a slash.

    Raises:
        ConfigError: If the URL is not an http(s) URL.
    """
    if not url:
        return None

    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid source URL: {url}. Must start with http:// or https://")

    return url if url.endswith("/") else f"{url}/"


@dataclass
class ConvertOptions:
    """Validated options for a conversion run.

    Attributes:
        format: Output format (`md` or `mdc`).
        exclude_dirs: Directory names skipped during collection (case-insensitive).
        source_url: Optional base URL prepended to repo-relative source paths.
        always_apply: Explicit mdc `alwaysApply` value, None when not given.
        apply_glob: mdc glob pattern, mutually exclusive with an explicit `always_apply`.
        repo_root: Directory source paths are made relative to (defaults to cwd).
    """

    format: OutputFormat = OutputFormat.MD
    exclude_dirs: list[str] = field(default_factory=lambda: DEFAULT_EXCLUDE_DIRS.copy())
    source_url: str | None = None
    always_apply: bool | None = None
    apply_glob: str | None = None
    repo_root: Path | None = None

    def __post_init__(self) -> None:
        """Validate and normalize options.

        Raises:
            ConfigError: On an unknown format, invalid source URL, blank glob, or
                a glob combined with an explicit always-apply flag.
        """
        try:
            self.format = OutputFormat(self.format)
        except ValueError:
            raise ConfigError(
                f"Invalid format: {self.format}. Must be one of: {', '.join(VALID_FORMATS)}"
            ) from None

        self.exclude_dirs = parse_exclude_dirs(self.exclude_dirs)
        self.source_url = normalize_source_url(self.source_url)

        if self.apply_glob is not None:
            if not isinstance(self.apply_glob, str) or not self.apply_glob.strip():
                raise ConfigError("Apply glob pattern must be a non-empty string")
            self.apply_glob = self.apply_glob.strip()
            if self.always_apply is not None:
                raise ConfigError("Cannot use both --always-apply and --apply-glob")

        self.repo_root = Path(self.repo_root).resolve() if self.repo_root else Path.cwd()

    @property
    def render_options(self) -> RenderOptions:
        """Frontmatter options derived from the always-apply / glob settings."""
        always_apply = True if self.always_apply is None else self.always_apply
        return RenderOptions(always_apply=always_apply, apply_glob=self.apply_glob)
