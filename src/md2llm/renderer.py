"""
Rule file renderer for md2llm.

Formats extracted snippets as `md` or `mdc` rule files.
"""

from __future__ import annotations

from collections.abc import Sequence

from .config import (
    DEFAULT_FRONTMATTER_DESCRIPTION,
    SNIPPET_SEPARATOR,
    VALID_FORMATS,
    OutputFormat,
    OutputInfo,
    RenderOptions,
    Snippet,
)


def is_valid_format(fmt: str) -> bool:
    return fmt in VALID_FORMATS


def format_snippet(snippet: Snippet | None) -> str:
    """Format one snippet as a TITLE/DESCRIPTION/SOURCE/LANGUAGE/CODE block.

    Returns an empty string for snippets without a title or without code.
    """
    if snippet is None or not snippet.title or not snippet.code:
        return ""

    language = snippet.language or "text"
    return "\n".join(
        [
            f"TITLE: {snippet.title}",
            f"DESCRIPTION: {snippet.description or ''}",
            f"SOURCE: {snippet.source or ''}",
            f"LANGUAGE: {language}",
            "CODE:",
            f"```{language}",
            snippet.code,
            "```",
            "",
            SNIPPET_SEPARATOR,
        ]
    )


def format_at_tag(at_tag: str) -> str:
    """Prefix the tag with `@` unless it already contains one."""
    if not at_tag:
        return ""
    return at_tag if "@" in at_tag else f"@{at_tag}"


def render_frontmatter(output_info: OutputInfo, options: RenderOptions) -> str:
    """Build the mdc frontmatter block.

    A glob pattern replaces `alwaysApply`; the two are never emitted together.
    """
    description = output_info.output_file_name or DEFAULT_FRONTMATTER_DESCRIPTION
    lines = ["---", f"description: {description}"]

    if options.apply_glob:
        lines.append(f'glob: "{options.apply_glob}"')
    else:
        lines.append(f"alwaysApply: {'false' if options.always_apply is False else 'true'}")

    lines.extend(["---", "", ""])
    return "\n".join(lines)


def render(
    snippets: Sequence[Snippet] | None,
    output_info: OutputInfo,
    fmt: OutputFormat | str,
    options: RenderOptions | None = None,
) -> str:
    """
    Render snippets into the content of one rule file.

    Args:
        snippets: Snippets in document order.
        output_info: Output location, used for the at-tag and mdc description.
        fmt: Output format (`md` or `mdc`).
        options: mdc frontmatter options.

    Returns:
        File content, or an empty string when there is nothing to write.
    """
    if not snippets:
        return ""

    blocks = [block for block in (format_snippet(s) for s in snippets) if block]
    if not blocks:
        return ""

    content = ""
    if fmt == OutputFormat.MDC:
        content += render_frontmatter(output_info, options or RenderOptions())

    content += "\n\n".join(blocks)
    content += f"\n{format_at_tag(output_info.at_tag)}\n"
    return content
