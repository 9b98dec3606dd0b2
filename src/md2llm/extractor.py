"""
Snippet extractor for md2llm.

Walks a markdown-it token stream and turns every fenced code block into a
`Snippet`, using the nearest heading as title and the text right before the
block as description.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .config import Snippet

# Same rule set as markdown-it (JS) defaults, tables included
_MD = MarkdownIt("js-default")

HEADING_OPEN = "heading_open"
INLINE = "inline"
FENCE = "fence"
PARAGRAPH_OPEN = "paragraph_open"


def parse_markdown(text: str) -> list[Token]:
    """Parse markdown text into a flat block-level token stream."""
    return _MD.parse(text)


class _ScanState(Enum):
    SCANNING = "scanning"
    FOUND = "found"
    BLOCKED = "blocked"


def _reverse_from(tokens: Sequence[Any], index: int) -> Iterator[Any]:
    """Yield the tokens before `index`, nearest first."""
    for i in range(index - 1, -1, -1):
        yield tokens[i]


def find_description(tokens: Sequence[Any], fence_index: int) -> str:
    """Return the text immediately preceding the code block at `fence_index`.

    Scans backwards: paragraph openers and other structural tokens are passed
    over, the first non-empty inline text wins, and a heading or another code
    block before any text means the block has no description.
    """
    state = _ScanState.SCANNING
    description = ""

    for token in _reverse_from(tokens, fence_index):
        token_type = getattr(token, "type", None)

        if token_type == PARAGRAPH_OPEN:
            continue
        if token_type == INLINE:
            text = (getattr(token, "content", "") or "").strip()
            if text:
                state, description = _ScanState.FOUND, text
        elif token_type in (HEADING_OPEN, FENCE):
            state = _ScanState.BLOCKED

        if state is not _ScanState.SCANNING:
            break

    return description if state is _ScanState.FOUND else ""


def _heading_text(tokens: Sequence[Any], heading_index: int) -> str:
    if heading_index + 1 < len(tokens):
        following = tokens[heading_index + 1]
        if getattr(following, "type", None) == INLINE:
            return (getattr(following, "content", "") or "").strip()
    return ""


def extract_snippets(tokens: Sequence[Any] | None, source: str) -> list[Snippet]:
    """
    Extract one snippet per fenced code block.

    Args:
        tokens: Block-level markdown tokens in document order.
        source: Path or URL recorded as the snippets' source.

    Returns:
        Snippets in document order. Code blocks without content are kept
        (with empty `code`); the renderer drops them.
    """
    if not isinstance(tokens, (list, tuple)):
        return []

    snippets: list[Snippet] = []
    current_heading = ""
    fence_count = 0

    for index, token in enumerate(tokens):
        token_type = getattr(token, "type", None)

        if token_type == HEADING_OPEN:
            current_heading = _heading_text(tokens, index)

        elif token_type == FENCE:
            fence_count += 1
            language = (getattr(token, "info", "") or "").strip()
            snippets.append(
                Snippet(
                    title=current_heading or f"Snippet {fence_count}",
                    description=find_description(tokens, index),
                    source=source,
                    language=language or "text",
                    code=(getattr(token, "content", "") or "").strip(),
                )
            )

    return snippets


def extract_snippets_from_text(text: str, source: str) -> list[Snippet]:
    """Parse markdown text and extract its snippets."""
    return extract_snippets(parse_markdown(text), source)
