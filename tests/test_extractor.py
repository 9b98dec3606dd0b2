"""Tests for the extractor module."""

from markdown_it.token import Token

from md2llm.extractor import (
    extract_snippets,
    extract_snippets_from_text,
    find_description,
    parse_markdown,
)


def _token(type_: str, content: str = "", info: str = "") -> Token:
    return Token(type=type_, tag="", nesting=0, content=content, info=info)


class TestExtractSnippets:
    """Tests for snippet extraction from token streams."""

    def test_end_to_end_document(self):
        """Test heading, description, language and code of a simple document."""
        text = "# Title\n\nSome desc.\n\n```js\nconsole.log(1);\n```\n"
        snippets = extract_snippets_from_text(text, "docs/guide.md")

        assert len(snippets) == 1
        snippet = snippets[0]
        assert snippet.title == "Title"
        assert snippet.description == "Some desc."
        assert snippet.language == "js"
        assert snippet.code == "console.log(1);"
        assert snippet.source == "docs/guide.md"

    def test_no_fences_gives_no_snippets(self):
        """Test that documents without code blocks produce nothing."""
        tokens = parse_markdown("# Heading\n\nJust prose.\n\n- a list\n")
        assert extract_snippets(tokens, "a.md") == []

    def test_invalid_input(self):
        """Test that None and non-list input yield an empty list."""
        assert extract_snippets(None, "a.md") == []
        assert extract_snippets("not tokens", "a.md") == []
        assert extract_snippets([], "a.md") == []

    def test_untitled_snippets_are_numbered(self):
        """Test Snippet N titles when no heading precedes the blocks."""
        text = "```\na\n```\n\ntext\n\n```\nb\n```\n\n```\nc\n```\n"
        snippets = extract_snippets_from_text(text, "a.md")

        assert [s.title for s in snippets] == ["Snippet 1", "Snippet 2", "Snippet 3"]

    def test_counter_persists_across_headings(self):
        """Test that the fallback number counts every earlier code block."""
        tokens = [
            _token("fence", content="one"),
            _token("heading_open"),
            _token("inline", content="Section"),
            _token("heading_close"),
            _token("fence", content="two"),
            _token("heading_open"),
            _token("heading_close"),
            _token("fence", content="three"),
        ]
        snippets = extract_snippets(tokens, "a.md")

        assert [s.title for s in snippets] == ["Snippet 1", "Section", "Snippet 3"]

    def test_heading_carries_over_multiple_blocks(self):
        """Test that a heading titles every block until the next heading."""
        text = "## Setup\n\n```sh\na\n```\n\n```sh\nb\n```\n"
        snippets = extract_snippets_from_text(text, "a.md")

        assert [s.title for s in snippets] == ["Setup", "Setup"]

    def test_language_defaults_to_text(self):
        """Test missing and padded info strings."""
        tokens = [_token("fence", content="x"), _token("fence", content="y", info="  py  ")]
        snippets = extract_snippets(tokens, "a.md")

        assert snippets[0].language == "text"
        assert snippets[1].language == "py"

    def test_code_is_trimmed(self):
        """Test that surrounding whitespace is removed from code."""
        snippets = extract_snippets([_token("fence", content="\n\n  x = 1\n\n")], "a.md")
        assert snippets[0].code == "x = 1"

    def test_empty_fence_is_kept(self):
        """Test that an empty block still yields a snippet with empty code."""
        snippets = extract_snippets_from_text("```\n```\n\n```py\nx\n```\n", "a.md")

        assert len(snippets) == 2
        assert snippets[0].code == ""
        assert snippets[1].title == "Snippet 2"


class TestFindDescription:
    """Tests for the backward description scan."""

    def test_heading_text_before_fence(self):
        """Test [heading, inline, fence] uses the inline text."""
        tokens = [
            _token("heading_open"),
            _token("inline", content="desc"),
            _token("fence", content="x"),
        ]
        assert find_description(tokens, 2) == "desc"

    def test_back_to_back_fences(self):
        """Test that the scan stops at a sibling code block."""
        tokens = parse_markdown("Intro.\n\n```\na\n```\n```\nb\n```\n")
        snippets = extract_snippets(tokens, "a.md")

        assert snippets[0].description == "Intro."
        assert snippets[1].description == ""

    def test_heading_blocks_description(self):
        """Test that a heading with no text between it and the block stops the scan."""
        tokens = [
            _token("paragraph_open"),
            _token("inline", content="earlier text"),
            _token("paragraph_close"),
            _token("heading_open"),
            _token("fence", content="x"),
        ]
        assert find_description(tokens, 4) == ""

    def test_skips_empty_inline_and_wrappers(self):
        """Test that empty inline tokens and paragraph wrappers are passed over."""
        tokens = [
            _token("paragraph_open"),
            _token("inline", content="  real text  "),
            _token("paragraph_close"),
            _token("paragraph_open"),
            _token("inline", content="   "),
            _token("paragraph_close"),
            _token("fence", content="x"),
        ]
        assert find_description(tokens, 6) == "real text"

    def test_nothing_before_fence(self):
        """Test a code block at the start of the document."""
        assert find_description([_token("fence", content="x")], 0) == ""

    def test_list_item_text(self):
        """Test that text inside a preceding list item is used."""
        snippets = extract_snippets_from_text("- run this\n\n```sh\nmake\n```\n", "a.md")
        assert snippets[0].description == "run this"
