"""
md2llm: Convert markdown documentation into LLM rule files.

Every fenced code block becomes a snippet with its title, description, source
and language, written as:
- `.md` rule files
- `.mdc` rule files with Cursor-style frontmatter
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
