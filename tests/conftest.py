"""Shared fixtures for md2llm tests."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

SAMPLE_DOC = """# Widget

Install the widget.

```bash
npm install widget
```

## Usage

Render it.

```js
render(widget);
```
"""


@pytest.fixture
def console() -> Console:
    """A console that writes into a string buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def make_package():
    """Create a package directory with a package.json declaring `name`."""

    def _make(directory: Path, name: str | None, **extra) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        manifest = dict(extra)
        if name is not None:
            manifest["name"] = name
        (directory / "package.json").write_text(json.dumps(manifest))
        return directory

    return _make


@pytest.fixture
def write_doc():
    """Write a markdown file, creating parent directories."""

    def _write(path: Path, content: str = SAMPLE_DOC) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
