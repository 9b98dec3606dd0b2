"""
Utility functions for md2llm.

Includes encoding detection, robust reads, line ending normalization,
path helpers, and atomic writes.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import chardet


def detect_encoding(file_path: Path, sample_size: int = 8192) -> str:
    """Detect a likely text encoding for a file.

    Prefers UTF-8 and only uses `chardet` when strict UTF-8 decoding fails.

    Args:
        file_path: Path to the file to inspect.
        sample_size: Number of bytes to sample from the start of the file.

    Returns:
        A normalized encoding label (e.g., `"utf-8"`, `"utf-8-sig"`, `"utf-16-le"`).
    """
    try:
        with open(file_path, "rb") as f:
            sample = f.read(sample_size)
    except OSError:
        return "utf-8"

    if not sample:
        return "utf-8"

    # BOM markers first
    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe"):
        return "utf-16-le"
    if sample.startswith(b"\xfe\xff"):
        return "utf-16-be"

    try:
        sample.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    result = chardet.detect(sample)
    encoding_any = result.get("encoding")

    if not isinstance(encoding_any, str) or not encoding_any:
        return "utf-8"

    encoding = encoding_any.lower()
    if encoding in ("ascii", "utf-8", "utf8"):
        return "utf-8"

    return encoding


def read_file_safe(file_path: Path) -> tuple[str, str]:
    """Read a text file with encoding detection.

    Tries strict UTF-8 first, then the detected encoding with `errors="replace"`.

    Args:
        file_path: Path to the file to read.

    Returns:
        A tuple `(content, encoding_used)`.

    Raises:
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, encoding="utf-8", errors="strict") as f:
            return f.read(), "utf-8"
    except UnicodeDecodeError:
        pass
    except OSError as e:
        raise OSError(f"Failed to read markdown file {file_path}: {e}") from e

    detected = detect_encoding(file_path)
    try:
        with open(file_path, encoding=detected, errors="replace") as f:
            return f.read(), detected
    except LookupError:
        # chardet reported a codec Python doesn't know
        with open(file_path, encoding="utf-8", errors="replace") as f:
            return f.read(), "utf-8"


def normalize_path(path: str) -> str:
    """Normalize a path string to forward slashes."""
    return path.replace("\\", "/")


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF."""
    # CRLF first so it isn't turned into two newlines
    return content.replace("\r\n", "\n").replace("\r", "\n")


def relative_posix_path(file_path: Path, root: Path) -> str:
    """Return `file_path` relative to `root` with forward slashes.

    Paths outside `root` are expressed with `..` segments.
    """
    return normalize_path(os.path.relpath(file_path, root))


def strip_markdown_extension(file_name: str) -> str:
    """Drop a trailing `.md` / `.markdown` extension (case-insensitive)."""
    lower = file_name.lower()
    for ext in (".markdown", ".md"):
        if lower.endswith(ext):
            return file_name[: -len(ext)]
    return file_name


def ensure_directory(dir_path: Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Raises:
        OSError: If the directory cannot be created.
    """
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OSError(f"Failed to create directory {dir_path}: {e}") from e
    return dir_path


def write_text_atomic(output_path: Path, content: str) -> None:
    """Write text so readers never observe a partially written file.

    Content goes to a temporary file in the same directory which then replaces
    the destination.

    Raises:
        OSError: If the file cannot be written.
    """
    try:
        ensure_directory(output_path.parent)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            # mkstemp creates files as 0600
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise OSError(f"Failed to write output file {output_path}: {e}") from e
