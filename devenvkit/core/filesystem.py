"""
File system utilities for DevEnvKit.

This module provides the idempotent text-file operations the bootstrap is
built from:
- Line upserts (append a line only if no matching line exists)
- Atomic writes (temp file + rename)
- Tilde expansion against an explicit home directory

Every mutation is safe to repeat: running the same operation twice leaves
the file exactly as one run did.
"""

import logging
import re
import tempfile
from pathlib import Path
from typing import Optional, Pattern, Union

from devenvkit.core.exceptions import DevEnvKitError

logger = logging.getLogger(__name__)

# Dotfiles may hold bytes that are not UTF-8; they must survive a rewrite
TEXT_ERRORS = "surrogateescape"


class FilesystemError(DevEnvKitError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Line Upserts
# ============================================================================


def file_has_line(
    file_path: Union[str, Path],
    line: str,
    pattern: Optional[Union[str, Pattern]] = None,
) -> bool:
    """
    Check whether a text file already contains a line.

    Args:
        file_path: File to inspect (missing file counts as not containing it)
        line: Exact line to look for (surrounding whitespace ignored)
        pattern: Optional regex; any line it matches counts as present

    Returns:
        True if a matching line exists
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        return False

    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    content = file_path.read_text(encoding="utf-8", errors=TEXT_ERRORS)
    for existing in content.splitlines():
        if existing.strip() == line.strip():
            return True
        if regex is not None and regex.search(existing):
            return True
    return False


def ensure_line(
    file_path: Union[str, Path],
    line: str,
    pattern: Optional[Union[str, Pattern]] = None,
) -> bool:
    """
    Append a line to a text file unless a matching line is already there.

    The file (and its parent directories) is created if missing. A newline is
    inserted first when the file does not end with one.

    Args:
        file_path: File to update
        line: Line to append
        pattern: Optional regex that also counts as "already present"

    Returns:
        True if the file was modified

    Example:
        >>> ensure_line(Path.home() / ".bashrc", 'eval "$(direnv hook bash)"')
        True
    """
    file_path = Path(file_path)
    if file_has_line(file_path, line, pattern):
        logger.debug(f"Line already present in {file_path}")
        return False

    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = ""
    if file_path.exists():
        content = file_path.read_text(encoding="utf-8", errors=TEXT_ERRORS)
    if content and not content.endswith("\n"):
        content += "\n"
    content += line.rstrip("\n") + "\n"
    file_path.write_text(content, encoding="utf-8", errors=TEXT_ERRORS)
    logger.debug(f"Appended line to {file_path}")
    return True


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def write_if_changed(file_path: Union[str, Path], content: str) -> bool:
    """
    Write text content only when it differs from what is on disk.

    Returns:
        True if the file was created or rewritten
    """
    file_path = Path(file_path)
    if file_path.is_file():
        if file_path.read_text(encoding="utf-8", errors=TEXT_ERRORS) == content:
            return False
    atomic_write(file_path, content)
    return True


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Raises:
        FilesystemError: If the path exists but is not a directory, or
            cannot be created
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise FilesystemError(f"Not a directory: {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Could not create directory {path}: {e}") from e
    return path


# ============================================================================
# Path Utilities
# ============================================================================


def expand_home(path: str, home: Path) -> Path:
    """
    Expand a leading ``~`` to the given home directory.

    Only ``~`` and ``~/...`` are expanded; ``~user`` forms are left as typed.

    Example:
        >>> expand_home("~/work", Path("/home/ada"))
        PosixPath('/home/ada/work')
    """
    path = path.strip()
    if path == "~":
        return Path(home)
    if path.startswith("~/"):
        return Path(home) / path[2:]
    return Path(path)
