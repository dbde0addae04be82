"""File access abstraction.

This module provides:
- FileSystem: Protocol for the two operations publishing needs (stat, open)
- LocalFileSystem: Real implementation on top of pathlib
- MemoryFileSystem: In-memory implementation for testing
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

__all__ = ["FileSystem", "LocalFileSystem", "MemoryFileSystem"]


@runtime_checkable
class FileSystem(Protocol):
    """Narrow file access used by validation and uploads."""

    def size(self, path: str) -> int | None:
        """Return the file size in bytes, or None if it is not a file."""
        ...

    def open_binary(self, path: str) -> BinaryIO:
        """Open a file for binary reading.

        Raises:
            OSError: If the file cannot be opened.
        """
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def size(self, path: str) -> int | None:
        p = Path(path)
        try:
            if not p.is_file():
                return None
            return p.stat().st_size
        except OSError:
            return None

    def open_binary(self, path: str) -> BinaryIO:
        return Path(path).open("rb")


class MemoryFileSystem:
    """In-memory FileSystem for tests.

    Usage:
        fs = MemoryFileSystem()
        fs.add("app.aab", b"bundle bytes")
        fs.fail_open("broken.aab")  # exists but raises on open
    """

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self._files: dict[str, bytes] = dict(files or {})
        self._unreadable: set[str] = set()
        self.opened: list[str] = []
        self.handles: list[io.BytesIO] = []

    def add(self, path: str, content: bytes = b"") -> None:
        self._files[path] = content

    def fail_open(self, path: str) -> None:
        """Keep path visible to size() but make open_binary() raise."""
        self._files.setdefault(path, b"")
        self._unreadable.add(path)

    def size(self, path: str) -> int | None:
        content = self._files.get(path)
        return None if content is None else len(content)

    def open_binary(self, path: str) -> BinaryIO:
        if path not in self._files:
            raise FileNotFoundError(f"No such file: '{path}'")
        if path in self._unreadable:
            raise PermissionError(f"Permission denied: '{path}'")
        self.opened.append(path)
        handle = io.BytesIO(self._files[path])
        self.handles.append(handle)
        return handle
