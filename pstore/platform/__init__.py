"""Platform adapters (file access)."""

from .files import FileSystem, LocalFileSystem, MemoryFileSystem

__all__ = ["FileSystem", "LocalFileSystem", "MemoryFileSystem"]
