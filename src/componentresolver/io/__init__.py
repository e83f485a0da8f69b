"""
Component Resolver IO Module

- FileSystem: Read-only file system interface used by the file caches
- DiskFileSystem: Local disk file system (fsspec "file"), the only watchable one
- MemoryFileSystem: In-memory file system (fsspec "memory") for testing

Usage:
    from componentresolver.io import create_fs

    fs = create_fs()
    files = fs.glob("/workspace/components", "*/*/pattern.json")
"""

from .fs import (
    FileSystem,
    GenericFileSystem,
    FsspecFileSystem,
    DiskFileSystem,
    MemoryFileSystem,
    create_fs,
    wrap_io_error,
)

__all__ = [
    'FileSystem',
    'GenericFileSystem',
    'FsspecFileSystem',
    'DiskFileSystem',
    'MemoryFileSystem',
    'create_fs',
    'wrap_io_error',
]
