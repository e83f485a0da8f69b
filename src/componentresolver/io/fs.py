from abc import ABC, abstractmethod
from typing import List, override
import functools
import logging
import posixpath
from pathlib import Path

import fsspec

from ..exceptions import (
    InvalidPathError,
    CRPathNotFoundError,
    CRNotAFileError,
    CRNotADirectoryError,
)
from ..utils.path import to_posix

logger = logging.getLogger(__name__)


def wrap_io_error(func):
    """Decorator to wrap IO errors into component resolver exceptions."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            raise CRPathNotFoundError(e) from e
        except IsADirectoryError as e:
            raise CRNotAFileError(e) from e
        except NotADirectoryError as e:
            raise CRNotADirectoryError(e) from e

    return wrapper

# --------------------
#
# Abstract FileSystem
#
# --------------------

class FileSystem(ABC):
    """
    Read-only file system interface used by the file caches.

    All paths are absolute posix strings.
    """

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read text from a file"""
        pass

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Read bytes from a file"""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if a path exists"""
        pass

    @abstractmethod
    def glob(self, root: str, pattern: str) -> List[str]:
        """Files below `root` matching the root-relative glob `pattern`"""
        pass

    @abstractmethod
    def absolute(self, path: str) -> str:
        """Get the absolute path"""
        pass

    @property
    def watchable(self) -> bool:
        """Whether changes can be observed on the local disk"""
        return False

# --------------------
#
# Generic FileSystem
#
# --------------------

class GenericFileSystem(FileSystem, ABC):
    """Generic File System base class for fsspec implementations"""

    def __init__(self, fs_instance, name=None):
        """
        Initialize with a filesystem instance

        Args:
            fs_instance: The underlying fsspec filesystem instance
            name: Optional name for logging purposes
        """
        self.fs = fs_instance
        self.name = name or f"{type(fs_instance).__name__}"

    def path2str(self, path: str) -> str:
        return self.fs._strip_protocol(path)

    @override
    @wrap_io_error
    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        logger.debug(f"[{self.name}] Reading from: {path}")
        with self.fs.open(self.path2str(path), "r", encoding=encoding) as f:
            return f.read()

    @override
    @wrap_io_error
    def read_bytes(self, path: str) -> bytes:
        logger.debug(f"[{self.name}] Reading bytes from: {path}")
        with self.fs.open(self.path2str(path), "rb") as f:
            return f.read()

    @override
    def exists(self, path: str) -> bool:
        return self.fs.exists(self.path2str(path))

    @override
    @wrap_io_error
    def glob(self, root: str, pattern: str) -> List[str]:
        if posixpath.isabs(pattern):
            raise InvalidPathError(f"Glob expression must be relative to the root: '{pattern}'")
        expression = posixpath.join(self.path2str(root), pattern)
        found = self.fs.glob(expression, detail=True)
        files = [self.path2str(p) for p, info in found.items() if info.get("type") == "file"]
        logger.debug(f"[{self.name}] Glob '{expression}' matched {len(files)} file(s)")
        return sorted(files)

    @override
    def absolute(self, path: str) -> str:
        return self.path2str(to_posix(path))


class FsspecFileSystem(GenericFileSystem):
    """fsspec-based File System"""

    def __init__(self, protocol="file"):
        fs_instance = fsspec.filesystem(protocol)
        super().__init__(fs_instance, name=f"{protocol}FS")
        self.protocol = protocol

# --------------------
#
# Disk FileSystem
#
# --------------------

class DiskFileSystem(FsspecFileSystem):
    """Local disk file system using fsspec"""

    def __init__(self):
        super().__init__(protocol="file")

    @override
    def absolute(self, path: str) -> str:
        return to_posix(Path(str(path)).absolute())

    @property
    @override
    def watchable(self) -> bool:
        return True

# --------------------
#
# Memory FileSystem
#
# --------------------

class MemoryFileSystem(FsspecFileSystem):
    """
    In-memory file system for testing.

    fsspec shares the memory store between instances, so callers should keep
    their trees under a unique root.
    """

    def __init__(self):
        super().__init__(protocol="memory")

    @override
    def absolute(self, path: str) -> str:
        posix = to_posix(path)
        if not posix.startswith("/"):
            posix = "/" + posix
        return posix

    def write_text(self, path: str, content: str, encoding: str = "utf-8"):
        """Seed a file (test helper; the resolver never writes)"""
        logger.debug(f"[{self.name}] Writing to: {path}")
        self.fs.pipe_file(self.path2str(path), content.encode(encoding))

    def remove(self, path: str):
        self.fs.rm(self.path2str(path), recursive=True)


def create_fs(in_memory: bool = False) -> FileSystem:
    """
    Create the file system a resolver reads from.
    """
    if in_memory:
        return MemoryFileSystem()
    return DiskFileSystem()
