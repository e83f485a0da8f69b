import functools
import posixpath
import re
from pathlib import PurePath

from fsspec.utils import glob_translate

from ..exceptions import InvalidPathError


def to_posix(path) -> str:
    """Convert any local path (windows included) to a normalized posix string."""
    if not path:
        raise InvalidPathError("Empty path")
    return posixpath.normpath(PurePath(str(path)).as_posix())


def join(root: str, *parts: str) -> str:
    return posixpath.normpath(posixpath.join(root, *parts))


def relative_to(path: str, root: str) -> str:
    """Root-relative, forward-slash path of `path`."""
    return posixpath.relpath(to_posix(path), to_posix(root))


def is_within(path: str, directory: str) -> bool:
    """True if `path` lies strictly below `directory` (no sibling prefix matches)."""
    directory = directory.rstrip("/") + "/"
    return path.startswith(directory)


def component_identity(relative_path: str) -> tuple[str, str]:
    """
    Derive (type, name) from a root-relative component path.

    The first segment is the component type, the second the component name
    ('atoms/button' -> ('atoms', 'button')).
    """
    parts = relative_path.replace("\\", "/").split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidPathError(f"Not a component path: '{relative_path}'")
    return parts[0], parts[1]


def strip_extension(filename: str) -> str:
    """'example.html.hbs' -> 'example'"""
    return re.sub(r"\..+$", "", filename)


@functools.lru_cache(maxsize=64)
def compile_glob(pattern: str) -> re.Pattern:
    # same translation fsspec's glob applies, so listings and events agree
    return re.compile(glob_translate(pattern))


def match_glob(relative_path: str, pattern: str) -> bool:
    """
    Match a root-relative posix path against a glob expression.

    `*` and `?` never cross a '/', `**` as a whole segment spans any number
    of directories. Raises ValueError for `**` inside a segment.
    """
    return compile_glob(pattern).match(relative_path) is not None
