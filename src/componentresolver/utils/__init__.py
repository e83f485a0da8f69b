"""
Component Resolver Utils Module

- logger: Logging setup and configuration
- path: Posix path helpers, glob matching and component identity

Usage:
    from componentresolver.utils import setup_logger, component_identity
"""

from .logger import setup_logger, parse_module_levels
from .path import (
    to_posix,
    join,
    relative_to,
    is_within,
    component_identity,
    strip_extension,
    match_glob,
)

__all__ = [
    'setup_logger',
    'parse_module_levels',
    # Path utilities
    'to_posix',
    'join',
    'relative_to',
    'is_within',
    'component_identity',
    'strip_extension',
    'match_glob',
]
