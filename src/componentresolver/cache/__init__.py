"""
Component Resolver Cache Module

The cache system consists of three parts:
- FileCache: glob-scoped read-through cache with a per-cache file processor,
  generation counter, in-flight de-duplication and change events
- EventRegistry / ChangeEvent: listener registry used by FileCache
- RootWatcher: watchdog observer feeding filesystem changes into FileCaches
"""

from .events import ChangeEvent, EventRegistry
from .file_cache import FileCache, raw_content
from .watcher import RootWatcher

__all__ = [
    'ChangeEvent',
    'EventRegistry',
    'FileCache',
    'raw_content',
    'RootWatcher',
]
