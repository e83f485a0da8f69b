"""
Component Resolver

Resolves a pattern library component tree on disk (metadata files, templates,
examples and readmes) into records, caches the results and keeps the caches
consistent while the files change.

Main modules:
- io: Read-only file system layer (disk and in-memory, based on fsspec)
- cache: Glob-scoped file caches and the watchdog based root watcher
- indexes: Pattern, template, example and readme indexes
- coordinator: Invalidation rules between the indexes
- resolver: The public ComponentResolver
- config: Option validation and YAML loading
- utils: Logging setup and path helpers

Quick start example:
```python
import asyncio
from componentresolver import ComponentResolver

async def main():
    async with ComponentResolver(root_directory="components", examples=True) as resolver:
        for path, component in (await resolver.get_components("atoms")).items():
            print(path, component.data.get("title"))

asyncio.run(main())
```
"""

from .config import ResolverOptions, build_options, load_options, passthrough_renderer
from .resolver import ComponentResolver
from .coordinator import InvalidationCoordinator, InvalidationRule, DEFAULT_RULES
from .constants import CacheEvent, IndexName
from .models import ComponentRecord, ExampleRecord, TemplateRecord, SubTemplateRecord, ReadmeRecord
from .io import FileSystem, DiskFileSystem, MemoryFileSystem, create_fs
from .exceptions import (
    ComponentResolverError,
    ConfigurationError,
    ConfigValidationError,
    ResolutionError,
    PatternParseError,
    ComponentNotFoundError,
    FeatureDisabledError,
    ExamplesDisabledError,
    ReadmesDisabledError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    '__version__',
    # Resolver
    'ComponentResolver',
    'ResolverOptions',
    'build_options',
    'load_options',
    'passthrough_renderer',
    # Invalidation
    'InvalidationCoordinator',
    'InvalidationRule',
    'DEFAULT_RULES',
    'CacheEvent',
    'IndexName',
    # Records
    'ComponentRecord',
    'ExampleRecord',
    'TemplateRecord',
    'SubTemplateRecord',
    'ReadmeRecord',
    # IO
    'FileSystem',
    'DiskFileSystem',
    'MemoryFileSystem',
    'create_fs',
    # Exceptions
    'ComponentResolverError',
    'ConfigurationError',
    'ConfigValidationError',
    'ResolutionError',
    'PatternParseError',
    'ComponentNotFoundError',
    'FeatureDisabledError',
    'ExamplesDisabledError',
    'ReadmesDisabledError',
]
