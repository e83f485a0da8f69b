import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from .cache import RootWatcher
from .config import ResolverOptions, build_options
from .constants import IndexName
from .coordinator import InvalidationCoordinator
from .exceptions import ExamplesDisabledError, ReadmesDisabledError
from .indexes import (
    ExampleIndex,
    PatternIndex,
    ReadmeIndex,
    SubTemplateIndex,
    TemplateIndex,
    templates_ready,
)
from .io import FileSystem, create_fs
from .models import ComponentRecord, SubTemplateRecord, TemplateRecord

logger = logging.getLogger(__name__)


class ComponentResolver:
    """
    Resolves a component tree (``<type>/<name>/pattern.json`` plus templates,
    examples and readmes) into records.

    All queries are coroutines and read through per-file-set caches. With
    ``watch`` enabled a watchdog observer is started on the first query and
    filesystem changes invalidate the caches; otherwise the caches only change
    through `invalidate`.

    Example:
    ```python
    async with ComponentResolver(root_directory="components", examples=True) as resolver:
        button = await resolver.get_component("atoms/button")
        examples = await resolver.get_component_examples(button.directory)
    ```
    """

    def __init__(
        self,
        options: Union[ResolverOptions, Dict[str, Any], None] = None,
        fs: Optional[FileSystem] = None,
        **kwargs,
    ):
        self.options = build_options(options, **kwargs)
        self.fs = fs or create_fs()
        self.root = self.fs.absolute(self.options.root_directory)
        opts = self.options

        self.patterns = PatternIndex(self.root, self.fs, opts.pattern_expression)
        self.main_templates = TemplateIndex(self.root, self.fs, opts.main_template)
        self.sub_templates = SubTemplateIndex(self.root, self.fs, opts.sub_template)

        self.examples: Optional[ExampleIndex] = None
        if opts.examples:
            self.examples = ExampleIndex(
                self.root,
                self.fs,
                opts.resolved_example_expression,
                opts.example_folder_name,
                renderer=opts.example_renderer,
                owner=self,
                use_cache=opts.cache_examples,
                prerequisite=lambda: templates_ready(self.main_templates, self.sub_templates),
            )

        self.readmes: Optional[ReadmeIndex] = None
        if opts.readme:
            self.readmes = ReadmeIndex(
                self.root,
                self.fs,
                opts.readme_expression,
                renderer=opts.readme_renderer,
                owner=self,
            )

        self.coordinator = InvalidationCoordinator(self.indexes)

        self._watcher: Optional[RootWatcher] = None
        if opts.watch:
            if self.fs.watchable:
                self._watcher = RootWatcher(self.root, [index.cache for index in self.indexes.values() if index is not None])
            else:
                logger.warning(f"{type(self.fs).__name__} cannot be watched, caches refresh only on invalidate()")
        logger.debug(
            f"Resolver for '{self.root}' ready with rules: "
            + ", ".join(str(rule) for rule in self.coordinator.rules)
        )

    @property
    def indexes(self) -> Dict[IndexName, Any]:
        return {
            IndexName.PATTERNS: self.patterns,
            IndexName.MAIN_TEMPLATES: self.main_templates,
            IndexName.SUB_TEMPLATES: self.sub_templates,
            IndexName.EXAMPLES: self.examples,
            IndexName.READMES: self.readmes,
        }

    @property
    def watching(self) -> bool:
        return self._watcher is not None and self._watcher.running

    def _ensure_watching(self):
        # each asyncio.run has its own loop; start() rebinds a running watcher to it
        if self._watcher is not None:
            self._watcher.start(asyncio.get_running_loop())

    async def __aenter__(self) -> "ComponentResolver":
        self._ensure_watching()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Stop watching and remove the invalidation subscriptions"""
        if self._watcher is not None:
            self._watcher.stop()
        self.coordinator.close()

    def invalidate(self):
        """Revoke every cache; derived caches follow through the invalidation rules"""
        logger.debug(f"Invalidating all caches of '{self.root}'")
        for index in self.indexes.values():
            if index is not None:
                index.cache.invalidate_entire_cache()

    # --------------------
    #
    # Queries
    #
    # --------------------

    async def get_component_types(self) -> List[str]:
        """
        Returns:
            Sorted type folder names, e.g. ['atoms', 'helper', 'molecules']
        """
        self._ensure_watching()
        return await self.patterns.get_component_types()

    async def get_components(self, component_type: Optional[str] = None) -> Dict[str, ComponentRecord]:
        """
        Args:
            component_type: Optional type folder name e.g. "atoms", "molecules"

        Returns:
            Mapping of component path (e.g. "atoms/button") to its parsed record
        """
        self._ensure_watching()
        return await self.patterns.get_components(component_type)

    async def get_component(self, component_path: str) -> ComponentRecord:
        """
        Args:
            component_path: Relative unix path e.g. 'atoms/button'
        """
        self._ensure_watching()
        return await self.patterns.get_component(component_path)

    async def get_component_readme(self, component: str) -> Optional[Any]:
        """
        Args:
            component: Absolute component directory or relative component path

        Returns:
            The rendered readme, or None if there is no readme.md
        """
        if self.readmes is None:
            raise ReadmesDisabledError()
        self._ensure_watching()
        return await self.readmes.get_readme(component)

    async def get_component_examples(self, component_directory: str) -> List[Any]:
        """
        Args:
            component_directory: Absolute component directory

        Returns:
            Rendered examples sorted by file path
        """
        if self.examples is None:
            raise ExamplesDisabledError()
        self._ensure_watching()
        return await self.examples.get_examples(component_directory)

    async def get_component_sub_templates(self, component_directory: str) -> List[SubTemplateRecord]:
        """Element templates of the component, sorted by file path"""
        self._ensure_watching()
        return await self.sub_templates.get_sub_templates(component_directory)

    async def get_component_templates(self, component_directory: str) -> List[TemplateRecord]:
        """Root-level templates of the component, sorted by file path"""
        self._ensure_watching()
        return await self.main_templates.get_templates(component_directory)
