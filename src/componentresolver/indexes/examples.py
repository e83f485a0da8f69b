"""
Example index - discovers and renders per-component example files.

Examples live in '<component>/<example folder>/'. A leading underscore marks an
example as hidden (not a main example). Every example is handed to the example
renderer once per cache generation and the rendered value is what gets cached.
"""

import logging
import posixpath
from typing import Any, Awaitable, Callable, List, Optional

from .base import FileIndex, call_renderer, select_below
from ..cache import FileCache
from ..constants import HIDDEN_PREFIX, IndexName, TEXT_ENCODING
from ..io import FileSystem
from ..models import ExampleRecord
from ..utils.path import join, strip_extension

logger = logging.getLogger(__name__)


def is_main_example(filepath: str) -> bool:
    return not posixpath.basename(filepath).startswith(HIDDEN_PREFIX)


class ExampleIndex(FileIndex):
    """Rendered examples keyed by absolute file path"""

    index_name = IndexName.EXAMPLES

    def __init__(
        self,
        root: str,
        fs: FileSystem,
        expression: str,
        folder_name: str,
        renderer: Callable[[Any, ExampleRecord], Any],
        owner: Any = None,
        use_cache: bool = True,
        prerequisite: Optional[Callable[[], Awaitable[Any]]] = None,
    ):
        """
        Args:
            expression: Glob for example files, relative to root
            folder_name: Name of the example folder inside a component directory
            renderer: Called as renderer(owner, ExampleRecord), may be async
            owner: First renderer argument, the resolver
            use_cache: False re-reads and re-renders on every query
            prerequisite: Awaited before every render (template discovery)
        """
        super().__init__(FileCache(
            expression,
            root,
            fs,
            file_processor=self._render,
            use_cache=use_cache,
            name=self.index_name.value,
        ))
        self.folder_name = folder_name
        self.renderer = renderer
        self.owner = owner
        self.prerequisite = prerequisite

    async def _render(self, filepath: str, content: bytes) -> Any:
        """Process an example file when it is loaded into the file cache"""
        if self.prerequisite is not None:
            await self.prerequisite()
        main = is_main_example(filepath)
        record = ExampleRecord(
            name=strip_extension(posixpath.basename(filepath)),
            filepath=filepath,
            content=content.decode(TEXT_ENCODING),
            main=main,
            hidden=not main,
        )
        logger.debug(f"Rendering example '{record.name}' ({filepath})")
        return await call_renderer(self.renderer, self.owner, record)

    async def get_examples(self, component_directory: str) -> List[Any]:
        """
        Args:
            component_directory: Absolute component directory

        Returns:
            Rendered examples of the component, sorted by absolute path
        """
        directory = join(self.cache.fs.absolute(component_directory), self.folder_name)
        return await self.cache.read_selected(select_below(directory))
