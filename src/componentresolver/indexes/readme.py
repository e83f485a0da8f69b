import logging
import posixpath
from typing import Any, Callable, Optional

from .base import FileIndex, call_renderer
from ..cache import FileCache
from ..constants import IndexName, README_FILENAME, TEXT_ENCODING
from ..io import FileSystem
from ..models import ReadmeRecord
from ..utils.path import join

logger = logging.getLogger(__name__)


class ReadmeIndex(FileIndex):
    """At most one rendered readme.md per component directory"""

    index_name = IndexName.READMES

    def __init__(
        self,
        root: str,
        fs: FileSystem,
        expression: str,
        renderer: Callable[[Any, ReadmeRecord], Any],
        owner: Any = None,
    ):
        super().__init__(FileCache(
            expression,
            root,
            fs,
            file_processor=self._render,
            name=self.index_name.value,
        ))
        self.renderer = renderer
        self.owner = owner

    async def _render(self, filepath: str, content: bytes) -> Any:
        record = ReadmeRecord(filepath=filepath, content=content.decode(TEXT_ENCODING))
        logger.debug(f"Rendering readme {filepath}")
        return await call_renderer(self.renderer, self.owner, record)

    def readme_path(self, component: str) -> str:
        """Readme location for an absolute directory or a root-relative component path"""
        if posixpath.isabs(component.replace("\\", "/")):
            directory = self.cache.fs.absolute(component)
        else:
            directory = join(self.root, component.replace("\\", "/"))
        return join(directory, README_FILENAME)

    async def get_readme(self, component: str) -> Optional[Any]:
        """
        Args:
            component: Absolute component directory or component path ('atoms/button')

        Returns:
            The rendered readme, or None if the component has no readme
        """
        readme_path = self.readme_path(component)
        found = await self.cache.read_selected(
            lambda files: [readme_path] if readme_path in files else []
        )
        if not found:
            logger.debug(f"No readme at {readme_path}")
            return None
        return found[0]
