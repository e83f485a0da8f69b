import asyncio
import logging
import posixpath
from typing import List

from .base import FileIndex, select_below
from ..cache import FileCache
from ..constants import IndexName, TEXT_ENCODING
from ..io import FileSystem
from ..models import SubTemplateRecord, TemplateRecord
from ..utils.path import strip_extension

logger = logging.getLogger(__name__)


class TemplateIndex(FileIndex):
    """Root-level component templates, e.g. 'atoms/button/button.hbs'"""

    index_name = IndexName.MAIN_TEMPLATES

    def __init__(self, root: str, fs: FileSystem, expression: str):
        super().__init__(FileCache(
            expression,
            root,
            fs,
            file_processor=self._process,
            name=self.index_name.value,
        ))

    @staticmethod
    def _process(filepath: str, content: bytes) -> TemplateRecord:
        return TemplateRecord(
            filepath=filepath,
            name=strip_extension(posixpath.basename(filepath)),
            content=content.decode(TEXT_ENCODING),
        )

    async def get_templates(self, component_directory: str) -> List[TemplateRecord]:
        """Templates directly inside the component directory, sorted by path"""
        directory = self.cache.fs.absolute(component_directory)
        return await self.cache.read_selected(select_below(directory))


class SubTemplateIndex(FileIndex):
    """Element templates, e.g. 'atoms/button/elements/icon/icon.hbs'"""

    index_name = IndexName.SUB_TEMPLATES

    def __init__(self, root: str, fs: FileSystem, expression: str):
        super().__init__(FileCache(
            expression,
            root,
            fs,
            file_processor=self._process,
            name=self.index_name.value,
        ))

    @staticmethod
    def _process(filepath: str, content: bytes) -> SubTemplateRecord:
        # the element is named after the directory holding the template
        return SubTemplateRecord(
            filepath=filepath,
            name=posixpath.basename(posixpath.dirname(filepath)),
            content=content.decode(TEXT_ENCODING),
        )

    async def get_sub_templates(self, component_directory: str) -> List[SubTemplateRecord]:
        """Element templates below the component directory, sorted by path"""
        directory = self.cache.fs.absolute(component_directory)
        return await self.cache.read_selected(select_below(directory))


async def templates_ready(main: TemplateIndex, sub: SubTemplateIndex):
    """Wait until both template sets are listed; examples render afterwards"""
    await asyncio.gather(main.cache.get_files(), sub.cache.get_files())
