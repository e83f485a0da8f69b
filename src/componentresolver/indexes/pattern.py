"""
Pattern index - discovers and parses pattern.json files.

A component is identified by the directory of its pattern.json relative to the
root directory: 'atoms/button/pattern.json' is the component 'atoms/button'
of type 'atoms' named 'button'. The file content never changes the identity.
"""

import json
import logging
import posixpath
from typing import Dict, List, Optional

from .base import FileIndex, select_below
from ..cache import FileCache
from ..constants import IndexName, TEXT_ENCODING
from ..exceptions import ComponentNotFoundError, PatternParseError
from ..io import FileSystem
from ..models import ComponentRecord
from ..utils.path import component_identity, join, relative_to

logger = logging.getLogger(__name__)


class PatternIndex(FileIndex):
    """Maps component paths to parsed ComponentRecords"""

    index_name = IndexName.PATTERNS

    def __init__(self, root: str, fs: FileSystem, expression: str):
        super().__init__(FileCache(
            expression,
            root,
            fs,
            file_processor=self._parse,
            name=self.index_name.value,
        ))

    def _parse(self, filepath: str, content: bytes) -> ComponentRecord:
        """Process a pattern.json file when it is loaded into the file cache"""
        try:
            data = json.loads(content.decode(TEXT_ENCODING))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PatternParseError(filepath, e) from e

        component_path = posixpath.dirname(relative_to(filepath, self.root))
        component_type, component_name = component_identity(component_path)
        logger.debug(f"Parsed component '{component_path}' from {filepath}")
        return ComponentRecord(
            meta_file=filepath,
            directory=posixpath.dirname(filepath),
            path=component_path,
            type=component_type,
            name=component_name,
            data=data,
        )

    async def get_component_types(self) -> List[str]:
        """
        Returns:
            Sorted, unique first-level directory names holding a pattern file
            (e.g. ['atoms', 'molecules'])
        """
        files = await self.cache.get_files()
        return sorted({relative_to(f, self.root).split("/", 1)[0] for f in files})

    async def get_components(self, component_type: Optional[str] = None) -> Dict[str, ComponentRecord]:
        """
        Args:
            component_type: Optional type folder name e.g. "atoms", "molecules"

        Returns:
            Mapping of component path (e.g. "atoms/button") to its record

        Raises:
            PatternParseError: If any selected pattern.json is malformed
        """
        directory = join(self.root, component_type) if component_type else self.root
        records = await self.cache.read_selected(select_below(directory))
        return {record.path: record for record in records}

    async def get_component(self, component_path: str) -> ComponentRecord:
        """
        Args:
            component_path: Relative unix path e.g. 'atoms/button'

        Raises:
            ComponentNotFoundError: If no pattern.json exists for the path
        """
        components = await self.get_components()
        if component_path not in components:
            raise ComponentNotFoundError(component_path)
        return components[component_path]
