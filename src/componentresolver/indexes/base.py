import inspect
import logging
from typing import Any, Callable, List

from ..cache import ChangeEvent, FileCache
from ..constants import IndexName
from ..utils.path import is_within

logger = logging.getLogger(__name__)


class FileIndex:
    """
    An index owns exactly one FileCache and shapes its records.

    Indexes never touch each other's caches; a downstream index is only told
    through `on_upstream_changed` that one of its inputs changed.
    """

    index_name: IndexName

    def __init__(self, cache: FileCache):
        self.cache = cache

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cache!r})"

    @property
    def root(self) -> str:
        return self.cache.root

    def on_upstream_changed(self, event: ChangeEvent):
        """Hook for the invalidation coordinator: drop everything this index derived"""
        logger.debug(
            f"[{self.index_name.value}] Upstream '{event.source}' {event.kind.value} "
            f"({event.path or 'all files'}), revoking cache"
        )
        self.cache.invalidate_entire_cache()


def select_below(directory: str) -> Callable[[List[str]], List[str]]:
    """Selector for FileCache.read_selected: sorted, unique files inside `directory`"""

    def select(files: List[str]) -> List[str]:
        return sorted({f for f in files if is_within(f, directory)})

    return select


async def call_renderer(renderer, owner, record) -> Any:
    """Renderers may be plain callables or coroutine functions"""
    rendered = renderer(owner, record)
    if inspect.isawaitable(rendered):
        rendered = await rendered
    return rendered
