import asyncio
import bisect
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .events import ChangeEvent, EventRegistry, Listener
from ..constants import CacheEvent, FILE_EVENTS
from ..io import FileSystem
from ..utils.path import is_within, match_glob, relative_to

logger = logging.getLogger(__name__)

# (absolute path, raw bytes) -> processed record, may return an awaitable
FileProcessor = Callable[[str, bytes], Union[Any, Awaitable[Any]]]


def raw_content(filepath: str, content: bytes) -> bytes:
    return content


def _reusable(pending: Optional[Tuple[int, asyncio.Task]], generation: int) -> bool:
    """Whether an in-flight task can be awaited by the current caller"""
    if pending is None or pending[0] != generation:
        return False
    task = pending[1]
    # a task left behind by an earlier, finished event loop can never complete
    return not task.done() and task.get_loop() is asyncio.get_running_loop()


class FileCache:
    """
    Read-through cache over the files matching one glob expression.

    Every invalidation bumps `generation`. A processed file is stored for the
    generation it was started in and dropped if the generation moved on while
    it was being processed, so the file processor runs at most once per file
    per generation. Concurrent reads of the same file share one in-flight task.

    All methods must be called from the event loop thread; filesystem events
    from other threads go through the watcher.
    """

    def __init__(
        self,
        pattern: str,
        root: str,
        fs: FileSystem,
        file_processor: Optional[FileProcessor] = None,
        use_cache: bool = True,
        name: Optional[str] = None,
    ):
        self.pattern = pattern
        self.fs = fs
        self.root = fs.absolute(root)
        self.file_processor = file_processor or raw_content
        self.use_cache = use_cache
        self.name = name or pattern
        self._events = EventRegistry()
        self._generation = 0
        self._files: Optional[List[str]] = None
        self._listing: Optional[Tuple[int, asyncio.Task]] = None
        self._entries: Dict[str, Any] = {}
        self._inflight: Dict[str, Tuple[int, asyncio.Task]] = {}

    def __repr__(self) -> str:
        return f"FileCache(name={self.name!r}, pattern={self.pattern!r}, root={self.root!r})"

    @property
    def generation(self) -> int:
        return self._generation

    def on(self, kind: CacheEvent, listener: Listener) -> Callable[[], None]:
        """Subscribe to a cache event, returns the unsubscribe callable"""
        return self._events.on(kind, listener)

    def matches(self, path: str) -> bool:
        """Whether `path` is covered by this cache's glob expression"""
        path = self.fs.absolute(path)
        if not is_within(path, self.root):
            return False
        return match_glob(relative_to(path, self.root), self.pattern)

    def is_cached(self, path: str) -> bool:
        return self.fs.absolute(path) in self._entries

    # --------------------
    #
    # Queries
    #
    # --------------------

    async def get_files(self) -> List[str]:
        """Sorted absolute paths of all files matching the glob"""
        while True:
            generation = self._generation
            if self._files is not None:
                return list(self._files)
            if not _reusable(self._listing, generation):
                self._listing = (generation, asyncio.ensure_future(self._list(generation)))
            files = await asyncio.shield(self._listing[1])
            if generation == self._generation:
                return list(files)
            logger.debug(f"[{self.name}] Cache revoked while listing, listing again")

    async def file_exists(self, path: str) -> bool:
        return self.fs.absolute(path) in await self.get_files()

    async def read_file(self, path: str) -> Any:
        """The processed content of one file"""
        path = self.fs.absolute(path)
        generation = self._generation
        if self.use_cache and path in self._entries:
            logger.debug(f"[{self.name}] Cache hit: {path}")
            return self._entries[path]
        pending = self._inflight.get(path)
        if not _reusable(pending, generation):
            logger.debug(f"[{self.name}] Cache miss: {path}")
            task = asyncio.ensure_future(self._load(path, generation))
            task.add_done_callback(lambda done: self._forget(path, done))
            pending = (generation, task)
            self._inflight[path] = pending
        return await asyncio.shield(pending[1])

    async def read_files(self, paths: Sequence[str]) -> List[Any]:
        """
        Read several files as one snapshot.

        If the cache is invalidated while the batch is in flight, the whole
        batch is read again so no result mixes two generations.
        """
        return await self.read_selected(lambda files: list(paths), use_listing=False)

    async def read_selected(
        self,
        select: Callable[[List[str]], List[str]],
        use_listing: bool = True,
    ) -> List[Any]:
        """
        Read the files `select` picks from the current listing as one snapshot.
        """
        while True:
            generation = self._generation
            files = await self.get_files() if use_listing else []
            paths = select(files)
            results = await asyncio.gather(*(self.read_file(p) for p in paths))
            if generation == self._generation:
                return list(results)
            logger.debug(
                f"[{self.name}] Generation moved from {generation} to {self._generation} "
                f"during a batch read, restarting"
            )

    # --------------------
    #
    # Invalidation
    #
    # --------------------

    def discard_pending(self):
        """Forget in-flight reads, such as the tasks of an event loop that has finished"""
        self._listing = None
        self._inflight.clear()

    def invalidate_entire_cache(self):
        """Drop the listing and every processed file, then emit CACHE_REVOKED"""
        self._generation += 1
        dropped = len(self._entries)
        self._entries.clear()
        self._files = None
        logger.debug(f"[{self.name}] Cache revoked ({dropped} entries), generation {self._generation}")
        self._events.emit(ChangeEvent(CacheEvent.CACHE_REVOKED, self.name, None, self._generation))

    def notify(self, kind: CacheEvent, path: str) -> bool:
        """
        Apply one filesystem change.

        Paths outside the glob are ignored (returns False). Otherwise the
        listing is updated, the file's entry dropped, and `kind` followed by
        ALL is emitted.
        """
        kind = CacheEvent(kind)
        if kind not in FILE_EVENTS:
            raise ValueError(f"Not a file event: {kind}")
        path = self.fs.absolute(path)
        if not self.matches(path):
            return False

        self._generation += 1
        self._entries.pop(path, None)
        if self._files is not None:
            if kind is CacheEvent.REMOVED:
                if path in self._files:
                    self._files.remove(path)
            elif path not in self._files:
                bisect.insort(self._files, path)
        logger.debug(f"[{self.name}] {kind.value} {path}, generation {self._generation}")

        self._events.emit(ChangeEvent(kind, self.name, path, self._generation))
        self._events.emit(ChangeEvent(CacheEvent.ALL, self.name, path, self._generation))
        return True

    def notify_directory(self, directory: str) -> bool:
        """
        Apply a change of a whole directory (removed or moved).

        The affected files are unknown, so the cache is revoked and ALL is
        emitted for the directory. Directories outside the root are ignored.
        """
        directory = self.fs.absolute(directory)
        if not (directory == self.root or is_within(directory, self.root) or is_within(self.root, directory)):
            return False
        self.invalidate_entire_cache()
        self._events.emit(ChangeEvent(CacheEvent.ALL, self.name, directory, self._generation))
        return True

    # --------------------
    #
    # Loading
    #
    # --------------------

    async def _list(self, generation: int) -> List[str]:
        loop = asyncio.get_running_loop()
        files = await loop.run_in_executor(None, self.fs.glob, self.root, self.pattern)
        if generation == self._generation:
            self._files = list(files)
        return files

    async def _load(self, path: str, generation: int) -> Any:
        loop = asyncio.get_running_loop()
        raw = await loop.run_in_executor(None, self.fs.read_bytes, path)
        result = self.file_processor(path, raw)
        if inspect.isawaitable(result):
            result = await result
        if self.use_cache and generation == self._generation:
            self._entries[path] = result
        return result

    def _forget(self, path: str, task: asyncio.Task):
        pending = self._inflight.get(path)
        if pending is not None and pending[1] is task:
            del self._inflight[path]
