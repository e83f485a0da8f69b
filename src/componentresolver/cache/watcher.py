import asyncio
import logging
import os
import threading
from typing import Iterable, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .file_cache import FileCache
from ..constants import CacheEvent
from ..utils.path import to_posix

logger = logging.getLogger(__name__)


class _CacheEventHandler(FileSystemEventHandler):
    """Translate watchdog events into file cache notifications"""

    def __init__(self, watcher: "RootWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory:
            self._watcher.dispatch(CacheEvent.ADDED, event.src_path)

    def on_modified(self, event: FileSystemEvent):
        # directory mtime changes are a side effect of file events
        if not event.is_directory:
            self._watcher.dispatch(CacheEvent.CHANGED, event.src_path)

    def on_closed(self, event: FileSystemEvent):
        # a file opened for writing was closed
        if not event.is_directory:
            self._watcher.dispatch(CacheEvent.CHANGED, event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        if event.is_directory:
            self._watcher.dispatch_directory(event.src_path)
        else:
            self._watcher.dispatch(CacheEvent.REMOVED, event.src_path)

    def on_moved(self, event: FileSystemEvent):
        if event.is_directory:
            self._watcher.dispatch_directory(event.src_path)
            self._watcher.dispatch_directory(event.dest_path)
        else:
            self._watcher.dispatch(CacheEvent.REMOVED, event.src_path)
            self._watcher.dispatch(CacheEvent.ADDED, event.dest_path)


class RootWatcher:
    """
    One watchdog observer for a root directory, shared by several file caches.

    watchdog calls back on its own thread; every notification is handed to the
    event loop with call_soon_threadsafe so the caches are only ever touched
    from the loop thread. The observer outlives event loops: when a new loop
    takes over (see `bind`), events that arrived while no loop was able to
    take them revoke every cache.
    """

    def __init__(self, root: str, caches: Iterable[FileCache]):
        self.root = root
        self.caches: List[FileCache] = list(caches)
        self._observer: Optional[Observer] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()
        self._dropped = 0
        # events handed to the bound loop, and how many of them it ran
        self._scheduled = 0
        self._delivered = 0

    @property
    def running(self) -> bool:
        return self._observer is not None

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    @property
    def dropped(self) -> int:
        """Events dropped since the current loop was bound"""
        return self._dropped

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> bool:
        """Start observing, returns False if the root directory does not exist"""
        if self._observer is not None:
            self.bind(loop or asyncio.get_running_loop())
            return True
        if not os.path.isdir(self.root):
            logger.warning(f"Not watching '{self.root}': directory does not exist")
            return False
        self.bind(loop or asyncio.get_running_loop())
        observer = Observer()
        observer.schedule(_CacheEventHandler(self), self.root, recursive=True)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info(f"Watching '{self.root}' for {len(self.caches)} file set(s)")
        return True

    def bind(self, loop: asyncio.AbstractEventLoop):
        """
        Deliver events to `loop` from now on.

        Must be called from `loop`'s thread. In-flight reads of the previous
        loop are discarded, and if events were dropped while no usable loop was
        bound, or handed to the previous loop but never run there, every cache
        is revoked since the changed files are unknown.
        """
        if loop is self._loop:
            return
        with self._lock:
            previous, self._loop = self._loop, loop
            lost = self._dropped + max(0, self._scheduled - self._delivered)
            self._dropped = self._scheduled = self._delivered = 0
        if previous is None:
            return
        logger.debug(f"Watch events for '{self.root}' now go to a new event loop")
        for cache in self.caches:
            cache.discard_pending()
        if lost:
            logger.info(f"Revoking {len(self.caches)} cache(s) of '{self.root}' after {lost} lost event(s)")
            for cache in self.caches:
                cache.invalidate_entire_cache()

    def stop(self):
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info(f"Stopped watching '{self.root}'")

    def dispatch(self, kind: CacheEvent, src_path):
        """Called from the observer thread"""
        self._call_in_loop(self._apply, kind, to_posix(os.fsdecode(src_path)))

    def dispatch_directory(self, src_path):
        """Called from the observer thread"""
        self._call_in_loop(self._apply_directory, to_posix(os.fsdecode(src_path)))

    def _call_in_loop(self, callback, *args):
        with self._lock:
            loop = self._loop
            if loop is not None and not loop.is_closed():
                try:
                    loop.call_soon_threadsafe(self._deliver, callback, *args)
                    self._scheduled += 1
                    return
                except RuntimeError:
                    # loop closed between the check and the call
                    pass
            self._dropped += 1
            dropped = self._dropped
        if dropped == 1:
            logger.warning(
                f"Dropped watch event for {args[-1]}: no running event loop. "
                f"Caches of '{self.root}' are revoked when the resolver is next used"
            )
        else:
            logger.debug(f"Dropped watch event for {args[-1]}: no running event loop")

    def _deliver(self, callback, *args):
        self._delivered += 1
        callback(*args)

    def _apply(self, kind: CacheEvent, path: str):
        for cache in self.caches:
            try:
                cache.notify(kind, path)
            except Exception:
                # no caller to propagate to on the loop callback
                logger.exception(f"[{cache.name}] Failed to apply {kind.value} of '{path}'")

    def _apply_directory(self, path: str):
        for cache in self.caches:
            try:
                cache.notify_directory(path)
            except Exception:
                logger.exception(f"[{cache.name}] Failed to apply directory change of '{path}'")
