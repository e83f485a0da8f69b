import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..constants import CacheEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """One notification of a file cache"""
    kind: CacheEvent
    source: str
    # None for CACHE_REVOKED
    path: Optional[str] = None
    generation: int = 0


Listener = Callable[[ChangeEvent], None]


class EventRegistry:
    """
    Synchronous listener registry.

    Listeners run in registration order on the emitting thread. A failing
    listener propagates to the emitter.
    """

    def __init__(self):
        self._listeners: Dict[CacheEvent, List[Listener]] = {}

    def on(self, kind: CacheEvent, listener: Listener) -> Callable[[], None]:
        """Register a listener, returns a callable that removes it again"""
        kind = CacheEvent(kind)
        self._listeners.setdefault(kind, []).append(listener)

        def unsubscribe():
            listeners = self._listeners.get(kind, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ChangeEvent):
        # copy: listeners may unsubscribe while we iterate
        for listener in list(self._listeners.get(event.kind, [])):
            listener(event)
