"""
Invalidation coordinator - the dependency graph between the file sets.

Rendered examples depend on more than their own file: pattern metadata and
templates are part of their rendering context, and readmes may embed example
output. The coordinator turns these dependencies into a fixed list of
(upstream, trigger, downstream) rules and subscribes each of them once:

    examples       ALL           -> examples
    patterns       ALL           -> examples
    main templates ALL           -> examples
    sub templates  ALL           -> examples
    examples       CACHE_REVOKED -> readmes

Changes only flow downstream. Readmes never invalidate examples and examples
never invalidate patterns or templates.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .cache import ChangeEvent
from .constants import CacheEvent, IndexName
from .indexes import FileIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvalidationRule:
    """When `upstream` emits `trigger`, `downstream` drops its whole cache"""
    upstream: IndexName
    trigger: CacheEvent
    downstream: IndexName

    def __str__(self) -> str:
        return f"{self.upstream.value} --{self.trigger.value}--> {self.downstream.value}"


DEFAULT_RULES: Tuple[InvalidationRule, ...] = (
    InvalidationRule(IndexName.EXAMPLES, CacheEvent.ALL, IndexName.EXAMPLES),
    InvalidationRule(IndexName.PATTERNS, CacheEvent.ALL, IndexName.EXAMPLES),
    InvalidationRule(IndexName.MAIN_TEMPLATES, CacheEvent.ALL, IndexName.EXAMPLES),
    InvalidationRule(IndexName.SUB_TEMPLATES, CacheEvent.ALL, IndexName.EXAMPLES),
    InvalidationRule(IndexName.EXAMPLES, CacheEvent.CACHE_REVOKED, IndexName.READMES),
)


class InvalidationCoordinator:
    """
    Subscribes the invalidation rules between a set of indexes.

    Rules whose upstream or downstream index is missing (a disabled feature)
    are skipped. The coordinator only ever calls `on_upstream_changed` of a
    downstream index; it never touches a cache directly.
    """

    def __init__(
        self,
        indexes: Dict[IndexName, Optional[FileIndex]],
        rules: Tuple[InvalidationRule, ...] = DEFAULT_RULES,
    ):
        self.indexes = {name: index for name, index in indexes.items() if index is not None}
        self._rules: List[InvalidationRule] = []
        self._unsubscribers: List[Callable[[], None]] = []
        for rule in rules:
            self._wire(rule)

    @property
    def rules(self) -> List[InvalidationRule]:
        """The active rules, in subscription order"""
        return list(self._rules)

    def downstream_of(self, name: IndexName) -> List[IndexName]:
        """Indexes directly invalidated by a change of `name`"""
        return [rule.downstream for rule in self._rules if rule.upstream == name]

    def _wire(self, rule: InvalidationRule):
        upstream = self.indexes.get(rule.upstream)
        downstream = self.indexes.get(rule.downstream)
        if upstream is None or downstream is None:
            logger.debug(f"Skipping invalidation rule '{rule}': index disabled")
            return

        def propagate(event: ChangeEvent, rule=rule, downstream=downstream):
            logger.debug(f"Invalidation rule '{rule}' fired by {event.path or 'cache revoke'}")
            downstream.on_upstream_changed(event)

        self._unsubscribers.append(upstream.cache.on(rule.trigger, propagate))
        self._rules.append(rule)
        logger.debug(f"Wired invalidation rule '{rule}'")

    def close(self):
        """Remove every subscription"""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._rules.clear()
