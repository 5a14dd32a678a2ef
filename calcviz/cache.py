from __future__ import annotations

import logging
from collections import OrderedDict
from typing import NamedTuple, Optional

from .assembler import PlotSeriesSet

logger = logging.getLogger(__name__)


class CacheKey(NamedTuple):
    expression: str
    x0: float
    y0: float
    dark: bool


class PlotCache:
    """Memoizes assembled series by exact ``(expression, x0, y0, dark)``.

    Keys are compared as given: ``"x^2"`` and ``"x^2 "`` are different
    entries. With ``max_entries=None`` the cache grows without bound;
    otherwise the least recently used entry is evicted first.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be > 0 or None")
        self.max_entries = max_entries
        self._entries: "OrderedDict[CacheKey, PlotSeriesSet]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[PlotSeriesSet]:
        try:
            value = self._entries[key]
        except KeyError:
            self.misses += 1
            logger.debug("cache miss %s", key)
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        logger.debug("cache hit %s", key)
        return value

    def put(self, key: CacheKey, value: PlotSeriesSet) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache evicted %s", evicted)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
