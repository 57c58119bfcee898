"""
Document cache — parsed documents keyed by query text.

Process-wide and shared across requests: Documents are immutable.
Unrelated to the per-request loader cache.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from quarry.document._parse import parse
from quarry.document._types import Document

logger = logging.getLogger(__name__)


class DocumentCache:
    """
    In-memory LRU of parsed documents.

    Example:
        cache = DocumentCache(max_size=256)
        doc = cache.get_or_parse("{ items { barcode } }")
    """

    def __init__(self, max_size: int = 256) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._cache: OrderedDict[str, Document] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, text: object) -> bool:
        return text in self._cache

    def get(self, text: str) -> Document | None:
        doc = self._cache.get(text)
        if doc is not None:
            self._cache.move_to_end(text)
        return doc

    def set(self, text: str, doc: Document) -> None:
        if text in self._cache:
            self._cache.move_to_end(text)
        elif len(self._cache) >= self._max_size:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted document (%d chars)", len(evicted))
        self._cache[text] = doc

    def get_or_parse(self, text: str) -> Document:
        """Parse once; later calls return the same Document. Raises DocumentError."""
        doc = self.get(text)
        if doc is not None:
            self.hits += 1
            return doc
        self.misses += 1
        doc = parse(text)
        self.set(text, doc)
        return doc

    def clear(self) -> None:
        self._cache.clear()


__all__ = ("DocumentCache",)
