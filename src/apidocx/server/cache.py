"""Lazily built, explicitly refreshable documentation cache."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from apidocx.model.base import ApiDocumentation

logger = logging.getLogger(__name__)


class DocumentationCache:
    """Holds the one documentation tree served over HTTP.

    The first reader builds it; concurrent first readers wait on the lock
    and share the result. ``refresh`` swaps in a fresh tree.
    """

    def __init__(
        self,
        builder: Callable[[], ApiDocumentation],
        clock: Callable[[], float] = time.time,
        lock: threading.Lock | None = None,
    ):
        self._builder = builder
        self._clock = clock
        self._lock = lock or threading.Lock()
        self._doc: ApiDocumentation | None = None
        self.built_at: float | None = None

    def get_or_build(self) -> ApiDocumentation:
        doc = self._doc
        if doc is not None:
            return doc
        with self._lock:
            if self._doc is None:
                self._build()
            return self._doc

    def invalidate(self) -> None:
        with self._lock:
            self._doc = None
            self.built_at = None

    def refresh(self) -> float:
        """Rebuild now and return the rebuild time from the clock."""
        with self._lock:
            self._doc = None
            self._build()
            return self.built_at

    def _build(self) -> None:
        logger.info("Building documentation")
        self._doc = self._builder()
        self.built_at = self._clock()
