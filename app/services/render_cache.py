"""In-process cache for rendered dashboard views."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Cache key of the rendered configuration list
CONFIG_LIST_KEY = "configs"


@dataclass
class _Entry:
    value: Any
    expires_at: float


class RenderCache:
    """Small TTL cache keyed by view name.

    This is a singleton shared by all request threads, so every access goes
    through one lock. Writers that change the data behind a view call
    ``invalidate`` so the next read renders fresh data.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        # Bumped on every invalidation; a render that started before an
        # invalidation must not be stored.
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()

    def get_or_render(self, key: str, render: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or render and store it.

        Rendering happens outside the lock. Exceptions from ``render``
        propagate and nothing is stored.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > self._clock():
                return entry.value
            generation = self._generations.get(key, 0)

        value = render()

        if self.ttl_seconds > 0:
            with self._lock:
                if self._generations.get(key, 0) == generation:
                    self._entries[key] = _Entry(
                        value=value, expires_at=self._clock() + self.ttl_seconds
                    )
        return value

    def invalidate(self, key: str) -> None:
        """Drop the cached value for ``key``."""
        with self._lock:
            self._generations[key] = self._generations.get(key, 0) + 1
            removed = self._entries.pop(key, None)
        if removed is not None:
            logger.debug("Invalidated cached view '%s'", key)

    def clear(self) -> None:
        """Drop every cached value."""
        with self._lock:
            for key in self._entries:
                self._generations[key] = self._generations.get(key, 0) + 1
            self._entries.clear()
