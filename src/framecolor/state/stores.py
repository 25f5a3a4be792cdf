"""Concrete color stores.

Both stores guard every read and write with a lock, so a reader always
observes a whole Color written by some request. Which concurrent writer
wins is unspecified.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from framecolor.domain.models import DEFAULT_COLOR, Color, FrameActionPayload
from framecolor.state.base import ColorStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_CASTS = 1024


class SharedColorStore(ColorStore):
    """One process-wide color shared by every client."""

    strategy = "shared"

    def __init__(self, default: Color = DEFAULT_COLOR) -> None:
        super().__init__(default)
        self._lock = threading.Lock()
        self._color = default

    def get(self, key: str | None = None) -> Color:
        with self._lock:
            return self._color

    def set(self, color: Color, key: str | None = None) -> None:
        with self._lock:
            self._color = color

    def key_for(self, payload: FrameActionPayload) -> str | None:
        return None


class PerCastColorStore(ColorStore):
    """One color per cast, keyed by ``untrustedData.castId.hash``.

    Payloads without a cast hash write to the shared slot (key None),
    which is also what image requests without a key read. Cast hashes are
    client-supplied, so at most ``max_casts`` slots are kept and the least
    recently used one is evicted first.
    """

    strategy = "per_cast"

    def __init__(self, default: Color = DEFAULT_COLOR, max_casts: int = DEFAULT_MAX_CASTS) -> None:
        super().__init__(default)
        if max_casts < 1:
            raise ValueError(f"max_casts must be positive, got {max_casts}")
        self._max_casts = max_casts
        self._lock = threading.Lock()
        self._colors: "OrderedDict[str | None, Color]" = OrderedDict()

    @property
    def max_casts(self) -> int:
        return self._max_casts

    def get(self, key: str | None = None) -> Color:
        key = key or None
        with self._lock:
            if key not in self._colors:
                return self._default
            self._colors.move_to_end(key)
            return self._colors[key]

    def set(self, color: Color, key: str | None = None) -> None:
        key = key or None
        with self._lock:
            self._colors[key] = color
            self._colors.move_to_end(key)
            while len(self._colors) > self._max_casts:
                evicted, _ = self._colors.popitem(last=False)
                logger.debug("Evicted color for cast %s", evicted)

    def key_for(self, payload: FrameActionPayload) -> str | None:
        return payload.untrustedData.castId.hash or None

    def __len__(self) -> int:
        with self._lock:
            return len(self._colors)


STRATEGIES: dict[str, type[ColorStore]] = {
    SharedColorStore.strategy: SharedColorStore,
    PerCastColorStore.strategy: PerCastColorStore,
}


def create_color_store(
    strategy: str = "shared",
    default: Color = DEFAULT_COLOR,
    max_casts: int = DEFAULT_MAX_CASTS,
) -> ColorStore:
    """Instantiate the store registered under ``strategy``."""
    try:
        store_cls = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown color store strategy: {strategy!r} (expected one of {sorted(STRATEGIES)})"
        ) from None
    logger.debug("Creating %s color store (default=%s)", strategy, default.hex)
    if store_cls is PerCastColorStore:
        return PerCastColorStore(default=default, max_casts=max_casts)
    return store_cls(default=default)
