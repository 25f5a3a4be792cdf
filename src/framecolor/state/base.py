"""Abstract base class for color stores.

The page handler writes through this interface and the image handler
reads through it, so the keying policy can be swapped without touching
either route.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from framecolor.domain.models import DEFAULT_COLOR, Color, FrameActionPayload

logger = logging.getLogger(__name__)


class ColorStore(ABC):
    """Thread-safe holder for the current background color(s).

    Example usage::

        store = SharedColorStore()
        store.set(palette.lookup(3), key=store.key_for(payload))
        color = store.get(key=None)
    """

    strategy: str = ""

    def __init__(self, default: Color = DEFAULT_COLOR) -> None:
        self._default = default

    @property
    def default(self) -> Color:
        return self._default

    @abstractmethod
    def get(self, key: str | None = None) -> Color:
        """Return the color for a slot.

        Args:
            key: Slot identifier produced by key_for(), or None for the
                 shared slot. Unknown keys read the default color.
        """
        ...

    @abstractmethod
    def set(self, color: Color, key: str | None = None) -> None:
        """Replace the color for a slot. Last writer wins."""
        ...

    @abstractmethod
    def key_for(self, payload: FrameActionPayload) -> str | None:
        """Derive the slot identifier a payload writes to."""
        ...

    def apply(self, payload: FrameActionPayload, color: Color) -> str | None:
        """Store ``color`` in the slot selected by ``payload`` and return the key."""
        key = self.key_for(payload)
        self.set(color, key=key)
        logger.info("Color set to %s (strategy=%s, key=%s)", color.hex, self.strategy, key)
        return key
