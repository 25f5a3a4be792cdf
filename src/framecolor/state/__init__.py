"""Color store module for framecolor.

Owns the background color written by frame callbacks and read by the
image renderer. Stores are explicit objects handed to the application
factory, one per strategy:

- SharedColorStore: a single color seen by every client
- PerCastColorStore: one color per cast, keyed by the cast hash
"""

from framecolor.state.base import ColorStore
from framecolor.state.stores import (
    STRATEGIES,
    PerCastColorStore,
    SharedColorStore,
    create_color_store,
)

__all__ = [
    "STRATEGIES",
    "ColorStore",
    "PerCastColorStore",
    "SharedColorStore",
    "create_color_store",
]
