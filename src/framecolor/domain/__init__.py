"""Domain models for framecolor.

Colors, the selector palette, inbound frame-action payloads and the
page template context. All models use Pydantic v2 for validation.
"""

from framecolor.domain.models import (
    DEFAULT_COLOR,
    DEFAULT_PALETTE,
    CastId,
    Color,
    FrameActionPayload,
    PageContext,
    Palette,
    UntrustedData,
)

__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_PALETTE",
    "CastId",
    "Color",
    "FrameActionPayload",
    "PageContext",
    "Palette",
    "UntrustedData",
]
