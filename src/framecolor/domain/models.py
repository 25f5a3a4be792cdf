"""Core domain models for framecolor.

These models represent the data flowing through the server: the colors
and palette used for image renders, the frame-action payload posted by
frame clients, and the context handed to the page template.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterator, Sequence
from urllib.parse import urlencode

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class Color(BaseModel):
    """An 8-bit RGBA color.

    Alpha is carried for completeness but JPEG output has no alpha
    channel, so renders only use the RGB components.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red channel")
    g: int = Field(ge=0, le=255, description="Green channel")
    b: int = Field(ge=0, le=255, description="Blue channel")
    a: int = Field(default=255, ge=0, le=255, description="Alpha channel (255 = opaque)")

    @classmethod
    def from_tuple(cls, values: Sequence[int]) -> Color:
        """Build a color from an (r, g, b) or (r, g, b, a) sequence."""
        if len(values) not in (3, 4):
            raise ValueError(f"Expected 3 or 4 channels, got {len(values)}")
        return cls(r=values[0], g=values[1], b=values[2], a=values[3] if len(values) == 4 else 255)

    def as_rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def as_bgr(self) -> tuple[int, int, int]:
        """Channel order used by OpenCV buffers."""
        return (self.b, self.g, self.r)

    def as_rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


DEFAULT_COLOR = Color(r=255, g=255, b=255, a=255)


class Palette(BaseModel):
    """Fixed, ordered list of colors addressed by a 1-based selector."""

    model_config = ConfigDict(frozen=True)

    colors: tuple[Color, ...] = Field(min_length=1)

    @classmethod
    def from_tuples(cls, values: Sequence[Sequence[int]]) -> Palette:
        return cls(colors=tuple(Color.from_tuple(v) for v in values))

    def lookup(self, selector: int | None) -> Color | None:
        """Return the color for a 1-based selector, or None if out of range."""
        if selector is None or selector < 1 or selector > len(self.colors):
            return None
        return self.colors[selector - 1]

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[Color]:  # type: ignore[override]
        return iter(self.colors)


DEFAULT_PALETTE = Palette(
    colors=(
        Color(r=0, g=128, b=0),  # Green
        Color(r=128, g=0, b=128),  # Purple
        Color(r=255, g=0, b=0),  # Red
        Color(r=0, g=0, b=255),  # Blue
    )
)


# ---------------------------------------------------------------------------
# Frame action payload
# ---------------------------------------------------------------------------


class _FramePayloadModel(BaseModel):
    """Base for frame payload models.

    Scalars are strict, so ``"3"``, ``true`` or ``3.0`` are rejected where
    an integer is expected. JSON ``null`` leaves a field at its default.
    """

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class CastId(_FramePayloadModel):
    """Identifies the cast the frame was rendered in."""

    fid: StrictInt = 0
    hash: StrictStr = ""


class UntrustedData(_FramePayloadModel):
    """The client-reported part of a frame action.

    Only ``buttonIndex`` influences rendering. The remaining fields are
    accepted so real client payloads validate, and are logged for
    diagnostics.
    """

    fid: StrictInt = 0
    url: StrictStr = ""
    messageHash: StrictStr = ""
    timestamp: StrictInt = 0
    network: StrictInt = 0
    buttonIndex: StrictInt = 0
    castId: CastId = Field(default_factory=CastId)


class FrameActionPayload(_FramePayloadModel):
    """Body of a frame button callback (``POST /``)."""

    untrustedData: UntrustedData = Field(default_factory=UntrustedData)
    # Signed hub message; carried through untouched and never verified
    trustedData: Any = None

    @model_validator(mode="before")
    @classmethod
    def _null_body_is_empty(cls, data: Any) -> Any:
        return {} if data is None else data

    @property
    def selector(self) -> int:
        return self.untrustedData.buttonIndex


# ---------------------------------------------------------------------------
# Page rendering
# ---------------------------------------------------------------------------


class PageContext(BaseModel):
    """Values interpolated into the frame page template."""

    uuid: str = Field(default_factory=lambda: str(uuid.uuid4()))
    image_path: str = Field(default="/image")
    post_url: str = Field(default="/", description="Absolute URL frame clients post button actions to")
    image_key: str | None = Field(default=None, description="Color store slot for the image")
    width: int = Field(default=1375, gt=0)
    height: int = Field(default=720, gt=0)

    @property
    def image_url(self) -> str:
        """Image URL with the per-render UUID as a cache buster."""
        params = {"v": self.uuid}
        if self.image_key:
            params["key"] = self.image_key
        return f"{self.image_path}?{urlencode(params)}"

    def template_context(self) -> dict[str, object]:
        return {**self.model_dump(), "image_url": self.image_url}
