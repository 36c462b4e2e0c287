"""Cloudinary transformation models.

Transformation options are rendered as ``key_value`` tokens and joined with
commas to form the segment inserted after ``/upload/`` in a Cloudinary URL.
"""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SizePreset(str, Enum):
    """Responsive width presets."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


SIZE_PRESET_TOKENS = {
    SizePreset.SMALL: "w_600,f_auto,q_auto",
    SizePreset.MEDIUM: "w_1200,f_auto,q_auto",
    SizePreset.LARGE: "w_1920,f_auto,q_auto",
}

DEFAULT_SIZE_PRESET = SizePreset.MEDIUM


def preset_segment(size: Any) -> str:
    """Get the transformation segment for a size preset.

    Unknown presets map to the medium segment.
    """
    try:
        return SIZE_PRESET_TOKENS[SizePreset(size)]
    except (ValueError, TypeError):
        return SIZE_PRESET_TOKENS[DEFAULT_SIZE_PRESET]


def is_known_preset(size: Any) -> bool:
    return isinstance(size, str) and size in {preset.value for preset in SizePreset}


def format_value(value: Any) -> str:
    """Render an option value as it appears in a token.

    Integral floats are written without a fractional part, so ``400.0``
    renders as ``400``.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


Dimension = Union[int, float, str]


class TransformationSpec(BaseModel):
    """Cloudinary transformation options.

    Extra keyword arguments are kept and emitted verbatim as ``key_value``
    tokens after the recognized options, in the order they were supplied.
    """

    model_config = ConfigDict(extra="allow")

    width: Optional[Dimension] = Field(None, description="Target width (w_)")
    height: Optional[Dimension] = Field(None, description="Target height (h_)")
    crop: Optional[str] = Field("fill", description="Crop mode (c_)")
    gravity: Optional[str] = Field(None, description="Crop gravity (g_)")
    quality: Optional[str] = Field("auto", description="Quality (q_)")
    format: Optional[str] = Field("auto", description="Delivery format (f_)")

    @field_validator("crop", "gravity", "quality", "format", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        """Accept numeric values such as ``quality=80`` or ``crop=5``."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_value(v)
        return v

    def to_tokens(self) -> List[str]:
        """Render options as tokens in w, h, c, g, q, f, extras order."""
        tokens = []
        if self.width:
            tokens.append(f"w_{format_value(self.width)}")
        if self.height:
            tokens.append(f"h_{format_value(self.height)}")
        if self.crop:
            tokens.append(f"c_{self.crop}")
        if self.gravity:
            tokens.append(f"g_{self.gravity}")
        if self.quality:
            tokens.append(f"q_{self.quality}")
        if self.format:
            tokens.append(f"f_{self.format}")

        for key, value in (self.model_extra or {}).items():
            tokens.append(f"{key}_{format_value(value)}")

        return tokens

    def to_segment(self) -> str:
        """Render options as a comma-joined transformation segment."""
        return ",".join(self.to_tokens())
