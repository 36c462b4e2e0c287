"""Data models for imagectl.

This package contains the Pydantic models and enums describing image
references and Cloudinary transformation options.
"""

from .reference import ImageRef, RefKind, classify
from .transformation import (
    SizePreset,
    SIZE_PRESET_TOKENS,
    TransformationSpec,
    preset_segment,
)

__all__ = [
    "ImageRef",
    "RefKind",
    "classify",
    "SizePreset",
    "SIZE_PRESET_TOKENS",
    "TransformationSpec",
    "preset_segment",
]
