"""Image reference model.

An image reference is a plain string whose kind is inferred from its prefix.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, computed_field


ABSOLUTE_PREFIXES = ("http://", "https://")
UPLOADS_PREFIX = "/uploads/"


class RefKind(str, Enum):
    """Shape of a stored image reference."""

    EMPTY = "empty"
    ABSOLUTE = "absolute"
    RELATIVE_UPLOAD = "relative_upload"
    BARE_FILENAME = "bare_filename"


def classify(ref: Any) -> RefKind:
    """Classify a raw image reference by its prefix.

    Non-string values are treated as empty.
    """
    if not ref or not isinstance(ref, str):
        return RefKind.EMPTY
    if ref.startswith(ABSOLUTE_PREFIXES):
        return RefKind.ABSOLUTE
    if ref.startswith(UPLOADS_PREFIX):
        return RefKind.RELATIVE_UPLOAD
    return RefKind.BARE_FILENAME


class ImageRef(BaseModel):
    """A raw image reference together with its classification."""

    raw: Optional[str] = None

    @computed_field
    @property
    def kind(self) -> RefKind:
        return classify(self.raw)

    @property
    def is_empty(self) -> bool:
        return self.kind is RefKind.EMPTY

    def is_cloudinary(self, marker: str = "cloudinary.com") -> bool:
        """Check whether the reference points at a Cloudinary asset."""
        return not self.is_empty and marker in self.raw
