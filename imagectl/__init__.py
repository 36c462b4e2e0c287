"""Image URL resolution package.

Turns stored image references (absolute URLs, ``/uploads/`` paths and bare
filenames) into displayable URLs, with Cloudinary transformations for
resized, cropped and re-encoded variants.
"""

__version__ = "0.1.0"
__description__ = "Resolve stored image references into displayable URLs"

# Re-export main classes for convenience
from .resolver import ImageResolver, default_resolver
from .presets import ImagePresets
from .records import extract_reference, extract_all_references, record_image_url
from .models import ImageRef, RefKind, classify, SizePreset, TransformationSpec
from .config import ConfigManager, Profile
from .render import OutputFormatter
from .exceptions import (
    ImageCtlError,
    ConfigError,
    ValidationError,
    PresetNotFoundError,
    RecordFileError,
)

__all__ = [
    "__version__",
    "__description__",
    "ImageResolver",
    "default_resolver",
    "ImagePresets",
    "extract_reference",
    "extract_all_references",
    "record_image_url",
    "ImageRef",
    "RefKind",
    "classify",
    "SizePreset",
    "TransformationSpec",
    "ConfigManager",
    "Profile",
    "OutputFormatter",
    "ImageCtlError",
    "ConfigError",
    "ValidationError",
    "PresetNotFoundError",
    "RecordFileError",
]
