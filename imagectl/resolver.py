"""Image URL resolution.

This module turns stored image references into displayable URLs. Relative
references are prefixed with the configured API origin, and Cloudinary-hosted
assets can have transformation tokens inserted after the ``/upload/`` path
segment.

Every operation is a pure function of its inputs and the resolver's
configuration. Nothing here raises: a reference that cannot be enhanced
falls back to the plain resolved URL, and a missing reference yields None.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from .models.reference import RefKind, UPLOADS_PREFIX, classify
from .models.transformation import (
    TransformationSpec,
    format_value,
    is_known_preset,
    preset_segment,
)

logger = logging.getLogger(__name__)

DEFAULT_API_ORIGIN = "http://localhost:5000"
DEFAULT_CLOUD_MARKER = "cloudinary.com"
DEFAULT_PLACEHOLDER_BASE = "https://via.placeholder.com"
DEFAULT_AVATAR_BASE = "https://ui-avatars.com/api/"

UPLOAD_SEGMENT = "/upload/"
PUBLIC_ID_PATTERN = re.compile(r"/v\d+/(.+)\.")

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!*'()"


class ImageResolver:
    """Resolve image references against an API origin.

    The resolver holds only immutable configuration and is safe to share
    between any number of callers.
    """

    def __init__(
        self,
        api_origin: str = DEFAULT_API_ORIGIN,
        cloud_marker: str = DEFAULT_CLOUD_MARKER,
        placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
        avatar_base: str = DEFAULT_AVATAR_BASE,
    ) -> None:
        """Initialize the resolver.

        Args:
            api_origin: Origin of the backend serving ``/uploads/``
            cloud_marker: Substring identifying Cloudinary-hosted URLs
            placeholder_base: Base URL of the placeholder image service
            avatar_base: Base URL of the generated avatar service
        """
        self._api_origin = str(api_origin or DEFAULT_API_ORIGIN).rstrip("/")
        self._cloud_marker = cloud_marker or DEFAULT_CLOUD_MARKER
        self._placeholder_base = str(placeholder_base).rstrip("/")
        self._avatar_base = str(avatar_base)

    @classmethod
    def from_profile(cls, profile: Any) -> "ImageResolver":
        """Create a resolver from a configuration profile."""
        return cls(
            api_origin=str(profile.api_url),
            cloud_marker=profile.cloud_marker,
            placeholder_base=str(profile.placeholder_base),
            avatar_base=str(profile.avatar_base),
        )

    @property
    def api_origin(self) -> str:
        return self._api_origin

    @property
    def cloud_marker(self) -> str:
        return self._cloud_marker

    def __repr__(self) -> str:
        return f"ImageResolver(api_origin={self._api_origin!r})"

    def resolve(self, ref: Any) -> Optional[str]:
        """Get the complete URL for an image reference.

        Args:
            ref: Absolute URL, ``/uploads/`` path or bare filename

        Returns:
            Absolute URL, or None when there is no reference
        """
        kind = classify(ref)

        if kind is RefKind.EMPTY:
            logger.debug("Empty image reference: %r", ref)
            return None
        if kind is RefKind.ABSOLUTE:
            return ref
        if kind is RefKind.RELATIVE_UPLOAD:
            return f"{self._api_origin}{ref}"
        return f"{self._api_origin}{UPLOADS_PREFIX}{ref}"

    def is_cloudinary_asset(self, ref: Any) -> bool:
        """Check if a reference points at a Cloudinary asset."""
        return bool(ref) and isinstance(ref, str) and self._cloud_marker in ref

    def resolve_thumbnail(
        self,
        ref: Any,
        width: Union[int, str] = 400,
        height: Union[int, str] = 300,
    ) -> Optional[str]:
        """Get a filled thumbnail URL.

        Args:
            ref: Image reference
            width: Thumbnail width
            height: Thumbnail height

        Returns:
            Transformed URL for Cloudinary assets, the resolved URL otherwise
        """
        segment = f"w_{format_value(width)},h_{format_value(height)},c_fill,f_auto,q_auto"
        return self._transform(ref, segment)

    def resolve_responsive(self, ref: Any, size: Any = "medium") -> Optional[str]:
        """Get a responsive width URL for a size preset.

        Args:
            ref: Image reference
            size: One of ``small``, ``medium`` or ``large``

        Returns:
            Transformed URL for Cloudinary assets, the resolved URL otherwise
        """
        if not is_known_preset(size):
            logger.debug("Unknown size preset %r, using medium", size)
        return self._transform(ref, preset_segment(size))

    def resolve_optimized(
        self,
        ref: Any,
        options: Optional[Union[TransformationSpec, Mapping[str, Any]]] = None,
        **extra: Any,
    ) -> Optional[str]:
        """Get a URL with custom transformations applied.

        Args:
            ref: Image reference
            options: Transformation options as a TransformationSpec or mapping
            **extra: Additional options merged after ``options``

        Returns:
            Transformed URL for Cloudinary assets, the resolved URL otherwise
        """
        spec = self._build_spec(options, extra)
        return self._transform(ref, spec.to_segment())

    def extract_cloudinary_public_id(self, ref: Any) -> Optional[str]:
        """Extract the public ID from a Cloudinary URL.

        The public ID is the path between the ``/v<digits>/`` version marker
        and the final extension dot.
        """
        if not self.is_cloudinary_asset(ref):
            return None

        match = PUBLIC_ID_PATTERN.search(ref)
        return match.group(1) if match else None

    def placeholder(
        self,
        width: Union[int, str] = 400,
        height: Union[int, str] = 300,
        text: Any = "No Image",
    ) -> str:
        """Generate a placeholder image URL."""
        encoded = quote(str(text), safe=_URI_COMPONENT_SAFE)
        return f"{self._placeholder_base}/{width}x{height}/e5e7eb/6b7280?text={encoded}"

    def avatar(
        self,
        name: Any,
        size: Union[int, str] = 400,
        background: str = "3B82F6",
        color: str = "white",
    ) -> str:
        """Generate an initials avatar URL for records without an image."""
        encoded = quote(str(name or ""), safe=_URI_COMPONENT_SAFE)
        return f"{self._avatar_base}?name={encoded}&background={background}&color={color}&size={size}"

    def resolve_or_placeholder(
        self,
        ref: Any,
        width: Union[int, str] = 400,
        height: Union[int, str] = 300,
        text: Any = "No Image",
    ) -> str:
        """Resolve a reference, substituting a placeholder when it is missing."""
        return self.resolve(ref) or self.placeholder(width, height, text)

    def _transform(self, ref: Any, segment: str) -> Optional[str]:
        url = self.resolve(ref)
        if url is None:
            return None

        if not self.is_cloudinary_asset(url):
            logger.debug("Not a Cloudinary asset, skipping transformation: %s", url)
            return url

        # Only the first /upload/ is rewritten
        return url.replace(UPLOAD_SEGMENT, f"{UPLOAD_SEGMENT}{segment}/", 1)

    def _build_spec(
        self,
        options: Optional[Union[TransformationSpec, Mapping[str, Any]]],
        extra: Dict[str, Any],
    ) -> TransformationSpec:
        if isinstance(options, TransformationSpec):
            if not extra:
                return options
            data = {**options.model_dump(exclude_unset=True), **extra}
        elif isinstance(options, Mapping):
            data = {**options, **extra}
        else:
            data = dict(extra)

        try:
            return TransformationSpec(**data)
        except TypeError as e:
            logger.debug("Ignoring invalid transformation options %r: %s", data, e)
            return TransformationSpec()
        except PydanticValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error.get("loc")}
            logger.debug("Dropping invalid transformation options %s: %s", sorted(map(str, invalid)), e)

        # Remaining options are kept, dropped ones fall back to their defaults
        try:
            return TransformationSpec(**{key: value for key, value in data.items() if key not in invalid})
        except (PydanticValidationError, TypeError):
            return TransformationSpec()


def default_resolver(profile_name: Optional[str] = None) -> ImageResolver:
    """Create a resolver from the active configuration.

    Args:
        profile_name: Profile to use instead of environment/active profile

    Returns:
        Resolver configured from the resolved profile
    """
    from .config import ConfigManager

    profile = ConfigManager().resolve_profile(profile_name)
    return ImageResolver.from_profile(profile)
