"""Named image presets for the site's page surfaces.

Each surface (gallery, faculty, news, activities) has a small set of named
variants. Presets are addressed by dotted name, e.g. ``faculty.card``.
"""

from typing import Any, Callable, Dict, List, Optional

from .exceptions import PresetNotFoundError
from .resolver import ImageResolver

PresetFunc = Callable[[Any], Optional[str]]


class _Surface:
    """Attribute access to the presets of one surface."""

    def __init__(self, name: str, presets: Dict[str, PresetFunc]) -> None:
        self._name = name
        self._presets = presets

    def __getattr__(self, item: str) -> PresetFunc:
        presets = self.__dict__.get("_presets", {})
        if item not in presets:
            raise AttributeError(f"Surface '{self.__dict__.get('_name')}' has no preset '{item}'")
        return presets[item]

    def names(self) -> List[str]:
        return list(self._presets)


class ImagePresets:
    """Preset image variants built on an ImageResolver."""

    def __init__(self, resolver: ImageResolver) -> None:
        self.resolver = resolver
        r = resolver

        self._registry: Dict[str, Dict[str, PresetFunc]] = {
            "gallery": {
                "full": r.resolve,
                "thumbnail": lambda ref: r.resolve_thumbnail(ref, 400, 300),
                "grid": lambda ref: r.resolve_optimized(ref, {"width": 300, "height": 200, "crop": "fill"}),
            },
            "faculty": {
                "profile": lambda ref: r.resolve_optimized(
                    ref, {"width": 400, "height": 400, "crop": "fill", "gravity": "face"}
                ),
                "avatar": lambda ref: r.resolve_optimized(
                    ref, {"width": 100, "height": 100, "crop": "fill", "gravity": "face"}
                ),
                "card": lambda ref: r.resolve_optimized(
                    ref, {"width": 250, "height": 300, "crop": "fill", "gravity": "face"}
                ),
            },
            "news": {
                "hero": lambda ref: r.resolve_optimized(ref, {"width": 1200, "height": 600, "crop": "fill"}),
                "card": lambda ref: r.resolve_optimized(ref, {"width": 400, "height": 250, "crop": "fill"}),
                "thumbnail": lambda ref: r.resolve_thumbnail(ref, 200, 150),
            },
            "activities": {
                "carousel": lambda ref: r.resolve_optimized(ref, {"width": 1600, "height": 900, "crop": "fill"}),
                "grid": lambda ref: r.resolve_optimized(ref, {"width": 400, "height": 250, "crop": "fill"}),
                "preview": lambda ref: r.resolve_thumbnail(ref, 300, 200),
            },
        }

        self.gallery = _Surface("gallery", self._registry["gallery"])
        self.faculty = _Surface("faculty", self._registry["faculty"])
        self.news = _Surface("news", self._registry["news"])
        self.activities = _Surface("activities", self._registry["activities"])

    def names(self) -> List[str]:
        """List all preset names in ``surface.variant`` form."""
        return [
            f"{surface}.{variant}"
            for surface, variants in self._registry.items()
            for variant in variants
        ]

    def get(self, name: str) -> PresetFunc:
        """Look up a preset by dotted name.

        Raises:
            PresetNotFoundError: If the preset does not exist
        """
        surface, _, variant = name.partition(".")
        try:
            return self._registry[surface][variant]
        except KeyError:
            raise PresetNotFoundError(
                f"Unknown preset '{name}'",
                preset=name,
                available=self.names(),
            )

    def apply(self, name: str, ref: Any) -> Optional[str]:
        """Apply a named preset to an image reference."""
        return self.get(name)(ref)
