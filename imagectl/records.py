"""Image reference extraction from API records.

News, faculty, gallery and activity records store their images in a few
different shapes depending on when they were created. These helpers find the
raw reference in a record so it can be passed to the resolver.
"""

from typing import Any, List, Mapping, Optional

from .resolver import ImageResolver

# Flat fields checked after the ``image`` object
_FLAT_FIELDS = ("photoUrl", "imageUrl")


def _first_image_url(record: Mapping[str, Any]) -> Optional[str]:
    images = record.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, Mapping) and first.get("url"):
            return first["url"]
        if isinstance(first, str) and first:
            return first
    return None


def _single_image_ref(record: Mapping[str, Any]) -> Optional[str]:
    image = record.get("image")
    if isinstance(image, str):
        return image or None
    if isinstance(image, Mapping):
        for key in ("url", "filename", "path"):
            value = image.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def extract_reference(record: Any) -> Optional[str]:
    """Find the primary image reference in a record.

    Lookup order is ``images[0].url``, ``image.url``, ``image`` as a string,
    ``image.filename``, ``image.path``, ``photoUrl`` and ``imageUrl``.

    Args:
        record: Record as returned by the content API

    Returns:
        Raw image reference or None
    """
    if not isinstance(record, Mapping):
        return None

    ref = _first_image_url(record) or _single_image_ref(record)
    if ref:
        return ref

    for field in _FLAT_FIELDS:
        value = record.get(field)
        if isinstance(value, str) and value:
            return value

    return None


def extract_all_references(record: Any) -> List[str]:
    """Collect every image reference in a record, without duplicates.

    Order is ``images[*]``, the single ``image`` reference, then ``photoUrl``
    and ``imageUrl``.
    """
    if not isinstance(record, Mapping):
        return []

    refs = []
    images = record.get("images")
    if isinstance(images, list):
        for item in images:
            if isinstance(item, Mapping):
                item = item.get("url")
            if isinstance(item, str) and item:
                refs.append(item)

    single = _single_image_ref(record)
    if single:
        refs.append(single)

    for field in _FLAT_FIELDS:
        value = record.get(field)
        if isinstance(value, str) and value:
            refs.append(value)

    return list(dict.fromkeys(refs))


def record_image_url(
    record: Any,
    resolver: ImageResolver,
    fallback_name_field: str = "title",
) -> str:
    """Get a displayable image URL for a record.

    Records with no image get an initials avatar built from ``title`` (or
    ``name`` for faculty records).
    """
    url = resolver.resolve(extract_reference(record))
    if url:
        return url

    name = ""
    if isinstance(record, Mapping):
        name = record.get(fallback_name_field) or record.get("name") or record.get("title") or ""
    return resolver.avatar(name)
