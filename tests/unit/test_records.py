"""Unit tests for records.py module.

Tests reference extraction across the record shapes returned by the content
API (news with an images array, legacy single image objects, faculty photos).
"""

import pytest

from imagectl.records import extract_all_references, extract_reference, record_image_url


CLOUD = "https://res.cloudinary.com/demo/image/upload/v1/news/a.jpg"


class TestExtractReference:
    """Test cases for extract_reference."""

    def test_images_array_wins(self):
        record = {
            "images": [{"url": CLOUD}, {"url": "b.png"}],
            "image": {"url": "legacy.png"},
        }
        assert extract_reference(record) == CLOUD

    def test_images_array_of_strings(self):
        assert extract_reference({"images": ["a.png"]}) == "a.png"

    def test_empty_images_array_falls_through(self):
        assert extract_reference({"images": [], "image": {"url": "/uploads/a.png"}}) == "/uploads/a.png"

    def test_first_image_without_url_falls_through(self):
        assert extract_reference({"images": [{"publicId": "x"}], "image": "a.png"}) == "a.png"

    def test_image_string(self):
        assert extract_reference({"image": "building2.jpeg"}) == "building2.jpeg"

    @pytest.mark.parametrize("image,expected", [
        ({"url": "u.png", "filename": "f.png", "path": "p.png"}, "u.png"),
        ({"filename": "f.png", "path": "p.png"}, "f.png"),
        ({"path": "/uploads/p.png"}, "/uploads/p.png"),
    ])
    def test_image_object_field_order(self, image, expected):
        assert extract_reference({"image": image}) == expected

    def test_flat_fields(self):
        assert extract_reference({"photoUrl": "p.png", "imageUrl": "i.png"}) == "p.png"
        assert extract_reference({"imageUrl": "i.png"}) == "i.png"

    @pytest.mark.parametrize("record", [
        {},
        {"image": None},
        {"image": ""},
        {"image": {"url": ""}},
        {"images": None},
        None,
        "a.png",
        ["a.png"],
    ])
    def test_no_reference(self, record):
        assert extract_reference(record) is None


class TestExtractAllReferences:
    """Test cases for extract_all_references."""

    def test_collects_all_without_duplicates(self):
        record = {
            "images": [{"url": "a.png"}, {"url": "b.png"}, "a.png", {"url": None}],
            "image": {"url": "b.png"},
            "photoUrl": "c.png",
        }
        assert extract_all_references(record) == ["a.png", "b.png", "c.png"]

    def test_non_mapping(self):
        assert extract_all_references(None) == []


class TestRecordImageUrl:
    """Test cases for record_image_url."""

    def test_resolves_found_reference(self, resolver):
        assert record_image_url({"image": {"filename": "f.png"}}, resolver) == "http://localhost:5000/uploads/f.png"

    def test_absolute_reference(self, resolver):
        assert record_image_url({"images": [{"url": CLOUD}]}, resolver) == CLOUD

    def test_avatar_fallback_from_title(self, resolver):
        url = record_image_url({"title": "Annual Sports Day"}, resolver)
        assert url.startswith("https://ui-avatars.com/api/?name=Annual%20Sports%20Day&")

    def test_avatar_fallback_from_name(self, resolver):
        url = record_image_url({"name": "Dr. Sana"}, resolver, fallback_name_field="name")
        assert "name=Dr.%20Sana" in url

    def test_name_used_when_title_missing(self, resolver):
        assert "name=Ayesha" in record_image_url({"name": "Ayesha"}, resolver)

    def test_non_mapping_record(self, resolver):
        assert record_image_url(None, resolver).startswith("https://ui-avatars.com/api/?name=&")
