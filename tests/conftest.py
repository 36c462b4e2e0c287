"""Shared test fixtures for imagectl tests."""

import pytest

from imagectl.resolver import ImageResolver


CLOUDINARY_URL = "https://res.cloudinary.com/demo/image/upload/v1690000000/folder/name.jpg"
LOCAL_ORIGIN = "http://localhost:5000"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.imagectl and ambient env."""
    config_dir = tmp_path / "imagectl-config"
    monkeypatch.setenv("IMAGECTL_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("IMAGECTL_API_URL", raising=False)
    monkeypatch.delenv("IMAGECTL_CLOUD_MARKER", raising=False)
    monkeypatch.delenv("IMAGECTL_OUTPUT_FORMAT", raising=False)
    return config_dir


@pytest.fixture
def resolver():
    """Resolver bound to the local development origin."""
    return ImageResolver(api_origin=LOCAL_ORIGIN)


@pytest.fixture
def cloudinary_url():
    return CLOUDINARY_URL
