"""Shared fixtures for cftransforms tests."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest
import yaml

from cftransforms.config import DiskConfig, TransformsConfig
from cftransforms.image import CloudflareImage
from cftransforms.storage import MockStorage


# === Path/Directory Fixtures ===

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CLOUDFLARE_* variables from the host out of the tests."""
    for name in (
        "CLOUDFLARE_TRANSFORMS_DOMAIN",
        "CLOUDFLARE_TRANSFORMS_DISK",
        "CLOUDFLARE_TRANSFORMS_PATH",
        "CLOUDFLARE_TRANSFORMS_VALIDATE",
        "CLOUDFLARE_AUTO_TRANSFORM",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() so streams do not leak between tests."""
    yield
    logger = logging.getLogger("cftransforms")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


# === Builder Fixtures ===

@pytest.fixture
def image():
    """A builder for photo.jpg on cdn.x.com without existence checks."""
    return CloudflareImage("photo.jpg", "cdn.x.com", validate_exists=False)


@pytest.fixture
def mock_storage():
    """An in-memory disk holding test.jpg and photos/cat.jpg."""
    return MockStorage(
        "public",
        files=["test.jpg", "photos/cat.jpg"],
        base_url="https://example.com/storage",
    )


# === Config Fixtures ===

@pytest.fixture
def mock_config():
    """Config with a Cloudflare-proxied mock disk and a plain mock disk."""
    return TransformsConfig(
        domain="cdn.example.com",
        disk="public",
        disks={
            "public": DiskConfig(
                driver="mock",
                url="https://images.example.com/storage",
                files=["test.jpg", "photos/cat.jpg"],
            ),
            "plain": DiskConfig(driver="mock", files=["test.jpg"]),
            "scoped": DiskConfig(
                driver="mock",
                url="https://images.example.com",
                prefix="tenant-1/",
                files=["test.jpg"],
            ),
        },
    )


@pytest.fixture
def minimal_config_dict():
    """Minimal valid configuration dictionary."""
    return {"domain": "cdn.example.com"}


@pytest.fixture
def full_config_dict(temp_dir):
    """Full configuration dictionary with all options."""
    return {
        "domain": "cdn.example.com",
        "disk": "media",
        "transform_path": "images",
        "validate_file_exists": False,
        "auto_transform": {
            "enabled": True,
            "default_format": "webp",
            "default_quality": 80,
        },
        "disks": {
            "media": {
                "driver": "local",
                "root": str(temp_dir / "media"),
                "url": "https://media.example.com/files",
                "prefix": "uploads",
            },
            "memory": {
                "driver": "mock",
                "files": ["a.jpg"],
            },
        },
    }


@pytest.fixture
def temp_config_file(temp_dir, minimal_config_dict):
    """Create a temporary config file with minimal config."""
    config_path = temp_dir / "cftransforms.yaml"
    with open(config_path, "w") as f:
        yaml.dump(minimal_config_dict, f)
    return config_path


@pytest.fixture
def full_config_file(temp_dir, full_config_dict):
    """Create a temporary config file with full config."""
    config_path = temp_dir / "full.yaml"
    with open(config_path, "w") as f:
        yaml.dump(full_config_dict, f)
    return config_path
