"""Integration tests for config-driven builders on a local disk."""

import pytest
import yaml

from cftransforms.config import load_config
from cftransforms.enums import Format, Gravity
from cftransforms.exceptions import FileNotFoundOnDiskError
from cftransforms.factory import ImageFactory
from cftransforms.html import ImageTag


@pytest.fixture
def storage_root(temp_dir):
    root = temp_dir / "public"
    (root / "tenant-1" / "photos").mkdir(parents=True)
    (root / "tenant-1" / "photos" / "team.jpg").write_bytes(b"\xff\xd8\xff")
    (root / "hero.jpg").write_bytes(b"\xff\xd8\xff")
    return root


@pytest.fixture
def factory(temp_dir, storage_root):
    config_path = temp_dir / "cftransforms.yaml"
    with open(config_path, "w") as f:
        yaml.dump({
            "domain": "cdn.example.com",
            "disks": {
                "public": {
                    "driver": "local",
                    "root": str(storage_root),
                    "url": "https://www.example.com/storage",
                },
                "tenant": {
                    "driver": "local",
                    "root": str(storage_root),
                    "prefix": "tenant-1",
                },
            },
        }, f)
    return ImageFactory(load_config(config_path, environ={}))


@pytest.mark.integration
class TestLocalDiskWorkflow:
    """End-to-end builder tests with real files."""

    def test_transform_existing_file(self, factory):
        url = factory.image("hero.jpg").width(1200).format(Format.AUTO).url()
        assert url == "https://www.example.com/cdn-cgi/image/w=1200,f=auto/hero.jpg"

    def test_scoped_disk(self, factory):
        image = factory.image("photos/team.jpg", disk="tenant")
        url = image.thumbnail(96).gravity(Gravity.FACE).zoom(0.5).url()
        assert url == (
            "https://cdn.example.com/cdn-cgi/image/"
            "w=96,h=96,fit=cover,gravity=face,zoom=0.5/tenant-1/photos/team.jpg"
        )

    def test_missing_file(self, factory):
        with pytest.raises(FileNotFoundOnDiskError, match="photos/team.jpg"):
            factory.image("photos/team.jpg")

    def test_auto_transform_url(self, factory):
        url = factory.transformed_url("hero.jpg", width=640)
        assert url == "https://www.example.com/cdn-cgi/image/w=640,f=auto,q=85/hero.jpg"

    def test_render_tag(self, factory):
        html = ImageTag("hero.jpg", srcset_density=400, alt="Hero").render(factory)
        base = "https://www.example.com/cdn-cgi/image"
        assert html == (
            f'<img src="{base}/w=800/hero.jpg" '
            f'srcset="{base}/w=400/hero.jpg 1x, {base}/w=800/hero.jpg 2x" alt="Hero">'
        )
