"""Tests for cftransforms.image module."""

import pytest

from cftransforms.enums import Fit, Flip, Format, Gravity, Metadata, Quality
from cftransforms.exceptions import (
    ConfigError,
    FileNotFoundOnDiskError,
    InvalidPathError,
    InvalidTransformParameterError,
)
from cftransforms.image import CloudflareImage
from cftransforms.storage import MockStorage

BASE = "https://cdn.x.com/cdn-cgi/image"


class TestConstruction:
    """Test builder construction."""

    def test_missing_domain_raises(self):
        with pytest.raises(ConfigError, match="No Cloudflare domain configured"):
            CloudflareImage("photo.jpg", "", validate_exists=False)

    def test_validation_without_storage_raises(self):
        with pytest.raises(ConfigError, match="storage backend"):
            CloudflareImage("photo.jpg", "cdn.x.com")

    def test_identity_properties(self, mock_storage):
        image = CloudflareImage(
            "test.jpg", "cdn.x.com", disk="public", transform_path="/images/", storage=mock_storage
        )
        assert image.path == "test.jpg"
        assert image.domain == "cdn.x.com"
        assert image.disk == "public"
        assert image.transform_path == "images"
        assert image.validate_exists is True

    def test_str_renders_url(self, image):
        assert str(image.width(300)) == f"{BASE}/w=300/photo.jpg"


class TestEndToEnd:
    """Test complete URL rendering."""

    def test_width_height_format(self, image):
        url = image.width(300).height(200).format(Format.WEBP).url()
        assert url == "https://cdn.x.com/cdn-cgi/image/w=300,h=200,f=webp/photo.jpg"

    def test_no_transforms_returns_base_url(self, image):
        assert image.url() == "https://cdn.x.com/photo.jpg"

    def test_custom_transform_path(self):
        image = CloudflareImage("a.png", "cdn.x.com", transform_path="images", validate_exists=False)
        assert image.width(10).url() == "https://cdn.x.com/images/w=10/a.png"

    def test_nested_path(self):
        image = CloudflareImage("photos/2024/cat.jpg", "cdn.x.com", validate_exists=False)
        assert image.height(50).url() == f"{BASE}/h=50/photos/2024/cat.jpg"

    def test_key_order_follows_call_order(self, image):
        url = image.format(Format.AVIF).quality(85).width(300).blur(5).url()
        assert url == f"{BASE}/f=avif,q=85,w=300,blur=5/photo.jpg"

    def test_last_write_wins_in_place(self, image):
        url = image.width(100).height(50).width(200).url()
        assert url == f"{BASE}/w=200,h=50/photo.jpg"


class TestImmutability:
    """Test that transforms return new builders."""

    def test_transform_returns_new_instance(self, image):
        wide = image.width(300)
        assert wide is not image
        assert image.transforms == {}
        assert wide.transforms == {"w": "300"}

    def test_branches_do_not_interfere(self, image):
        base = image.format(Format.WEBP)
        small = base.width(100)
        large = base.width(1000)
        assert small.url() == f"{BASE}/f=webp,w=100/photo.jpg"
        assert large.url() == f"{BASE}/f=webp,w=1000/photo.jpg"

    def test_transforms_property_is_a_copy(self, image):
        wide = image.width(300)
        wide.transforms["w"] = "1"
        assert wide.transforms == {"w": "300"}


class TestDimensions:
    """Test width and height."""

    @pytest.mark.parametrize("value", [1, 640, 12000])
    def test_valid_width(self, image, value):
        assert image.width(value).url() == f"{BASE}/w={value}/photo.jpg"

    @pytest.mark.parametrize("value", [1, 12000])
    def test_valid_height(self, image, value):
        assert image.height(value).url() == f"{BASE}/h={value}/photo.jpg"

    @pytest.mark.parametrize("value", [0, -1, 12001])
    def test_width_out_of_range(self, image, value):
        with pytest.raises(InvalidTransformParameterError, match="Width must be between 1 and 12000"):
            image.width(value)

    @pytest.mark.parametrize("value", [0, -1, 12001])
    def test_height_out_of_range(self, image, value):
        with pytest.raises(InvalidTransformParameterError, match="Height must be between 1 and 12000"):
            image.height(value)

    def test_default_width(self, image):
        assert image.width().transforms == {"w": "640"}

    def test_auto_width(self, image):
        assert image.width(auto=True).url() == f"{BASE}/w=auto/photo.jpg"

    def test_auto_width_ignores_value(self, image):
        assert image.width(0, auto=True).transforms == {"w": "auto"}


class TestAdjustments:
    """Test float-valued adjustments."""

    @pytest.mark.parametrize(
        "method,value,expected",
        [
            ("blur", 1, "blur=1"),
            ("blur", 250, "blur=250"),
            ("brightness", 0.5, "brightness=0.5"),
            ("contrast", 1.2, "contrast=1.2"),
            ("gamma", 2.0, "gamma=2"),
            ("saturation", 0, "saturation=0"),
            ("sharpen", 10, "sharpen=10"),
            ("dpr", 0.1, "dpr=0.1"),
            ("dpr", 5, "dpr=5"),
        ],
    )
    def test_valid_values(self, image, method, value, expected):
        url = getattr(image, method)(value).url()
        assert url == f"{BASE}/{expected}/photo.jpg"

    @pytest.mark.parametrize(
        "method,value,message",
        [
            ("blur", 251, "Blur must be between 1 and 250"),
            ("blur", 0.5, "Blur must be between 1 and 250"),
            ("brightness", 2.5, "Brightness must be between 0 and 2"),
            ("contrast", 2.5, "Contrast must be between 0 and 2"),
            ("gamma", -0.1, "Gamma must be between 0 and 2"),
            ("saturation", 2.5, "Saturation must be between 0 and 2"),
            ("sharpen", 15, "Sharpen must be between 0 and 10"),
            ("dpr", 0.05, "DPR must be between 0.1 and 5"),
        ],
    )
    def test_out_of_range(self, image, method, value, message):
        with pytest.raises(InvalidTransformParameterError, match=message):
            getattr(image, method)(value)


class TestRotate:
    """Test rotation."""

    @pytest.mark.parametrize("degrees", [90, 180, 270])
    def test_valid(self, image, degrees):
        assert image.rotate(degrees).transforms == {"rotate": str(degrees)}

    @pytest.mark.parametrize("degrees", [0, 45, 360, 90.0])
    def test_invalid(self, image, degrees):
        with pytest.raises(InvalidTransformParameterError, match="Rotation must be one of: 90, 180, 270"):
            image.rotate(degrees)


class TestQuality:
    """Test quality and slow connection quality."""

    def test_integer(self, image):
        assert image.quality(85).url() == f"{BASE}/q=85/photo.jpg"

    def test_tier(self, image):
        assert image.quality(Quality.MEDIUM_LOW).url() == f"{BASE}/q=medium-low/photo.jpg"

    @pytest.mark.parametrize("value", [0, 101])
    def test_out_of_range(self, image, value):
        with pytest.raises(InvalidTransformParameterError, match="Quality must be between 1 and 100"):
            image.quality(value)

    def test_slow_connection_quality(self, image):
        url = image.quality(90).slow_connection_quality(Quality.LOW).url()
        assert url == f"{BASE}/q=90,scq=low/photo.jpg"

    def test_slow_connection_quality_out_of_range(self, image):
        with pytest.raises(InvalidTransformParameterError):
            image.slow_connection_quality(0)


class TestEnumParameters:
    """Test typed enum parameters."""

    @pytest.mark.parametrize(
        "method,value,expected",
        [
            ("fit", Fit.SCALE_DOWN, "fit=scale-down"),
            ("fit", "pad", "fit=pad"),
            ("flip", Flip.BOTH, "flip=hv"),
            ("flip", Flip.HORIZONTAL, "flip=h"),
            ("format", Format.BASELINE_JPEG, "f=baseline-jpeg"),
            ("format", "json", "f=json"),
            ("metadata", Metadata.NONE, "metadata=none"),
            ("gravity", Gravity.AUTO, "gravity=auto"),
        ],
    )
    def test_values(self, image, method, value, expected):
        assert getattr(image, method)(value).url() == f"{BASE}/{expected}/photo.jpg"

    @pytest.mark.parametrize("method", ["fit", "flip", "format", "metadata"])
    def test_invalid_string(self, image, method):
        with pytest.raises(InvalidTransformParameterError, match="must be one of"):
            getattr(image, method)("bogus")


class TestGravityAndZoom:
    """Test gravity coordinates and the zoom prerequisite."""

    def test_gravity_coordinates(self, image):
        assert image.gravity("0.5x0.33").url() == f"{BASE}/gravity=0.5x0.33/photo.jpg"

    def test_gravity_trailing_zeros_accepted(self, image):
        assert image.gravity("1.00x0.5").transforms == {"gravity": "1.00x0.5"}

    def test_invalid_gravity(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Invalid gravity coordinate"):
            image.gravity("1.5x0.5")

    def test_zoom_with_face_gravity(self, image):
        url = image.gravity(Gravity.FACE).zoom(0.5).url()
        assert url == f"{BASE}/gravity=face,zoom=0.5/photo.jpg"

    @pytest.mark.parametrize("value", [0, 1])
    def test_zoom_boundaries(self, image, value):
        url = image.gravity(Gravity.FACE).zoom(value).url()
        assert url.endswith(f"zoom={value}/photo.jpg")

    def test_zoom_without_gravity_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Zoom requires gravity=face"):
            image.zoom(0.5)

    def test_zoom_with_other_gravity_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Zoom requires gravity=face"):
            image.gravity(Gravity.LEFT).zoom(0.5)

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_zoom_out_of_range(self, image, value):
        with pytest.raises(InvalidTransformParameterError, match="Zoom must be between 0 and 1"):
            image.gravity(Gravity.FACE).zoom(value)

    def test_gravity_changed_after_zoom_raises_at_render(self, image):
        changed = image.gravity(Gravity.FACE).zoom(0.5).gravity(Gravity.TOP)
        with pytest.raises(InvalidTransformParameterError, match="Zoom requires gravity=face"):
            changed.url()

    def test_gravity_changed_back_to_face_renders(self, image):
        url = image.gravity(Gravity.FACE).zoom(0.5).gravity("top").gravity("face").url()
        assert url == f"{BASE}/gravity=face,zoom=0.5/photo.jpg"


class TestLiteralParameters:
    """Test parameters that accept a single literal."""

    def test_compression(self, image):
        assert image.compression().url() == f"{BASE}/compression=fast/photo.jpg"

    def test_compression_invalid(self, image):
        with pytest.raises(InvalidTransformParameterError, match='Compression must be "fast"'):
            image.compression("slow")

    def test_onerror(self, image):
        assert image.onerror().url() == f"{BASE}/onerror=redirect/photo.jpg"

    def test_onerror_invalid(self, image):
        with pytest.raises(InvalidTransformParameterError, match='OnError must be "redirect"'):
            image.onerror("ignore")

    def test_segment(self, image):
        assert image.segment().url() == f"{BASE}/segment=foreground/photo.jpg"

    def test_segment_invalid(self, image):
        with pytest.raises(InvalidTransformParameterError, match='Segment must be "foreground"'):
            image.segment("background")


class TestEncoding:
    """Test serialization of background and anim."""

    def test_background_hash(self, image):
        assert image.background("#ff0000").url() == f"{BASE}/background=%23ff0000/photo.jpg"

    def test_background_rgb(self, image):
        url = image.background("rgb(255,0,0)").url()
        assert url == f"{BASE}/background=rgb%28255%2C0%2C0%29/photo.jpg"

    def test_background_stored_raw(self, image):
        assert image.background("#ff0000").transforms == {"background": "#ff0000"}

    def test_anim_true(self, image):
        assert image.anim(True).url() == f"{BASE}/anim=true/photo.jpg"

    def test_anim_false(self, image):
        assert image.anim(False).url() == f"{BASE}/anim=false/photo.jpg"

    def test_anim_default(self, image):
        assert image.anim().options() == "anim=true"


class TestTrim:
    """Test trim and trim border."""

    def test_trim(self, image):
        assert image.trim(10, 20, 30, 40).url() == f"{BASE}/trim=10;20;30;40/photo.jpg"

    def test_trim_defaults(self, image):
        assert image.trim(top=5).transforms == {"trim": "5;0;0;0"}

    def test_trim_negative_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Trim must be 0 or greater"):
            image.trim(0, -1, 0, 0)

    def test_trim_border_only(self, image):
        assert image.trim_border().url() == f"{BASE}/trim=border/photo.jpg"

    def test_trim_border_all_options(self, image):
        url = image.trim_border(color="#ffffff", tolerance=10, keep=5).url()
        assert url == (
            f"{BASE}/trim=border,trim.border.color=#ffffff,"
            "trim.border.tolerance=10,trim.border.keep=5/photo.jpg"
        )

    @pytest.mark.parametrize("tolerance", [0, 255])
    def test_trim_border_tolerance_bounds(self, image, tolerance):
        assert image.trim_border(tolerance=tolerance).transforms["trim.border.tolerance"] == str(tolerance)

    def test_trim_border_tolerance_over_limit(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Tolerance must be between 0 and 255"):
            image.trim_border(tolerance=256)

    def test_trim_border_keep_negative(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Keep must be 0 or greater"):
            image.trim_border(keep=-1)


class TestBorder:
    """Test border composition."""

    def test_color_and_width(self, image):
        assert image.border(color="red", width=10).transforms == {"border": "color:red_width:10"}

    def test_sides(self, image):
        border = image.border(top=1, right=2, bottom=3, left=4).transforms["border"]
        assert border == "top:1_right:2_bottom:3_left:4"

    def test_renders_in_url(self, image):
        assert image.border(width=5).url() == f"{BASE}/border=width:5/photo.jpg"

    def test_no_parameters_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Border requires at least one of"):
            image.border()

    def test_negative_side_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Border left must be 0 or greater"):
            image.border(color="red", left=-1)


class TestConvenience:
    """Test composite operations."""

    def test_grayscale(self, image):
        assert image.grayscale().url() == f"{BASE}/saturation=0/photo.jpg"

    def test_optimize(self, image):
        assert image.optimize().url() == f"{BASE}/f=auto,q=high/photo.jpg"

    def test_responsive(self, image):
        assert image.responsive(800, 2).url() == f"{BASE}/w=800,dpr=2,f=auto/photo.jpg"

    def test_responsive_default_dpr(self, image):
        assert image.responsive(800).url() == f"{BASE}/w=800,dpr=1,f=auto/photo.jpg"

    def test_thumbnail(self, image):
        assert image.thumbnail().url() == f"{BASE}/w=150,h=150,fit=cover/photo.jpg"

    def test_thumbnail_custom_size(self, image):
        assert image.thumbnail(64).url() == f"{BASE}/w=64,h=64,fit=cover/photo.jpg"


class TestPathValidation:
    """Test render-time path checks."""

    @pytest.mark.parametrize(
        "path",
        ["", "../x.jpg", "photos/../../etc/passwd", "%2e%2e/x.jpg", "%2E%2E%2Fx.jpg"],
    )
    def test_invalid_paths(self, path):
        image = CloudflareImage(path, "cdn.x.com", validate_exists=False)
        with pytest.raises(InvalidPathError, match="Invalid path"):
            image.url()

    def test_invalid_path_with_transforms(self):
        image = CloudflareImage("../x.jpg", "cdn.x.com", validate_exists=False).width(100)
        with pytest.raises(InvalidPathError):
            image.url()

    def test_path_error_is_parameter_error(self):
        image = CloudflareImage("", "cdn.x.com", validate_exists=False)
        with pytest.raises(InvalidTransformParameterError):
            image.url()


class TestFileExistence:
    """Test render-time storage checks."""

    def test_existing_file(self, mock_storage):
        image = CloudflareImage("test.jpg", "cdn.x.com", storage=mock_storage)
        assert image.width(100).url() == f"{BASE}/w=100/test.jpg"
        assert mock_storage.exists_calls == ["test.jpg"]

    def test_missing_file_raises(self, mock_storage):
        image = CloudflareImage("nonexistent.jpg", "cdn.x.com", disk="public", storage=mock_storage)
        with pytest.raises(FileNotFoundOnDiskError, match='File does not exist on disk "public": nonexistent.jpg'):
            image.url()

    def test_path_checked_before_storage(self, mock_storage):
        image = CloudflareImage("../x.jpg", "cdn.x.com", storage=mock_storage)
        with pytest.raises(InvalidPathError):
            image.url()
        assert mock_storage.exists_calls == []

    def test_validation_disabled_skips_storage(self, mock_storage):
        image = CloudflareImage("missing.jpg", "cdn.x.com", validate_exists=False, storage=mock_storage)
        assert image.url() == "https://cdn.x.com/missing.jpg"
        assert mock_storage.exists_calls == []


class TestSrcset:
    """Test width-descriptor srcset."""

    def test_three_widths(self, image):
        srcset = image.format(Format.WEBP).quality(80).srcset([320, 640, 960])
        assert srcset == (
            f"{BASE}/f=webp,q=80,w=320/photo.jpg 320w, "
            f"{BASE}/f=webp,q=80,w=640/photo.jpg 640w, "
            f"{BASE}/f=webp,q=80,w=960/photo.jpg 960w"
        )

    def test_overrides_existing_width_in_place(self, image):
        srcset = image.width(100).height(50).srcset([200])
        assert srcset == f"{BASE}/w=200,h=50/photo.jpg 200w"

    def test_does_not_modify_builder(self, image):
        wide = image.width(100)
        wide.srcset([320, 640])
        assert wide.transforms == {"w": "100"}

    def test_empty_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Srcset widths cannot be empty"):
            image.srcset([])

    def test_invalid_width_raises(self, image):
        with pytest.raises(InvalidTransformParameterError, match="Width must be between 1 and 12000"):
            image.srcset([320, 12001])

    def test_missing_file_raises(self, mock_storage):
        image = CloudflareImage("nope.jpg", "cdn.x.com", storage=mock_storage)
        with pytest.raises(FileNotFoundOnDiskError):
            image.srcset([320])


class TestSrcsetDensity:
    """Test density-descriptor srcset."""

    def test_density(self, image):
        srcset = image.format(Format.AUTO).srcset_density(400)
        assert srcset == f"{BASE}/f=auto,w=400/photo.jpg 1x, {BASE}/f=auto,w=800/photo.jpg 2x"

    def test_max_base_width(self, image):
        srcset = image.srcset_density(6000)
        assert srcset.endswith("w=12000/photo.jpg 2x")

    def test_min_base_width(self, image):
        assert image.srcset_density(1).startswith(f"{BASE}/w=1/photo.jpg 1x")

    @pytest.mark.parametrize("value", [0, 6001])
    def test_out_of_range(self, image, value):
        with pytest.raises(InvalidTransformParameterError, match="Base width must be between 1 and 6000"):
            image.srcset_density(value)
