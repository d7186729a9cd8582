"""Fluent builder for Cloudflare Image Transformation URLs.

See https://developers.cloudflare.com/images/transform-images/transform-via-url/
"""

import copy
from typing import TYPE_CHECKING, Sequence
from urllib.parse import quote_plus, unquote_plus

from cftransforms.constants import (
    ADJUSTMENT_MAX,
    ADJUSTMENT_MIN,
    BLUR_MAX,
    BLUR_MIN,
    BORDER_FIELDS,
    BORDER_SEPARATOR,
    COMPRESSION_FAST,
    DEFAULT_DISK,
    DEFAULT_SCHEME,
    DEFAULT_TRANSFORM_PATH,
    DIMENSION_MAX,
    DIMENSION_MIN,
    DPR_MAX,
    DPR_MIN,
    ONERROR_REDIRECT,
    SEGMENT_FOREGROUND,
    SHARPEN_MAX,
    SHARPEN_MIN,
    TOLERANCE_MAX,
    TOLERANCE_MIN,
    VALID_ROTATIONS,
    ZOOM_MAX,
    ZOOM_MIN,
)
from cftransforms.contract import ImageBuilder
from cftransforms.enums import Fit, Flip, Format, Gravity, Metadata, Quality
from cftransforms.exceptions import (
    ConfigError,
    FileNotFoundOnDiskError,
    InvalidPathError,
    InvalidTransformParameterError,
)
from cftransforms.logging_config import get_logger
from cftransforms.validation import (
    coerce_enum,
    format_number,
    normalize_quality,
    validate_equals,
    validate_gravity,
    validate_membership,
    validate_non_negative,
    validate_range,
)

if TYPE_CHECKING:
    from cftransforms.storage import StorageBackend

logger = get_logger(__name__)


class CloudflareImage(ImageBuilder):
    """Validating builder that renders a Cloudflare transform URL.

    The builder is immutable: every transform method returns a new instance
    sharing the same path, domain and disk but holding its own copy of the
    transform mapping. Keys render in the order they were first set; setting
    a key again replaces its value in place.

    Example:
        image = CloudflareImage("photo.jpg", "cdn.example.com", validate_exists=False)
        image.width(300).height(200).format(Format.WEBP).url()
        # https://cdn.example.com/cdn-cgi/image/w=300,h=200,f=webp/photo.jpg
    """

    def __init__(
        self,
        path: str,
        domain: str,
        disk: str = DEFAULT_DISK,
        transform_path: str = DEFAULT_TRANSFORM_PATH,
        validate_exists: bool = True,
        storage: "StorageBackend | None" = None,
    ):
        if not domain:
            raise ConfigError.missing_domain()
        if validate_exists and storage is None:
            raise ConfigError(
                "File existence validation requires a storage backend",
                context={"disk": disk},
            )
        self._path = path
        self._domain = domain
        self._disk = disk
        self._transform_path = transform_path.strip("/")
        self._validate_exists = validate_exists
        self._storage = storage
        self._transforms: dict[str, str] = {}

    @classmethod
    def make(cls, path: str, **kwargs) -> "CloudflareImage":
        """Create a builder, resolving unset arguments from configuration.

        Accepts the keyword arguments of cftransforms.factory.make_image.
        """
        from cftransforms.factory import make_image

        return make_image(path, **kwargs)

    def __repr__(self) -> str:
        return (
            f"CloudflareImage(path={self._path!r}, domain={self._domain!r}, "
            f"disk={self._disk!r}, transforms={self._transforms!r})"
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def disk(self) -> str:
        return self._disk

    @property
    def transform_path(self) -> str:
        return self._transform_path

    @property
    def validate_exists(self) -> bool:
        return self._validate_exists

    @property
    def transforms(self) -> dict[str, str]:
        """A copy of the accumulated transform mapping."""
        return dict(self._transforms)

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def width(self, width: int = 640, auto: bool = False) -> "CloudflareImage":
        if auto:
            return self._with("w", "auto")
        return self._set_range("w", width, DIMENSION_MIN, DIMENSION_MAX, "Width", integer=True)

    def height(self, height: int) -> "CloudflareImage":
        return self._set_range("h", height, DIMENSION_MIN, DIMENSION_MAX, "Height", integer=True)

    def dpr(self, dpr: float) -> "CloudflareImage":
        return self._set_range("dpr", dpr, DPR_MIN, DPR_MAX, "DPR")

    def fit(self, fit: Fit | str) -> "CloudflareImage":
        return self._with("fit", coerce_enum(Fit, fit, "Fit").value)

    def gravity(self, gravity: Gravity | str) -> "CloudflareImage":
        """Focal point. Accepts a Gravity member or "XxY" coordinates (0.0-1.0)."""
        return self._with("gravity", validate_gravity(gravity))

    def zoom(self, zoom: float) -> "CloudflareImage":
        """Zoom for face cropping, 0 (include background) to 1 (tight on the face)."""
        self._require_face_gravity()
        return self._set_range("zoom", zoom, ZOOM_MIN, ZOOM_MAX, "Zoom")

    def trim(self, top: int = 0, right: int = 0, bottom: int = 0, left: int = 0) -> "CloudflareImage":
        for value in (top, right, bottom, left):
            validate_non_negative(value, "Trim")
        return self._with("trim", f"{top};{right};{bottom};{left}")

    def trim_border(
        self,
        color: str | None = None,
        tolerance: int | None = None,
        keep: int | None = None,
    ) -> "CloudflareImage":
        """Trim a uniform border, optionally of a given color.

        Args:
            color: Border color to detect (auto-detected when omitted)
            tolerance: Color difference tolerated, 0-255
            keep: Pixels of the detected border to keep
        """
        if tolerance is not None:
            validate_range(tolerance, TOLERANCE_MIN, TOLERANCE_MAX, "Tolerance", integer=True)
        if keep is not None:
            validate_non_negative(keep, "Keep")

        image = self._with("trim", "border")
        if color is not None:
            image = image._with("trim.border.color", color)
        if tolerance is not None:
            image = image._with("trim.border.tolerance", str(tolerance))
        if keep is not None:
            image = image._with("trim.border.keep", str(keep))
        return image

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def format(self, format: Format | str) -> "CloudflareImage":
        """Output format. Format.AUTO serves WebP/AVIF to supporting browsers."""
        return self._with("f", coerce_enum(Format, format, "Format").value)

    def quality(self, quality: Quality | int) -> "CloudflareImage":
        return self._with("q", normalize_quality(quality))

    def slow_connection_quality(self, quality: Quality | int) -> "CloudflareImage":
        """Quality used when the client is on a slow connection.

        Cloudflare applies it when RTT exceeds 150ms, save-data is on, the
        effective connection type is 2g/3g or downlink is under 5Mbps.
        """
        return self._with("scq", normalize_quality(quality))

    def compression(self, compression: str = COMPRESSION_FAST) -> "CloudflareImage":
        return self._with("compression", validate_equals(compression, COMPRESSION_FAST, "Compression"))

    def metadata(self, metadata: Metadata | str) -> "CloudflareImage":
        return self._with("metadata", coerce_enum(Metadata, metadata, "Metadata").value)

    def anim(self, preserve: bool = True) -> "CloudflareImage":
        # Rendered as true/false in options()
        return self._with("anim", "1" if preserve else "0")

    def onerror(self, action: str = ONERROR_REDIRECT) -> "CloudflareImage":
        return self._with("onerror", validate_equals(action, ONERROR_REDIRECT, "OnError"))

    # ------------------------------------------------------------------
    # Adjustments
    # ------------------------------------------------------------------

    def background(self, color: str) -> "CloudflareImage":
        """Background color for transparent images and fit=pad. Any CSS color."""
        return self._with("background", color)

    def blur(self, blur: float) -> "CloudflareImage":
        return self._set_range("blur", blur, BLUR_MIN, BLUR_MAX, "Blur")

    def brightness(self, brightness: float) -> "CloudflareImage":
        """Brightness multiplier. 1.0 = no change, 0.5 = half, 2.0 = twice as bright."""
        return self._set_range("brightness", brightness, ADJUSTMENT_MIN, ADJUSTMENT_MAX, "Brightness")

    def contrast(self, contrast: float) -> "CloudflareImage":
        return self._set_range("contrast", contrast, ADJUSTMENT_MIN, ADJUSTMENT_MAX, "Contrast")

    def gamma(self, gamma: float) -> "CloudflareImage":
        return self._set_range("gamma", gamma, ADJUSTMENT_MIN, ADJUSTMENT_MAX, "Gamma")

    def saturation(self, saturation: float) -> "CloudflareImage":
        return self._set_range("saturation", saturation, ADJUSTMENT_MIN, ADJUSTMENT_MAX, "Saturation")

    def sharpen(self, sharpen: float) -> "CloudflareImage":
        return self._set_range("sharpen", sharpen, SHARPEN_MIN, SHARPEN_MAX, "Sharpen")

    def flip(self, flip: Flip | str) -> "CloudflareImage":
        return self._with("flip", coerce_enum(Flip, flip, "Flip").value)

    def rotate(self, degrees: int) -> "CloudflareImage":
        validate_membership(degrees, VALID_ROTATIONS, "Rotation")
        return self._with("rotate", str(degrees))

    def segment(self, mode: str = SEGMENT_FOREGROUND) -> "CloudflareImage":
        """Isolate the subject by replacing the background with transparency."""
        return self._with("segment", validate_equals(mode, SEGMENT_FOREGROUND, "Segment"))

    def border(
        self,
        color: str | None = None,
        width: int | None = None,
        top: int | None = None,
        right: int | None = None,
        bottom: int | None = None,
        left: int | None = None,
    ) -> "CloudflareImage":
        """Add a border. At least one of the sub-parameters is required.

        Sub-parameters render as "name:value" pairs in the order color,
        width, top, right, bottom, left.
        """
        values = {
            "color": color,
            "width": width,
            "top": top,
            "right": right,
            "bottom": bottom,
            "left": left,
        }
        parts = []
        for field in BORDER_FIELDS:
            value = values[field]
            if value is None:
                continue
            if field != "color":
                validate_non_negative(value, f"Border {field}")
            parts.append(f"{field}:{value}")

        if not parts:
            raise InvalidTransformParameterError(
                f"Border requires at least one of: {', '.join(BORDER_FIELDS)}",
                context={"parameter": "Border"},
            )
        return self._with("border", BORDER_SEPARATOR.join(parts))

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def grayscale(self) -> "CloudflareImage":
        return self.saturation(0)

    def optimize(self) -> "CloudflareImage":
        return self.format(Format.AUTO).quality(Quality.HIGH)

    def responsive(self, width: int, dpr: float = 1) -> "CloudflareImage":
        return self.width(width).dpr(dpr).format(Format.AUTO)

    def thumbnail(self, size: int = 150) -> "CloudflareImage":
        return self.width(size).height(size).fit(Fit.COVER)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def url(self) -> str:
        """Generate the final Cloudflare transformation URL.

        Raises:
            InvalidPathError: If the path is empty or contains traversal
            FileNotFoundOnDiskError: If existence validation is on and the file is missing
            InvalidTransformParameterError: If zoom is set without gravity=face
        """
        self._validate_path()

        if self._validate_exists and not self._storage.exists(self._path):
            logger.debug("File %s not found on disk %s", self._path, self._disk)
            raise FileNotFoundOnDiskError.for_path(self._path, self._disk)

        # gravity may have changed after zoom was set
        if "zoom" in self._transforms:
            self._require_face_gravity()

        if not self._transforms:
            return self._base_url()

        url = (
            f"{DEFAULT_SCHEME}://{self._domain}/{self._transform_path}/"
            f"{self.options()}/{self._path}"
        )
        logger.debug("Rendered %s", url)
        return url

    def options(self) -> str:
        """Serialize the transform mapping as "k1=v1,k2=v2"."""
        options = []
        for key, value in self._transforms.items():
            if key == "background":
                value = quote_plus(value)
            elif key == "anim":
                value = "true" if value not in ("", "0") else "false"
            options.append(f"{key}={value}")
        return ",".join(options)

    def srcset(self, widths: Sequence[int]) -> str:
        """Generate a srcset with width descriptors for fluid layouts.

        Use with the HTML `sizes` attribute so browsers can pick a width.

        Args:
            widths: Width breakpoints, e.g. [320, 640, 960, 1280]

        Returns:
            "url 320w, url 640w, ..."
        """
        if not widths:
            raise InvalidTransformParameterError(
                "Srcset widths cannot be empty",
                context={"parameter": "Srcset"},
            )
        return ", ".join(f"{self._clone_with_width(w).url()} {w}w" for w in widths)

    def srcset_density(self, base_width: int) -> str:
        """Generate a srcset with 1x and 2x density descriptors.

        The 2x variant must stay within the dimension limit, so base_width is
        capped at half of it.
        """
        max_base_width = DIMENSION_MAX // 2
        validate_range(base_width, DIMENSION_MIN, max_base_width, "Base width", integer=True)

        return ", ".join([
            f"{self._clone_with_width(base_width).url()} 1x",
            f"{self._clone_with_width(base_width * 2).url()} 2x",
        ])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _with(self, key: str, value: str) -> "CloudflareImage":
        clone = copy.copy(self)
        clone._transforms = {**self._transforms, key: value}
        return clone

    def _set_range(
        self,
        key: str,
        value: int | float,
        minimum: int | float,
        maximum: int | float,
        name: str,
        integer: bool = False,
    ) -> "CloudflareImage":
        validate_range(value, minimum, maximum, name, integer=integer)
        return self._with(key, format_number(value))

    def _clone_with_width(self, width: int) -> "CloudflareImage":
        validate_range(width, DIMENSION_MIN, DIMENSION_MAX, "Width", integer=True)
        return self._with("w", str(width))

    def _require_face_gravity(self) -> None:
        if self._transforms.get("gravity") != Gravity.FACE.value:
            raise InvalidTransformParameterError.missing_prerequisite("Zoom", "gravity=face")

    def _validate_path(self) -> None:
        decoded = unquote_plus(self._path)
        if not self._path or ".." in self._path or ".." in decoded:
            raise InvalidPathError.for_path(self._path)

    def _base_url(self) -> str:
        return f"{DEFAULT_SCHEME}://{self._domain}/{self._path}"
