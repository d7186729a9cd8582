"""Abstract interface shared by the transforming and null image builders."""

from abc import ABC, abstractmethod
from typing import Sequence

from cftransforms.constants import COMPRESSION_FAST, ONERROR_REDIRECT, SEGMENT_FOREGROUND
from cftransforms.enums import Fit, Flip, Format, Gravity, Metadata, Quality


class ImageBuilder(ABC):
    """Fluent builder for Cloudflare image transformation URLs.

    Two implementations exist: CloudflareImage validates every parameter and
    renders a transform URL, NullCloudflareImage accepts the same calls and
    always renders the original URL. Callers pick one at construction time
    and chain transforms unconditionally afterwards.

    Example:
        image = factory.image("photos/cat.jpg")
        src = image.width(300).format(Format.WEBP).url()
    """

    def __str__(self) -> str:
        return self.url()

    # Terminal operations

    @abstractmethod
    def url(self) -> str:
        """Render the final URL."""

    @abstractmethod
    def srcset(self, widths: Sequence[int]) -> str:
        """Render a width-descriptor srcset ("url 320w, url 640w")."""

    @abstractmethod
    def srcset_density(self, base_width: int) -> str:
        """Render a density-descriptor srcset ("url 1x, url 2x")."""

    # Dimensions

    @abstractmethod
    def width(self, width: int = 640, auto: bool = False) -> "ImageBuilder":
        """Maximum width in pixels, or "auto" for client-hint sizing."""

    @abstractmethod
    def height(self, height: int) -> "ImageBuilder":
        """Maximum height in pixels."""

    @abstractmethod
    def dpr(self, dpr: float) -> "ImageBuilder":
        """Device pixel ratio multiplier for width and height."""

    @abstractmethod
    def fit(self, fit: Fit | str) -> "ImageBuilder":
        """Resize mode within the given dimensions."""

    @abstractmethod
    def gravity(self, gravity: Gravity | str) -> "ImageBuilder":
        """Focal point, as a Gravity member or "XxY" coordinates."""

    @abstractmethod
    def zoom(self, zoom: float) -> "ImageBuilder":
        """Face-crop zoom level. Requires gravity=face."""

    @abstractmethod
    def trim(self, top: int = 0, right: int = 0, bottom: int = 0, left: int = 0) -> "ImageBuilder":
        """Trim pixels from each edge."""

    @abstractmethod
    def trim_border(
        self,
        color: str | None = None,
        tolerance: int | None = None,
        keep: int | None = None,
    ) -> "ImageBuilder":
        """Trim a uniformly colored border."""

    # Output

    @abstractmethod
    def format(self, format: Format | str) -> "ImageBuilder":
        """Output format."""

    @abstractmethod
    def quality(self, quality: Quality | int) -> "ImageBuilder":
        """Output quality, as a tier or 1-100."""

    @abstractmethod
    def slow_connection_quality(self, quality: Quality | int) -> "ImageBuilder":
        """Output quality used on slow connections."""

    @abstractmethod
    def compression(self, compression: str = COMPRESSION_FAST) -> "ImageBuilder":
        """Compression mode."""

    @abstractmethod
    def metadata(self, metadata: Metadata | str) -> "ImageBuilder":
        """EXIF metadata policy."""

    @abstractmethod
    def anim(self, preserve: bool = True) -> "ImageBuilder":
        """Whether to preserve animation frames."""

    @abstractmethod
    def onerror(self, action: str = ONERROR_REDIRECT) -> "ImageBuilder":
        """Behavior when the transformation fails."""

    # Adjustments

    @abstractmethod
    def background(self, color: str) -> "ImageBuilder":
        """Background color for transparent areas and fit=pad."""

    @abstractmethod
    def blur(self, blur: float) -> "ImageBuilder":
        """Blur radius."""

    @abstractmethod
    def brightness(self, brightness: float) -> "ImageBuilder":
        """Brightness multiplier."""

    @abstractmethod
    def contrast(self, contrast: float) -> "ImageBuilder":
        """Contrast multiplier."""

    @abstractmethod
    def gamma(self, gamma: float) -> "ImageBuilder":
        """Gamma multiplier."""

    @abstractmethod
    def saturation(self, saturation: float) -> "ImageBuilder":
        """Saturation multiplier."""

    @abstractmethod
    def sharpen(self, sharpen: float) -> "ImageBuilder":
        """Sharpening strength."""

    @abstractmethod
    def flip(self, flip: Flip | str) -> "ImageBuilder":
        """Flip axis."""

    @abstractmethod
    def rotate(self, degrees: int) -> "ImageBuilder":
        """Rotation in degrees."""

    @abstractmethod
    def segment(self, mode: str = SEGMENT_FOREGROUND) -> "ImageBuilder":
        """Background removal."""

    @abstractmethod
    def border(
        self,
        color: str | None = None,
        width: int | None = None,
        top: int | None = None,
        right: int | None = None,
        bottom: int | None = None,
        left: int | None = None,
    ) -> "ImageBuilder":
        """Add a border around the image."""

    # Convenience

    @abstractmethod
    def grayscale(self) -> "ImageBuilder":
        """Remove all color."""

    @abstractmethod
    def optimize(self) -> "ImageBuilder":
        """Automatic format with high quality."""

    @abstractmethod
    def responsive(self, width: int, dpr: float = 1) -> "ImageBuilder":
        """Width, device pixel ratio and automatic format."""

    @abstractmethod
    def thumbnail(self, size: int = 150) -> "ImageBuilder":
        """Square cover-fit thumbnail."""
