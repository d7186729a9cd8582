"""Null object builder for disks without a Cloudflare domain."""

from typing import Sequence

from cftransforms.constants import COMPRESSION_FAST, ONERROR_REDIRECT, SEGMENT_FOREGROUND
from cftransforms.contract import ImageBuilder
from cftransforms.enums import Fit, Flip, Format, Gravity, Metadata, Quality


class NullCloudflareImage(ImageBuilder):
    """Image builder that ignores every transform.

    Used when a disk has no Cloudflare domain configured. It accepts the same
    calls as CloudflareImage, performs no validation and always renders the
    original URL, so templates can chain transforms unconditionally.
    """

    def __init__(self, original_url: str):
        self._original_url = original_url

    def __repr__(self) -> str:
        return f"NullCloudflareImage({self._original_url!r})"

    def url(self) -> str:
        return self._original_url

    def srcset(self, widths: Sequence[int]) -> str:
        return ", ".join(f"{self._original_url} {w}w" for w in widths)

    def srcset_density(self, base_width: int) -> str:
        return f"{self._original_url} 1x, {self._original_url} 2x"

    def width(self, width: int = 640, auto: bool = False) -> "NullCloudflareImage":
        return self

    def height(self, height: int) -> "NullCloudflareImage":
        return self

    def dpr(self, dpr: float) -> "NullCloudflareImage":
        return self

    def fit(self, fit: Fit | str) -> "NullCloudflareImage":
        return self

    def gravity(self, gravity: Gravity | str) -> "NullCloudflareImage":
        return self

    def zoom(self, zoom: float) -> "NullCloudflareImage":
        return self

    def trim(
        self, top: int = 0, right: int = 0, bottom: int = 0, left: int = 0
    ) -> "NullCloudflareImage":
        return self

    def trim_border(
        self,
        color: str | None = None,
        tolerance: int | None = None,
        keep: int | None = None,
    ) -> "NullCloudflareImage":
        return self

    def format(self, format: Format | str) -> "NullCloudflareImage":
        return self

    def quality(self, quality: Quality | int) -> "NullCloudflareImage":
        return self

    def slow_connection_quality(self, quality: Quality | int) -> "NullCloudflareImage":
        return self

    def compression(self, compression: str = COMPRESSION_FAST) -> "NullCloudflareImage":
        return self

    def metadata(self, metadata: Metadata | str) -> "NullCloudflareImage":
        return self

    def anim(self, preserve: bool = True) -> "NullCloudflareImage":
        return self

    def onerror(self, action: str = ONERROR_REDIRECT) -> "NullCloudflareImage":
        return self

    def background(self, color: str) -> "NullCloudflareImage":
        return self

    def blur(self, blur: float) -> "NullCloudflareImage":
        return self

    def brightness(self, brightness: float) -> "NullCloudflareImage":
        return self

    def contrast(self, contrast: float) -> "NullCloudflareImage":
        return self

    def gamma(self, gamma: float) -> "NullCloudflareImage":
        return self

    def saturation(self, saturation: float) -> "NullCloudflareImage":
        return self

    def sharpen(self, sharpen: float) -> "NullCloudflareImage":
        return self

    def flip(self, flip: Flip | str) -> "NullCloudflareImage":
        return self

    def rotate(self, degrees: int) -> "NullCloudflareImage":
        return self

    def segment(self, mode: str = SEGMENT_FOREGROUND) -> "NullCloudflareImage":
        return self

    def border(
        self,
        color: str | None = None,
        width: int | None = None,
        top: int | None = None,
        right: int | None = None,
        bottom: int | None = None,
        left: int | None = None,
    ) -> "NullCloudflareImage":
        return self

    def grayscale(self) -> "NullCloudflareImage":
        return self

    def optimize(self) -> "NullCloudflareImage":
        return self

    def responsive(self, width: int, dpr: float = 1) -> "NullCloudflareImage":
        return self

    def thumbnail(self, size: int = 150) -> "NullCloudflareImage":
        return self
