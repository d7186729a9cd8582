"""Enums for Cloudflare's constrained transform option families."""

from enum import Enum


class Fit(str, Enum):
    """How to resize the image within the given width and height.

    All modes preserve aspect ratio.
    """

    CONTAIN = "contain"
    COVER = "cover"
    CROP = "crop"
    PAD = "pad"
    SCALE_DOWN = "scale-down"
    SQUEEZE = "squeeze"


class Flip(str, Enum):
    """Flip axis. Flipping is performed before rotation."""

    HORIZONTAL = "h"
    VERTICAL = "v"
    BOTH = "hv"


class Format(str, Enum):
    """Output format. AUTO serves WebP/AVIF to browsers that support them."""

    AUTO = "auto"
    AVIF = "avif"
    BASELINE_JPEG = "baseline-jpeg"
    JPEG = "jpeg"
    JSON = "json"
    WEBP = "webp"


class Gravity(str, Enum):
    """Focal point for fit=cover and fit=crop."""

    AUTO = "auto"
    BOTTOM = "bottom"
    FACE = "face"  # AI face detection
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"


class Metadata(str, Enum):
    """How much EXIF metadata to keep. WebP and PNG always discard it."""

    COPYRIGHT = "copyright"
    KEEP = "keep"
    NONE = "none"


class Quality(str, Enum):
    """Perceptual quality tiers for JPEG, WebP and AVIF."""

    HIGH = "high"
    MEDIUM_HIGH = "medium-high"
    MEDIUM_LOW = "medium-low"
    LOW = "low"
