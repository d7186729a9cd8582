"""Centralized constants for cftransforms.

Value ranges follow Cloudflare's documented limits for URL transformations:
https://developers.cloudflare.com/images/transform-images/transform-via-url/
"""

# Dimension constraints (pixels)
DIMENSION_MIN = 1
DIMENSION_MAX = 12_000

# Blur radius
BLUR_MIN = 1.0
BLUR_MAX = 250.0

# Image adjustment multipliers (brightness, contrast, gamma, saturation)
ADJUSTMENT_MIN = 0.0
ADJUSTMENT_MAX = 2.0

# Quality (percentage)
QUALITY_MIN = 1
QUALITY_MAX = 100

SHARPEN_MIN = 0.0
SHARPEN_MAX = 10.0

DPR_MIN = 0.1
DPR_MAX = 5.0

ZOOM_MIN = 0.0
ZOOM_MAX = 1.0

# Trim border color tolerance
TOLERANCE_MIN = 0
TOLERANCE_MAX = 255

VALID_ROTATIONS = (90, 180, 270)

# Literal-only parameters
COMPRESSION_FAST = "fast"
ONERROR_REDIRECT = "redirect"
SEGMENT_FOREGROUND = "foreground"

# Border sub-parameters, in render order
BORDER_FIELDS = ("color", "width", "top", "right", "bottom", "left")
BORDER_SEPARATOR = "_"

# Configuration defaults
DEFAULT_DISK = "public"
DEFAULT_TRANSFORM_PATH = "cdn-cgi/image"
DEFAULT_VALIDATE_FILE_EXISTS = True
DEFAULT_SCHEME = "https"

# Environment variables read by the config loader
ENV_DOMAIN = "CLOUDFLARE_TRANSFORMS_DOMAIN"
ENV_DISK = "CLOUDFLARE_TRANSFORMS_DISK"
ENV_TRANSFORM_PATH = "CLOUDFLARE_TRANSFORMS_PATH"
ENV_VALIDATE = "CLOUDFLARE_TRANSFORMS_VALIDATE"
ENV_AUTO_TRANSFORM = "CLOUDFLARE_AUTO_TRANSFORM"

# Storage drivers
STORAGE_DRIVERS = ("local", "mock")
