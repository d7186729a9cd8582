"""cftransforms - Fluent builder for Cloudflare Image Transformation URLs."""

import logging

from cftransforms.contract import ImageBuilder
from cftransforms.enums import Fit, Flip, Format, Gravity, Metadata, Quality
from cftransforms.exceptions import (
    CloudflareTransformError,
    ConfigError,
    FileNotFoundOnDiskError,
    InvalidPathError,
    InvalidTransformParameterError,
)
from cftransforms.image import CloudflareImage
from cftransforms.null_image import NullCloudflareImage

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "ImageBuilder",
    "CloudflareImage",
    "NullCloudflareImage",
    "Fit",
    "Flip",
    "Format",
    "Gravity",
    "Metadata",
    "Quality",
    "CloudflareTransformError",
    "ConfigError",
    "FileNotFoundOnDiskError",
    "InvalidPathError",
    "InvalidTransformParameterError",
]

# Prevent "No handler found" warnings when used as a library
logging.getLogger("cftransforms").addHandler(logging.NullHandler())
