"""Unified exception hierarchy for cftransforms.

All cftransforms exceptions inherit from CloudflareTransformError, enabling:
- Catching all package errors with `except CloudflareTransformError`
- Error context preservation via the `context` attribute
- Named constructors that keep messages consistent across the builder
"""

from typing import Any, Iterable


class CloudflareTransformError(Exception):
    """Base exception for all cftransforms errors.

    Args:
        message: Human-readable error description
        context: Optional dict of contextual information (parameter, bounds, path, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{details}]"
        return base


class ConfigError(CloudflareTransformError):
    """Raised when configuration is missing, invalid or cannot be loaded."""

    @classmethod
    def missing_domain(cls) -> "ConfigError":
        return cls(
            "No Cloudflare domain configured. Set CLOUDFLARE_TRANSFORMS_DOMAIN in your "
            "environment or configure the 'url' option on your storage disk."
        )

    @classmethod
    def invalid_domain(cls, domain: str) -> "ConfigError":
        return cls(f"Invalid Cloudflare domain: {domain}", context={"domain": domain})


class InvalidTransformParameterError(CloudflareTransformError):
    """Raised when a transformation parameter is invalid.

    Covers out-of-range values, values outside an allowed set, literals that
    do not match, malformed gravity coordinates and missing prerequisites.
    """

    @classmethod
    def out_of_range(
        cls, parameter: str, minimum: int | float, maximum: int | float
    ) -> "InvalidTransformParameterError":
        return cls(
            f"{parameter} must be between {_fmt(minimum)} and {_fmt(maximum)}",
            context={"parameter": parameter, "min": minimum, "max": maximum},
        )

    @classmethod
    def not_in_set(
        cls, parameter: str, allowed: Iterable[Any]
    ) -> "InvalidTransformParameterError":
        allowed = list(allowed)
        return cls(
            f"{parameter} must be one of: {', '.join(str(a) for a in allowed)}",
            context={"parameter": parameter},
        )

    @classmethod
    def not_equal(cls, parameter: str, expected: str) -> "InvalidTransformParameterError":
        return cls(f'{parameter} must be "{expected}"', context={"parameter": parameter})

    @classmethod
    def missing_prerequisite(
        cls, parameter: str, prerequisite: str
    ) -> "InvalidTransformParameterError":
        return cls(
            f"{parameter} requires {prerequisite}",
            context={"parameter": parameter},
        )


class InvalidPathError(InvalidTransformParameterError):
    """Raised when an image path is empty or attempts directory traversal."""

    @classmethod
    def for_path(cls, path: str) -> "InvalidPathError":
        return cls(
            "Invalid path: path cannot be empty or contain directory traversal",
            context={"path": path},
        )


class FileNotFoundOnDiskError(CloudflareTransformError):
    """Raised when a file does not exist on the storage disk."""

    @classmethod
    def for_path(cls, path: str, disk: str | None = None) -> "FileNotFoundOnDiskError":
        if disk is not None:
            return cls(f'File does not exist on disk "{disk}": {path}')
        return cls(f"File does not exist: {path}")


def _fmt(value: int | float) -> str:
    # 1.0 -> "1", 0.1 -> "0.1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
