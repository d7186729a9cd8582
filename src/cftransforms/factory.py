"""Factory functions wiring builders to configuration and storage disks."""

from typing import Any
from urllib.parse import urlparse

from cftransforms.config import DiskConfig, TransformsConfig
from cftransforms.contract import ImageBuilder
from cftransforms.exceptions import (
    ConfigError,
    FileNotFoundOnDiskError,
    InvalidTransformParameterError,
)
from cftransforms.image import CloudflareImage
from cftransforms.logging_config import get_logger
from cftransforms.null_image import NullCloudflareImage
from cftransforms.storage import StorageBackend, get_storage

logger = get_logger(__name__)

# Options understood by cloudflare_url(), applied in this order
URL_OPTIONS = ("width", "height", "format", "quality", "fit")


def extract_domain(disk_config: DiskConfig | None, config: TransformsConfig) -> str:
    """Resolve the Cloudflare domain for a disk.

    The host of the disk's public url wins, then an explicit
    cloudflare_domain on the disk, then the package-wide domain.

    Returns:
        The domain, or "" when none is configured
    """
    if disk_config is not None:
        host = urlparse(disk_config.url).hostname if disk_config.url else None
        if host:
            return host
        if disk_config.cloudflare_domain:
            return disk_config.cloudflare_domain
    return config.domain


def apply_path_prefix(path: str, prefix: str | None) -> str:
    """Prepend a scoped disk's prefix to a path."""
    if not prefix:
        return path
    return f"{prefix.rstrip('/')}/{path.lstrip('/')}"


def apply_options(image: ImageBuilder, options: dict[str, Any]) -> ImageBuilder:
    """Apply a subset of transforms given as keyword options.

    Raises:
        InvalidTransformParameterError: If an option name is not supported
    """
    unknown = sorted(set(options) - set(URL_OPTIONS))
    if unknown:
        raise InvalidTransformParameterError(
            f"Unsupported option(s): {', '.join(unknown)}. "
            f"Supported: {', '.join(URL_OPTIONS)}"
        )
    for name in URL_OPTIONS:
        value = options.get(name)
        if value is not None:
            image = getattr(image, name)(value)
    return image


def make_image(
    path: str,
    domain: str | None = None,
    disk: str | None = None,
    transform_path: str | None = None,
    validate_exists: bool | None = None,
    *,
    config: TransformsConfig | None = None,
    storage: StorageBackend | None = None,
) -> CloudflareImage:
    """Create a CloudflareImage, filling unset arguments from configuration.

    Args:
        path: Image path relative to the disk
        domain: Cloudflare domain (defaults to config.domain)
        disk: Storage disk name (defaults to config.disk)
        transform_path: Transform URL segment (defaults to config.transform_path)
        validate_exists: Check the file exists when rendering (defaults to config)
        config: Configuration; read from the environment when omitted
        storage: Disk backend; resolved from config.disks when needed and omitted

    Raises:
        ConfigError: If no domain resolves or the disk is not configured
    """
    if config is None:
        config = TransformsConfig.from_env()

    if domain is None:
        domain = config.domain
    if not domain:
        raise ConfigError.missing_domain()

    if disk is None:
        disk = config.disk
    if transform_path is None:
        transform_path = config.transform_path
    if validate_exists is None:
        validate_exists = config.validate_file_exists

    if validate_exists and storage is None:
        if disk not in config.disks:
            raise ConfigError(
                f"Disk '{disk}' is not configured; cannot validate file existence",
                context={"disk": disk},
            )
        storage = get_storage(disk, config.disks[disk])

    return CloudflareImage(
        path,
        domain,
        disk=disk,
        transform_path=transform_path,
        validate_exists=validate_exists,
        storage=storage,
    )


class ImageFactory:
    """Entry point that hands out builders for configured disks.

    Disks whose domain cannot be resolved get a NullCloudflareImage, so the
    same chain works whether or not Cloudflare transforms are available.

    Example:
        factory = ImageFactory(load_config(Path("cftransforms.yaml")))
        factory.image("photos/cat.jpg").width(300).url()
    """

    def __init__(
        self,
        config: TransformsConfig | None = None,
        storages: dict[str, StorageBackend] | None = None,
    ):
        self.config = config if config is not None else TransformsConfig.from_env()
        self._storages = dict(storages or {})

    def get_storage(self, disk: str | None = None) -> StorageBackend:
        """Return the (cached) backend for a disk.

        Raises:
            ConfigError: If the disk is not configured
        """
        name = disk or self.config.disk
        if name not in self._storages:
            if name not in self.config.disks:
                available = ", ".join(sorted(self.config.disks)) or "none"
                raise ConfigError(
                    f"Disk '{name}' is not configured. Available: {available}",
                    context={"disk": name},
                )
            self._storages[name] = get_storage(name, self.config.disks[name])
        return self._storages[name]

    def make(
        self,
        path: str,
        domain: str | None = None,
        disk: str | None = None,
        transform_path: str | None = None,
        validate_exists: bool | None = None,
    ) -> CloudflareImage:
        """Create a CloudflareImage using this factory's config and disks."""
        check = self.config.validate_file_exists if validate_exists is None else validate_exists
        storage = self.get_storage(disk) if check else None
        return make_image(
            path,
            domain=domain,
            disk=disk,
            transform_path=transform_path,
            validate_exists=check,
            config=self.config,
            storage=storage,
        )

    def image(
        self,
        path: str,
        disk: str | None = None,
        domain: str | None = None,
    ) -> ImageBuilder:
        """Create a builder for a file on a disk.

        Existence is checked on the disk itself, before the prefix is applied.
        An explicit domain takes precedence over the one derived from the disk.

        Raises:
            FileNotFoundOnDiskError: If validation is enabled and the file is missing
        """
        name = disk or self.config.disk
        storage = self.get_storage(name)
        domain = domain or extract_domain(self.config.disks.get(name), self.config)

        if not domain:
            logger.debug("No Cloudflare domain for disk %s, transforms disabled", name)
            return NullCloudflareImage(storage.url(path))

        if self.config.validate_file_exists and not storage.exists(path):
            raise FileNotFoundOnDiskError.for_path(path, name)

        logger.debug("Disk %s served through %s", name, domain)
        return CloudflareImage(
            apply_path_prefix(path, storage.prefix),
            domain,
            disk=name,
            transform_path=self.config.transform_path,
            validate_exists=False,
        )

    def cloudflare_url(self, path: str, disk: str | None = None, **options: Any) -> str:
        """Render a URL for a file with width/height/format/quality/fit options."""
        return apply_options(self.image(path, disk), options).url()

    def transformed_url(self, path: str, disk: str | None = None, **options: Any) -> str:
        """Like cloudflare_url(), filling format and quality from auto_transform defaults."""
        auto = self.config.auto_transform
        if auto.enabled:
            options.setdefault("format", auto.default_format)
            options.setdefault("quality", auto.default_quality)
        return self.cloudflare_url(path, disk, **options)


def describe_config(config: TransformsConfig) -> dict[str, str]:
    """Summarize the active configuration for display."""
    from cftransforms import __version__

    return {
        "Version": __version__,
        "Domain": config.domain or "Not configured",
        "Default Disk": config.disk,
        "Transform Path": config.transform_path,
        "File Validation": "Enabled" if config.validate_file_exists else "Disabled",
    }
