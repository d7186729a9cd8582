"""Configuration loading for cftransforms.

Settings come from a YAML file, from environment variables, or both (the
environment wins). Example file:

    domain: cdn.example.com
    disk: public
    transform_path: cdn-cgi/image
    validate_file_exists: true
    auto_transform:
      enabled: true
      default_format: auto
      default_quality: 85
    disks:
      public:
        driver: local
        root: ./storage/public
        url: https://cdn.example.com/storage
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from cftransforms.constants import (
    DEFAULT_DISK,
    DEFAULT_TRANSFORM_PATH,
    DEFAULT_VALIDATE_FILE_EXISTS,
    ENV_AUTO_TRANSFORM,
    ENV_DISK,
    ENV_DOMAIN,
    ENV_TRANSFORM_PATH,
    ENV_VALIDATE,
    STORAGE_DRIVERS,
)
from cftransforms.enums import Format, Quality
from cftransforms.exceptions import ConfigError, InvalidTransformParameterError
from cftransforms.validation import normalize_quality

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


def parse_bool(value: Any, field: str) -> bool:
    """Parse a YAML or environment value into a bool.

    Raises:
        ConfigError: If the value is not a recognizable boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigError(
        f"Invalid boolean value '{value}' for '{field}'",
        context={"field": field},
    )


def _parse_enum(enum_class: type[Enum], value: Any, field: str) -> Enum:
    """Parse a string value into an enum with validation.

    Raises:
        ConfigError: If the value is not a valid enum member.
    """
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}' for '{field}'. Valid values are: {valid}",
            context={"field": field},
        ) from None


def _parse_quality(value: Any, field: str) -> Quality | int:
    try:
        normalized = normalize_quality(value)
    except InvalidTransformParameterError as e:
        raise ConfigError(f"Invalid value for '{field}': {e}", context={"field": field}) from e
    return Quality(normalized) if isinstance(value, str) else int(normalized)


@dataclass
class AutoTransformConfig:
    """Defaults applied by ImageFactory.transformed_url()."""

    enabled: bool = True
    default_format: Format = Format.AUTO
    default_quality: Quality | int = 85


@dataclass
class DiskConfig:
    """A storage disk.

    Attributes:
        driver: 'local' (filesystem) or 'mock' (in-memory)
        root: Directory backing a local disk
        url: Public base URL; its host is used as the Cloudflare domain
        prefix: Path prefix for scoped disks
        cloudflare_domain: Explicit domain when the url host is not proxied
        files: Files present on a mock disk
    """

    driver: str = "local"
    root: Path = Path(".")
    url: str = ""
    prefix: str = ""
    cloudflare_domain: str = ""
    files: list[str] = field(default_factory=list)


@dataclass
class TransformsConfig:
    """Root configuration object."""

    domain: str = ""
    disk: str = DEFAULT_DISK
    transform_path: str = DEFAULT_TRANSFORM_PATH
    validate_file_exists: bool = DEFAULT_VALIDATE_FILE_EXISTS
    auto_transform: AutoTransformConfig = field(default_factory=AutoTransformConfig)
    disks: dict[str, DiskConfig] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TransformsConfig":
        """Build a configuration from environment variables alone."""
        return cls().apply_env_overrides(environ)

    def apply_env_overrides(
        self, environ: Mapping[str, str] | None = None
    ) -> "TransformsConfig":
        """Return a copy with environment variables taking precedence."""
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}

        if env.get(ENV_DOMAIN):
            changes["domain"] = env[ENV_DOMAIN]
        if env.get(ENV_DISK):
            changes["disk"] = env[ENV_DISK]
        if env.get(ENV_TRANSFORM_PATH):
            changes["transform_path"] = env[ENV_TRANSFORM_PATH]
        if ENV_VALIDATE in env:
            changes["validate_file_exists"] = parse_bool(env[ENV_VALIDATE], ENV_VALIDATE)
        if ENV_AUTO_TRANSFORM in env:
            changes["auto_transform"] = replace(
                self.auto_transform,
                enabled=parse_bool(env[ENV_AUTO_TRANSFORM], ENV_AUTO_TRANSFORM),
            )

        return replace(self, **changes)


def parse_disk(name: str, data: dict[str, Any]) -> DiskConfig:
    """Parse a single disk entry."""
    if not isinstance(data, dict):
        raise ConfigError(f"Disk '{name}' must be a mapping", context={"disk": name})

    driver = data.get("driver", "local")
    if driver not in STORAGE_DRIVERS:
        raise ConfigError(
            f"Disk '{name}': unknown driver '{driver}'. "
            f"Valid drivers: {', '.join(STORAGE_DRIVERS)}",
            context={"disk": name},
        )

    return DiskConfig(
        driver=driver,
        root=Path(data.get("root", ".")),
        url=data.get("url") or "",
        prefix=data.get("prefix") or "",
        cloudflare_domain=data.get("cloudflare_domain") or "",
        files=list(data.get("files", [])),
    )


def parse_config(data: dict[str, Any]) -> TransformsConfig:
    """Parse a configuration mapping (as loaded from YAML)."""
    auto_transform = AutoTransformConfig()
    if "auto_transform" in data:
        a = data["auto_transform"] or {}
        if not isinstance(a, dict):
            raise ConfigError("'auto_transform' must be a mapping")
        auto_transform = AutoTransformConfig(
            enabled=parse_bool(a.get("enabled", True), "auto_transform.enabled"),
            default_format=_parse_enum(
                Format, a.get("default_format", "auto"), "auto_transform.default_format"
            ),
            default_quality=_parse_quality(
                a.get("default_quality", 85), "auto_transform.default_quality"
            ),
        )

    disks_data = data.get("disks") or {}
    if not isinstance(disks_data, dict):
        raise ConfigError("'disks' must be a mapping of disk names to settings")

    disks = {}
    for name, disk_data in disks_data.items():
        disks[name] = parse_disk(name, disk_data)

    return TransformsConfig(
        domain=data.get("domain") or "",
        disk=data.get("disk") or DEFAULT_DISK,
        transform_path=data.get("transform_path") or DEFAULT_TRANSFORM_PATH,
        validate_file_exists=parse_bool(
            data.get("validate_file_exists", DEFAULT_VALIDATE_FILE_EXISTS),
            "validate_file_exists",
        ),
        auto_transform=auto_transform,
        disks=disks,
    )


def load_config(
    config_path: Path,
    environ: Mapping[str, str] | None = None,
) -> TransformsConfig:
    """Load a configuration file and apply environment overrides."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    return parse_config(data).apply_env_overrides(environ)
