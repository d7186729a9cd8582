"""Command-line interface for cftransforms."""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from cftransforms import __version__
from cftransforms.enums import Fit, Flip, Format, Metadata
from cftransforms.logging_config import get_logger

if TYPE_CHECKING:
    from cftransforms.config import TransformsConfig
    from cftransforms.contract import ImageBuilder

logger = get_logger(__name__)


def parse_widths(value: str) -> list[int]:
    """Parse a comma-separated list of widths ("320,640,960")."""
    try:
        widths = [int(w) for w in value.split(",") if w.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid width list: '{value}'. Use comma-separated integers like 320,640"
        ) from None
    if not widths:
        raise argparse.ArgumentTypeError("Width list cannot be empty")
    return widths


def parse_quality(value: str) -> int | str:
    """Quality is either a 1-100 integer or a tier name."""
    return int(value) if value.isdigit() else value


def show_version() -> None:
    logger.info("cftransforms %s", __version__)


def show_about(config: "TransformsConfig") -> None:
    """Print the active configuration summary."""
    from cftransforms.factory import describe_config

    logger.info("Cloudflare Transforms")
    for key, value in describe_config(config).items():
        logger.info("  %-16s %s", key, value)
    if config.disks:
        logger.info("  %-16s %s", "Disks", ", ".join(sorted(config.disks)))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cfimg",
        description="Build Cloudflare Image Transformation URLs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cfimg --domain cdn.example.com --no-validate photo.jpg --width 300 --format webp
                                                Print a transformed URL
  cfimg -c cftransforms.yaml photos/cat.jpg --thumbnail 150
                                                Use disks from a config file
  cfimg -c cftransforms.yaml hero.jpg --srcset 320,640,960
                                                Print a width srcset
  cfimg -c cftransforms.yaml --about            Show the active configuration
""",
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="Image path relative to the storage disk",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version information and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "--about",
        action="store_true",
        help="Show the active configuration and exit",
    )

    # Builder identity overrides
    parser.add_argument("--domain", help="Cloudflare domain (overrides config)")
    parser.add_argument("--disk", help="Storage disk name (overrides config)")
    parser.add_argument("--transform-path", help="Transform URL segment (default: cdn-cgi/image)")
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip the file existence check",
    )

    # Transforms
    transforms = parser.add_argument_group("transforms")
    transforms.add_argument("--width", type=int, help="Maximum width in pixels (1-12000)")
    transforms.add_argument(
        "--auto-width",
        action="store_true",
        help="Let Cloudflare pick the width from client hints",
    )
    transforms.add_argument("--height", type=int, help="Maximum height in pixels (1-12000)")
    transforms.add_argument("--fit", choices=[f.value for f in Fit], help="Resize mode")
    transforms.add_argument("--gravity", help="Focal point: auto, face, left, ... or XxY")
    transforms.add_argument("--format", choices=[f.value for f in Format], help="Output format")
    transforms.add_argument(
        "--quality",
        type=parse_quality,
        help="1-100 or one of high, medium-high, medium-low, low",
    )
    transforms.add_argument("--dpr", type=float, help="Device pixel ratio (0.1-5)")
    transforms.add_argument("--blur", type=float, help="Blur radius (1-250)")
    transforms.add_argument("--sharpen", type=float, help="Sharpen strength (0-10)")
    transforms.add_argument("--rotate", type=int, help="Rotation: 90, 180 or 270")
    transforms.add_argument("--flip", choices=[f.value for f in Flip], help="Flip axis")
    transforms.add_argument(
        "--metadata",
        choices=[m.value for m in Metadata],
        help="EXIF metadata policy",
    )
    transforms.add_argument("--background", help="Background color, e.g. #ff0000")
    transforms.add_argument("--thumbnail", type=int, help="Square cover thumbnail of SIZE pixels")
    transforms.add_argument("--grayscale", action="store_true", help="Remove color")
    transforms.add_argument("--optimize", action="store_true", help="Automatic format, high quality")

    # Output variants
    parser.add_argument(
        "--srcset",
        type=parse_widths,
        help="Print a width srcset for these comma-separated widths",
    )
    parser.add_argument(
        "--srcset-density",
        type=int,
        help="Print a 1x/2x density srcset for this base width",
    )

    # Logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for verbose, -vv for debug)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file (includes all levels)",
    )

    return parser


def resolve_config(parsed: argparse.Namespace) -> "TransformsConfig":
    """Load the config file (or environment) and apply CLI overrides."""
    from cftransforms.config import TransformsConfig, load_config

    config = load_config(parsed.config) if parsed.config else TransformsConfig.from_env()

    changes = {}
    if parsed.domain:
        changes["domain"] = parsed.domain
    if parsed.disk:
        changes["disk"] = parsed.disk
    if parsed.transform_path:
        changes["transform_path"] = parsed.transform_path
    if parsed.no_validate:
        changes["validate_file_exists"] = False
    return replace(config, **changes)


def build_image(parsed: argparse.Namespace, config: "TransformsConfig") -> "ImageBuilder":
    """Create the builder for parsed.path and apply the requested transforms."""
    from cftransforms.factory import ImageFactory, make_image

    if config.disk in config.disks:
        image = ImageFactory(config).image(parsed.path, domain=parsed.domain)
    else:
        image = make_image(parsed.path, config=config)

    if parsed.auto_width:
        image = image.width(auto=True)
    elif parsed.width is not None:
        image = image.width(parsed.width)
    if parsed.height is not None:
        image = image.height(parsed.height)
    if parsed.thumbnail is not None:
        image = image.thumbnail(parsed.thumbnail)
    if parsed.fit:
        image = image.fit(parsed.fit)
    if parsed.gravity:
        image = image.gravity(parsed.gravity)
    if parsed.format:
        image = image.format(parsed.format)
    if parsed.quality is not None:
        image = image.quality(parsed.quality)
    if parsed.optimize:
        image = image.optimize()
    if parsed.dpr is not None:
        image = image.dpr(parsed.dpr)
    if parsed.blur is not None:
        image = image.blur(parsed.blur)
    if parsed.sharpen is not None:
        image = image.sharpen(parsed.sharpen)
    if parsed.grayscale:
        image = image.grayscale()
    if parsed.rotate is not None:
        image = image.rotate(parsed.rotate)
    if parsed.flip:
        image = image.flip(parsed.flip)
    if parsed.metadata:
        image = image.metadata(parsed.metadata)
    if parsed.background:
        image = image.background(parsed.background)

    return image


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    from cftransforms.logging_config import setup_logging

    setup_logging(
        verbosity=parsed.verbose,
        quiet=parsed.quiet,
        log_file=parsed.log_file,
    )

    if parsed.version:
        show_version()
        return 0

    from cftransforms.exceptions import CloudflareTransformError, ConfigError

    try:
        config = resolve_config(parsed)
        logger.debug(
            "Domain %s, disk %s, transform path %s, validation %s",
            config.domain or "(none)",
            config.disk,
            config.transform_path,
            "on" if config.validate_file_exists else "off",
        )

        if parsed.about:
            show_about(config)
            return 0

        if not parsed.path:
            parser.print_help()
            return 1

        image = build_image(parsed, config)

        if parsed.srcset:
            output = image.srcset(parsed.srcset)
        elif parsed.srcset_density is not None:
            output = image.srcset_density(parsed.srcset_density)
        else:
            output = image.url()

        logger.info("%s", output)
        return 0
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except CloudflareTransformError as e:
        logger.error("%s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return 1
    except Exception as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
