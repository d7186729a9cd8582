"""HTML <img> helper with srcset support.

See https://developers.cloudflare.com/images/transform-images/make-responsive-images/
"""

import html
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cftransforms.contract import ImageBuilder
from cftransforms.enums import Fit, Format, Gravity, Quality

if TYPE_CHECKING:
    from cftransforms.factory import ImageFactory


@dataclass
class ImageTag:
    """Attributes for a Cloudflare-transformed <img> element.

    Attributes:
        path: Image path relative to the disk
        disk: Disk name (defaults to the factory's default disk)
        srcset: Width breakpoints for a width-descriptor srcset
        srcset_density: 1x width for a density-descriptor srcset
        sizes: Value for the sizes attribute
        attributes: Extra attributes rendered verbatim (escaped)
    """

    path: str
    disk: str | None = None
    width: int | None = None
    height: int | None = None
    format: Format | None = None
    fit: Fit | None = None
    gravity: Gravity | str | None = None
    quality: Quality | int | None = None
    srcset: list[int] | None = None
    srcset_density: int | None = None
    sizes: str | None = None
    alt: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    def builder(self, factory: "ImageFactory") -> ImageBuilder:
        """Build the image with the configured transforms applied."""
        image = factory.image(self.path, self.disk)

        if self.width is not None:
            image = image.width(self.width)
        if self.height is not None:
            image = image.height(self.height)
        if self.format is not None:
            image = image.format(self.format)
        if self.fit is not None:
            image = image.fit(self.fit)
        if self.gravity is not None:
            image = image.gravity(self.gravity)
        if self.quality is not None:
            image = image.quality(self.quality)

        return image

    def src_attribute(self, factory: "ImageFactory") -> str:
        """The src value. Uses the largest variant as fallback since Cloudflare never upscales."""
        image = self.builder(factory)

        if self.srcset:
            image = image.width(max(self.srcset))
        elif self.srcset_density is not None:
            image = image.width(self.srcset_density * 2)

        return image.url()

    def srcset_attribute(self, factory: "ImageFactory") -> str | None:
        """The srcset value, or None when no srcset is configured."""
        if self.srcset:
            return self.builder(factory).srcset(self.srcset)
        if self.srcset_density is not None:
            return self.builder(factory).srcset_density(self.srcset_density)
        return None

    def render(self, factory: "ImageFactory") -> str:
        """Render the <img> element."""
        attrs: dict[str, str] = {"src": self.src_attribute(factory)}

        srcset = self.srcset_attribute(factory)
        if srcset is not None:
            attrs["srcset"] = srcset
            if self.sizes:
                attrs["sizes"] = self.sizes

        attrs["alt"] = self.alt
        if self.width is not None:
            attrs["width"] = str(self.width)
        if self.height is not None:
            attrs["height"] = str(self.height)
        attrs.update(self.attributes)

        rendered = " ".join(
            f'{name}="{html.escape(value, quote=True)}"' for name, value in attrs.items()
        )
        return f"<img {rendered}>"
