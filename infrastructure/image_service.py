"""Pillow-backed image decoding and preview scaling."""

from __future__ import annotations

from io import BytesIO

from PIL import Image, ImageOps
from loguru import logger

from core.services.interfaces import DecodedImage, IImageDecoder


def preview_height(width: int, height: int, target_width: int) -> int:
    """Height matching `target_width` at the same aspect ratio (at least 1px)."""
    if width <= 0:
        raise ValueError(f"Invalid image width: {width}")
    return max(1, int(height * (target_width / width)))


class ImageService(IImageDecoder):
    """Decode JPEG (and any other Pillow format) bytes to RGBA pixels."""

    def __init__(self, auto_transpose: bool = False) -> None:
        """Create the service.

        Args:
            auto_transpose: Apply the EXIF orientation tag while decoding.
        """
        self._auto_transpose = auto_transpose

    def decode(self, data: bytes) -> DecodedImage:
        try:
            with Image.open(BytesIO(data)) as im:
                # Image.open is lazy; force the decoder so truncated files fail here
                im.load()
                if self._auto_transpose:
                    try:
                        im = ImageOps.exif_transpose(im)
                    except (OSError, ValueError, AttributeError) as ex:
                        logger.debug("EXIF transpose skipped: {}", ex)
                return self._to_decoded(im)
        except (Image.DecompressionBombError, SyntaxError) as ex:
            raise ValueError(str(ex)) from ex

    def resize_to_width(self, image: DecodedImage, width: int) -> DecodedImage:
        if width <= 0:
            raise ValueError(f"Invalid preview width: {width}")
        height = preview_height(image.width, image.height, width)
        im = self.to_pil(image)
        resampling = getattr(Image, "Resampling", Image)
        return self._to_decoded(im.resize((width, height), resampling.NEAREST))

    @staticmethod
    def to_pil(image: DecodedImage) -> Image.Image:
        """Wrap a `DecodedImage` as a Pillow image (copies the buffer)."""
        return Image.frombytes("RGBA", image.size, image.pixels)

    @staticmethod
    def _to_decoded(im: Image.Image) -> DecodedImage:
        if im.mode != "RGBA":
            im = im.convert("RGBA")
        return DecodedImage(width=im.width, height=im.height, pixels=im.tobytes("raw", "RGBA"))
