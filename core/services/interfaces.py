"""Core service interfaces and shared data structures.

The store does not decode images itself. It talks to an `IImageDecoder`
implementation and keeps the `DecodedImage` previews it returns.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DecodedImage:
    """Decoded pixel buffer.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        pixels: RGBA8 data, row-major, not premultiplied.
    """

    width: int
    height: int
    pixels: bytes

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


class IImageDecoder:
    """Interface for turning raw image bytes into pixels.

    Implementations raise `OSError` or `ValueError` when the data cannot be
    decoded.
    """

    def decode(self, data: bytes) -> DecodedImage:
        """Decode `data` into an RGBA pixel buffer."""
        raise NotImplementedError

    def resize_to_width(self, image: DecodedImage, width: int) -> DecodedImage:
        """Scale `image` to `width` pixels wide, keeping the aspect ratio."""
        raise NotImplementedError
