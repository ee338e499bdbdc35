"""Unit tests for infrastructure.image_service."""

import pytest

from conftest import jpeg_bytes
from core.services.interfaces import DecodedImage
from infrastructure.image_service import ImageService, preview_height


class TestPreviewHeight:
    """Tests for preview_height()."""

    def test_proportional(self):
        assert preview_height(400, 300, 128) == 96

    def test_truncates(self):
        assert preview_height(3, 2, 128) == 85

    def test_never_zero(self):
        assert preview_height(10000, 1, 128) == 1

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            preview_height(0, 10, 128)


class TestImageService:
    """Tests for ImageService decode/resize."""

    def test_decode_returns_rgba(self):
        image = ImageService().decode(jpeg_bytes(20, 10))
        assert image.size == (20, 10)
        assert len(image.pixels) == 20 * 10 * 4

    def test_decode_garbage_raises_oserror(self):
        with pytest.raises(OSError):
            ImageService().decode(b"\x00\x01garbage")

    def test_resize_to_width(self):
        service = ImageService()
        image = service.decode(jpeg_bytes(200, 100))

        preview = service.resize_to_width(image, 128)

        assert preview.size == (128, 64)
        assert len(preview.pixels) == 128 * 64 * 4

    def test_resize_keeps_colour(self):
        pixels = bytes([10, 20, 30, 255]) * 4
        preview = ImageService().resize_to_width(DecodedImage(2, 2, pixels), 4)
        assert preview.pixels == bytes([10, 20, 30, 255]) * 16

    def test_resize_rejects_non_positive_width(self):
        image = DecodedImage(2, 2, bytes(16))
        with pytest.raises(ValueError):
            ImageService().resize_to_width(image, 0)

    def test_auto_transpose_option(self):
        image = ImageService(auto_transpose=True).decode(jpeg_bytes(20, 10))
        assert image.size == (20, 10)
