"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from io import BytesIO
import json
from pathlib import Path
from typing import Any

from PIL import Image
import pytest

from infrastructure.image_service import ImageService
from infrastructure.photo_set_repository import PhotoSetOptions, PhotoSetRepository


def jpeg_bytes(
    width: int = 64, height: int = 48, color: tuple[int, int, int] = (200, 80, 40)
) -> bytes:
    """Encode a solid-colour JPEG in memory."""
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def make_jpeg() -> Callable[..., Path]:
    """Write a JPEG file and return its path."""

    def _make(path: Path, width: int = 64, height: int = 48, **kwargs: Any) -> Path:
        path.write_bytes(jpeg_bytes(width, height, **kwargs))
        return path

    return _make


@pytest.fixture
def write_info() -> Callable[[Path, dict[str, Any]], Path]:
    """Write an `info.json` document into a directory."""

    def _write(directory: Path, doc: dict[str, Any]) -> Path:
        path = directory / "info.json"
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def photo_dir(tmp_path: Path, make_jpeg: Callable[..., Path]) -> Path:
    """Directory with two photos (ids 0 and 3) and no sidecar."""
    directory = tmp_path / "visit"
    directory.mkdir()
    make_jpeg(directory / "PICT0000.jpg")
    make_jpeg(directory / "PICT0003.jpg", width=32, height=32)
    return directory


@pytest.fixture
def repo() -> PhotoSetRepository:
    return PhotoSetRepository(decoder=ImageService(), options=PhotoSetOptions())
