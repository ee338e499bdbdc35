"""Lightweight view model wrapper around `Photo`."""

from __future__ import annotations

from dataclasses import dataclass

from core.filename_codec import encode_filename
from core.models import Photo
from infrastructure.utils import format_display_time


@dataclass
class PhotoVM:
    """Expose convenient properties for bindings/templates."""

    photo: Photo

    @property
    def photo_id(self) -> int:
        return self.photo.id

    @property
    def file_name(self) -> str:
        """Canonical file name of the photo."""
        return encode_filename(self.photo.id)

    @property
    def display_time(self) -> str:
        """Photo time as ``YYYY-MM-DD HH:MM``."""
        return format_display_time(self.photo.info.time)

    @property
    def notes(self) -> str:
        return self.photo.info.notes

    @property
    def mole_size(self) -> str:
        """Measured diameter in mm, or an empty string when not measured."""
        size = self.photo.info.mole_metrics.size
        return f"{size:.2f} mm" if size is not None else ""
