"""Core domain models for a visit's photo set."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path

from core.services.interfaces import DecodedImage

MOLE_CENTER_DISTANCE_MAX = 2.0
MOLE_SIZE_MAX = 4.0
PHOTO_PX_PER_MM = 1250.0


@dataclass
class MoleMetrics:
    """Mole position and size in millimetres, relative to the photo centre."""

    center_x: float = 0.0
    center_y: float = 0.0
    diameter: float = 0.0

    @property
    def size(self) -> float | None:
        """Diameter, or None while the size has not been measured."""
        return self.diameter if self.diameter > 0.0 else None

    def clamped(self) -> MoleMetrics:
        """Return a copy limited to the range the viewer can edit."""

        def _clamp(value: float, low: float, high: float) -> float:
            return min(max(float(value), low), high)

        return replace(
            self,
            center_x=_clamp(self.center_x, -MOLE_CENTER_DISTANCE_MAX, MOLE_CENTER_DISTANCE_MAX),
            center_y=_clamp(self.center_y, -MOLE_CENTER_DISTANCE_MAX, MOLE_CENTER_DISTANCE_MAX),
            diameter=_clamp(self.diameter, 0.0, MOLE_SIZE_MAX),
        )


@dataclass
class PhotoInfo:
    """Editable metadata of one photo."""

    time: datetime
    notes: str = ""
    mole_metrics: MoleMetrics = field(default_factory=MoleMetrics)


@dataclass
class Photo:
    """A loaded photo: original bytes, a small preview and its metadata."""

    id: int
    bytes: bytes
    preview: DecodedImage
    info: PhotoInfo


@dataclass
class PhotoSetInfo:
    """Visit-level metadata, independent of any single photo."""

    name: str = ""
    surname: str = ""
    time: datetime = field(default_factory=datetime.now)
    notes: str = ""


@dataclass
class PhotoSet:
    """Photos of one visit rooted at `path`.

    `photos` follows scan order; use `sorted_photos()` when id order matters.
    """

    path: Path
    photos: list[Photo] = field(default_factory=list)
    info: PhotoSetInfo = field(default_factory=PhotoSetInfo)

    def get_photo(self, photo_id: int) -> Photo | None:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    def sorted_photos(self) -> list[Photo]:
        return sorted(self.photos, key=lambda p: p.id)


@dataclass
class PhotoSetData:
    """Shape of the `info.json` sidecar; only used while loading or saving."""

    name: str
    surname: str
    time: datetime
    notes: str
    photos: dict[int, PhotoInfo] = field(default_factory=dict)
