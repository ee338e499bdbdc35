"""ViewModel owning the currently opened photo set."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from core.models import MoleMetrics, Photo, PhotoSet


class MainVM:
    """Main application view-model.

    Mediates between a repository providing `PhotoSet` values and the UI.
    Every repository error propagates to the caller unchanged.
    """

    def __init__(self, repo: Any) -> None:
        """Create a MainVM.

        Args:
            repo: Repository with `load(path)` and `save(photo_set)` methods.
        """
        self._repo = repo
        self.photo_set: PhotoSet | None = None
        self.current_index: int = 0

    @property
    def has_photos(self) -> bool:
        return bool(self.photo_set and self.photo_set.photos)

    @property
    def photos(self) -> list[PhotoVM]:
        """Photos in ascending id order, wrapped for display."""
        if self.photo_set is None:
            return []
        return [PhotoVM(p) for p in self.photo_set.sorted_photos()]

    @property
    def current_photo(self) -> Photo | None:
        photos = self.photos
        if not photos:
            return None
        return photos[self.current_index].photo

    def load(self, path: str | Path) -> None:
        """Replace the current set with the one stored at `path`.

        On failure the previously opened set stays open.
        """
        photo_set = self._repo.load(path)
        self.photo_set = photo_set
        self.current_index = 0

    def save(self) -> None:
        self._repo.save(self._require_set())

    def save_as(self, path: str | Path) -> None:
        """Save under `path`; on failure the set keeps pointing at its old directory."""
        photo_set = self._require_set()
        old_path = photo_set.path
        photo_set.path = Path(path)
        try:
            self._repo.save(photo_set)
        except Exception:
            photo_set.path = old_path
            raise
        logger.info("Photo set moved from {} to {}", old_path, photo_set.path)

    def select(self, index: int) -> bool:
        """Select the photo at `index` (id order); return False if out of range."""
        if not 0 <= index < len(self.photos):
            return False
        self.current_index = index
        return True

    def update_visit_info(self, **fields: Any) -> None:
        """Update visit fields (`name`, `surname`, `time`, `notes`)."""
        photo_set = self._require_set()
        photo_set.info = replace(photo_set.info, **fields)

    def set_photo_notes(self, photo_id: int, notes: str) -> None:
        self._require_photo(photo_id).info.notes = notes

    def set_mole_metrics(self, photo_id: int, metrics: MoleMetrics) -> MoleMetrics:
        """Store `metrics` limited to the editable range; return the stored value."""
        clamped = metrics.clamped()
        self._require_photo(photo_id).info.mole_metrics = clamped
        return clamped

    def _require_set(self) -> PhotoSet:
        if self.photo_set is None:
            raise RuntimeError("No photo set loaded")
        return self.photo_set

    def _require_photo(self, photo_id: int) -> Photo:
        photo = self._require_set().get_photo(photo_id)
        if photo is None:
            raise KeyError(photo_id)
        return photo
