"""Directory persistence for photo sets.

A photo set lives in one directory: ``PICT####.jpg`` files plus an optional
``info.json`` sidecar with visit and per-photo metadata. Loading scans the
directory, decodes a preview for every photo and merges the sidecar on top of
the file-derived defaults. Saving writes missing photo files (never
overwriting existing ones) and rewrites the sidecar in full.
"""

from __future__ import annotations

from dataclasses import dataclass
import errno
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from core.errors import (
    CannotDecodeImage,
    CannotDecodeInfo,
    CannotReadFile,
    CannotWriteFile,
    ExpectedDirectory,
    NoPhotosFound,
)
from core.filename_codec import decode_filename, encode_filename
from core.models import (
    MoleMetrics,
    Photo,
    PhotoInfo,
    PhotoSet,
    PhotoSetData,
    PhotoSetInfo,
)
from core.services.interfaces import IImageDecoder
from infrastructure.image_service import ImageService
from infrastructure.utils import format_json_datetime, get_modified_datetime, parse_json_datetime

INFO_FILE_NAME = "info.json"
PREVIEW_WIDTH = 128


@dataclass(frozen=True)
class PhotoSetOptions:
    """Behaviour switches for loading and saving.

    Attributes:
        require_photos: Raise `NoPhotosFound` when a directory has no photos;
            otherwise return an empty set.
        persist_mole_metrics: Write mole metrics to the sidecar and merge them
            back on load.
        preview_width: Width in pixels of the decoded previews.
    """

    require_photos: bool = True
    persist_mole_metrics: bool = True
    preview_width: int = PREVIEW_WIDTH

    @classmethod
    def from_settings(cls, settings: Any | None) -> PhotoSetOptions:
        """Build options from a `JsonSettings`-like object (``photo_set.*`` keys)."""
        if settings is None:
            return cls()
        width = settings.get_int("photo_set.preview_width", PREVIEW_WIDTH)
        return cls(
            require_photos=settings.get_bool("photo_set.require_photos", True),
            persist_mole_metrics=settings.get_bool("photo_set.persist_mole_metrics", True),
            preview_width=width if width > 0 else PREVIEW_WIDTH,
        )


def _require(obj: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    """Return `obj[key]`, checking presence and type (booleans never pass as numbers)."""
    if key not in obj:
        raise ValueError(f"missing field `{key}`")
    value = obj[key]
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise ValueError(f"field `{key}` has wrong type {type(value).__name__}")
    return value


def _parse_metrics(raw: Any) -> MoleMetrics:
    if not isinstance(raw, dict):
        raise ValueError("field `mole_metrics` must be an object")
    return MoleMetrics(
        center_x=float(_require(raw, "center_x", (int, float))),
        center_y=float(_require(raw, "center_y", (int, float))),
        diameter=float(_require(raw, "diameter", (int, float))),
    )


def _parse_photo_info(raw: Any) -> PhotoInfo:
    if not isinstance(raw, dict):
        raise ValueError("photo entry must be an object")
    info = PhotoInfo(
        time=parse_json_datetime(_require(raw, "time", (str, dict))),
        notes=_require(raw, "notes", str),
    )
    if "mole_metrics" in raw:
        info.mole_metrics = _parse_metrics(raw["mole_metrics"])
    return info


def _parse_photo_id(key: str) -> int:
    if not (key.isascii() and key.isdigit()):
        raise ValueError(f"invalid photo id `{key}`")
    return int(key)


def parse_photo_set_data(text: str) -> PhotoSetData:
    """Parse sidecar text. Unknown fields are ignored.

    Raises:
        ValueError: On invalid JSON or a missing/mistyped field
            (`json.JSONDecodeError` is a `ValueError`).
        RecursionError: The document nests deeper than the parser allows.
    """
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("top-level value must be an object")
    photos_raw = _require(raw, "photos", dict)
    return PhotoSetData(
        name=_require(raw, "name", str),
        surname=_require(raw, "surname", str),
        time=parse_json_datetime(_require(raw, "time", (str, dict))),
        notes=_require(raw, "notes", str),
        photos={_parse_photo_id(k): _parse_photo_info(v) for k, v in photos_raw.items()},
    )


def render_photo_set_data(data: PhotoSetData, with_metrics: bool = True) -> str:
    """Render `data` as pretty-printed JSON, photos keyed by id in ascending order."""
    photos: dict[str, Any] = {}
    for photo_id in sorted(data.photos):
        info = data.photos[photo_id]
        entry: dict[str, Any] = {
            "time": format_json_datetime(info.time),
            "notes": info.notes,
        }
        if with_metrics:
            entry["mole_metrics"] = {
                "center_x": info.mole_metrics.center_x,
                "center_y": info.mole_metrics.center_y,
                "diameter": info.mole_metrics.diameter,
            }
        photos[str(photo_id)] = entry
    doc = {
        "name": data.name,
        "surname": data.surname,
        "time": format_json_datetime(data.time),
        "notes": data.notes,
        "photos": photos,
    }
    return json.dumps(doc, indent=2, ensure_ascii=False)


class PhotoSetRepository:
    """Load photo sets from directories and save them back."""

    def __init__(
        self,
        decoder: IImageDecoder | None = None,
        options: PhotoSetOptions | None = None,
    ) -> None:
        self._decoder = decoder or ImageService()
        self._options = options or PhotoSetOptions()

    @property
    def options(self) -> PhotoSetOptions:
        return self._options

    def load(self, directory: str | Path) -> PhotoSet:
        """Build a `PhotoSet` from `directory`.

        Raises:
            ExpectedDirectory: `directory` is not a directory.
            NoPhotosFound: No photos and `require_photos` is set.
            CannotReadFile: Listing, stat or read failure.
            CannotDecodeImage: A photo's bytes are not a decodable image.
            CannotDecodeInfo: The sidecar is malformed.
        """
        path = Path(directory)
        if not path.is_dir():
            raise ExpectedDirectory(path)

        photos = self._scan_photos(path)
        if not photos and self._options.require_photos:
            raise NoPhotosFound(path)

        photo_set = PhotoSet(path=path, photos=photos, info=PhotoSetInfo())

        info_path = path / INFO_FILE_NAME
        if info_path.exists():
            try:
                info_text = info_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as ex:
                raise CannotReadFile(info_path, ex) from ex
            try:
                data = parse_photo_set_data(info_text)
            except (ValueError, RecursionError) as ex:
                raise CannotDecodeInfo(info_path, ex) from ex
            self.apply_data(photo_set, data)

        logger.info("Loaded {} photo(s) from {}", len(photo_set.photos), path)
        return photo_set

    def save(self, photo_set: PhotoSet) -> None:
        """Write missing photo files and rewrite the sidecar.

        Raises:
            CannotWriteFile: A photo or the sidecar could not be written.
        """
        path = Path(photo_set.path)
        written = 0
        for photo in photo_set.photos:
            photo_path = path / encode_filename(photo.id)
            if photo_path.exists():
                continue
            try:
                photo_path.write_bytes(photo.bytes)
            except OSError as ex:
                raise CannotWriteFile(photo_path, ex) from ex
            written += 1

        text = render_photo_set_data(
            self.build_data(photo_set), with_metrics=self._options.persist_mole_metrics
        )
        info_path = path / INFO_FILE_NAME
        tmp_path = path / f".{INFO_FILE_NAME}.tmp"
        try:
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, info_path)
        except OSError as ex:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_ex:
                logger.debug("Temporary sidecar cleanup failed for {}: {}", tmp_path, cleanup_ex)
            raise CannotWriteFile(info_path, ex) from ex

        logger.info("Saved photo set to {} ({} new photo file(s))", path, written)

    def apply_data(self, photo_set: PhotoSet, data: PhotoSetData) -> None:
        """Merge sidecar `data` into `photo_set`; unknown photo ids are ignored."""
        photo_set.info = PhotoSetInfo(
            name=data.name, surname=data.surname, time=data.time, notes=data.notes
        )
        for photo_id, info in data.photos.items():
            photo = photo_set.get_photo(photo_id)
            if photo is None:
                logger.debug("Sidecar entry for unknown photo {} ignored", photo_id)
                continue
            photo.info.time = info.time
            photo.info.notes = info.notes
            if self._options.persist_mole_metrics:
                photo.info.mole_metrics = info.mole_metrics

    def build_data(self, photo_set: PhotoSet) -> PhotoSetData:
        """Snapshot the current metadata of `photo_set` in sidecar shape."""
        info = photo_set.info
        return PhotoSetData(
            name=info.name,
            surname=info.surname,
            time=info.time,
            notes=info.notes,
            photos={photo.id: photo.info for photo in photo_set.photos},
        )

    def _scan_photos(self, path: Path) -> list[Photo]:
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as ex:
            raise CannotReadFile(path, ex) from ex

        by_id: dict[int, Photo] = {}
        for entry in entries:
            photo_id = decode_filename(entry.name)
            if photo_id is None:
                continue
            if not self._is_regular_file(entry):
                logger.debug("Skipping non-file entry {}", entry.path)
                continue
            if photo_id in by_id:
                logger.debug("Photo {} replaced by later entry {}", photo_id, entry.name)
            by_id[photo_id] = self._load_photo(Path(entry.path), photo_id)
        return list(by_id.values())

    @staticmethod
    def _is_regular_file(entry: os.DirEntry) -> bool:
        """True if `entry` resolves to a regular file; symlink loops do not.

        Raises:
            CannotReadFile: The entry exists but its type cannot be read.
        """
        # both follow symlinks; broken links report False for each
        try:
            return not entry.is_dir() and entry.is_file()
        except OSError as ex:
            if ex.errno == errno.ELOOP:
                return False
            raise CannotReadFile(entry.path, ex) from ex

    def _load_photo(self, file_path: Path, photo_id: int) -> Photo:
        try:
            time = get_modified_datetime(file_path.stat())
            data = file_path.read_bytes()
        except OSError as ex:
            raise CannotReadFile(file_path, ex) from ex

        try:
            image = self._decoder.decode(data)
            preview = self._decoder.resize_to_width(image, self._options.preview_width)
        except (OSError, ValueError) as ex:
            raise CannotDecodeImage(encode_filename(photo_id), ex) from ex

        return Photo(id=photo_id, bytes=data, preview=preview, info=PhotoInfo(time=time))


def load_photo_set(directory: str | Path, **options: Any) -> PhotoSet:
    """Load `directory` with a default repository; `options` as in `PhotoSetOptions`."""
    return PhotoSetRepository(options=PhotoSetOptions(**options)).load(directory)


def save_photo_set(photo_set: PhotoSet, **options: Any) -> None:
    """Save `photo_set` with a default repository; `options` as in `PhotoSetOptions`."""
    PhotoSetRepository(options=PhotoSetOptions(**options)).save(photo_set)
