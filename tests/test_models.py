"""Unit tests for core.models and core.errors."""

from datetime import datetime
from pathlib import Path

from conftest import jpeg_bytes
from core.errors import (
    CannotReadFile,
    ExpectedDirectory,
    NoPhotosFound,
    PhotoSetError,
)
from core.models import (
    MOLE_CENTER_DISTANCE_MAX,
    MOLE_SIZE_MAX,
    MoleMetrics,
    Photo,
    PhotoInfo,
    PhotoSet,
)
from core.services.interfaces import DecodedImage


def _photo(photo_id: int) -> Photo:
    return Photo(
        id=photo_id,
        bytes=jpeg_bytes(),
        preview=DecodedImage(1, 1, bytes(4)),
        info=PhotoInfo(time=datetime(2020, 1, 1)),
    )


class TestMoleMetrics:
    """Tests for MoleMetrics."""

    def test_size_unset_when_not_positive(self):
        assert MoleMetrics().size is None
        assert MoleMetrics(diameter=-1.0).size is None

    def test_size(self):
        assert MoleMetrics(diameter=1.25).size == 1.25

    def test_clamped(self):
        metrics = MoleMetrics(center_x=5.0, center_y=-5.0, diameter=10.0).clamped()
        assert metrics == MoleMetrics(
            MOLE_CENTER_DISTANCE_MAX, -MOLE_CENTER_DISTANCE_MAX, MOLE_SIZE_MAX
        )

    def test_clamped_leaves_valid_values(self):
        metrics = MoleMetrics(0.5, -0.5, 1.0)
        assert metrics.clamped() == metrics
        assert MoleMetrics(diameter=-3.0).clamped().diameter == 0.0


class TestPhotoSet:
    """Tests for PhotoSet helpers."""

    def test_get_photo(self):
        photo_set = PhotoSet(path=Path("."), photos=[_photo(4), _photo(1)])
        assert photo_set.get_photo(1).id == 1
        assert photo_set.get_photo(2) is None

    def test_sorted_photos_does_not_reorder_in_place(self):
        photo_set = PhotoSet(path=Path("."), photos=[_photo(4), _photo(1), _photo(2)])
        assert [p.id for p in photo_set.sorted_photos()] == [1, 2, 4]
        assert [p.id for p in photo_set.photos] == [4, 1, 2]


class TestErrors:
    """Tests for error messages and attributes."""

    def test_expected_directory(self):
        err = ExpectedDirectory("/tmp/x")
        assert str(err) == "Expected directory: /tmp/x"
        assert err.error is None
        assert isinstance(err, PhotoSetError)

    def test_cannot_read_file(self):
        cause = PermissionError("denied")
        err = CannotReadFile(Path("/tmp/PICT0000.jpg"), cause)
        assert str(err) == "Cannot read file /tmp/PICT0000.jpg: denied"
        assert err.path == "/tmp/PICT0000.jpg"
        assert err.error is cause

    def test_no_photos_found(self):
        assert str(NoPhotosFound("/visit")) == "No photos found in /visit"
