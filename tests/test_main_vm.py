"""Unit tests for app.viewmodels.main_vm."""

from __future__ import annotations

from datetime import datetime

import pytest

from app.viewmodels.main_vm import MainVM
from core.errors import CannotWriteFile, ExpectedDirectory
from core.models import MOLE_SIZE_MAX, MoleMetrics
from infrastructure.photo_set_repository import INFO_FILE_NAME


class TestMainVM:
    """Tests for MainVM orchestration."""

    def test_initial_state(self, repo):
        vm = MainVM(repo)
        assert vm.photo_set is None
        assert not vm.has_photos
        assert vm.photos == []
        assert vm.current_photo is None

    def test_load_and_select(self, photo_dir, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)

        assert vm.has_photos
        assert [p.file_name for p in vm.photos] == ["PICT0000.jpg", "PICT0003.jpg"]
        assert vm.current_photo.id == 0
        assert vm.select(1)
        assert vm.current_photo.id == 3
        assert not vm.select(5)
        assert vm.current_photo.id == 3

    def test_failed_load_keeps_previous_set(self, photo_dir, tmp_path, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        previous = vm.photo_set

        with pytest.raises(ExpectedDirectory):
            vm.load(tmp_path / "nope")

        assert vm.photo_set is previous

    def test_edits_are_saved(self, photo_dir, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        vm.update_visit_info(name="Ewa", notes="itchy")
        vm.set_photo_notes(3, "back")
        stored = vm.set_mole_metrics(3, MoleMetrics(0.5, 0.5, 9.0))

        vm.save()
        reloaded = repo.load(photo_dir)

        assert stored.diameter == MOLE_SIZE_MAX
        assert reloaded.info.name == "Ewa"
        assert reloaded.info.notes == "itchy"
        assert reloaded.get_photo(3).info.notes == "back"
        assert reloaded.get_photo(3).info.mole_metrics == MoleMetrics(0.5, 0.5, MOLE_SIZE_MAX)

    def test_update_visit_time(self, photo_dir, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        when = datetime(2021, 3, 3, 12, 0)
        vm.update_visit_info(time=when)
        assert vm.photo_set.info.time == when

    def test_unknown_photo(self, photo_dir, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        with pytest.raises(KeyError):
            vm.set_photo_notes(42, "nope")

    def test_save_without_set(self, repo):
        with pytest.raises(RuntimeError):
            MainVM(repo).save()

    def test_save_as_writes_new_directory(self, photo_dir, tmp_path, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        target = tmp_path / "copy"
        target.mkdir()

        vm.save_as(target)

        assert vm.photo_set.path == target
        assert (target / "PICT0000.jpg").exists()
        assert (target / "PICT0003.jpg").exists()
        assert (target / INFO_FILE_NAME).exists()
        # old directory left in place
        assert (photo_dir / "PICT0000.jpg").exists()

    def test_save_as_failure_rolls_back_path(self, photo_dir, tmp_path, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)

        with pytest.raises(CannotWriteFile):
            vm.save_as(tmp_path / "missing" / "dir")

        assert vm.photo_set.path == photo_dir


class TestPhotoVM:
    """Tests for PhotoVM display properties."""

    def test_properties(self, photo_dir, repo):
        vm = MainVM(repo)
        vm.load(photo_dir)
        vm.set_mole_metrics(0, MoleMetrics(diameter=1.5))
        photo_vm = vm.photos[0]

        assert photo_vm.photo_id == 0
        assert photo_vm.file_name == "PICT0000.jpg"
        assert photo_vm.mole_size == "1.50 mm"
        assert photo_vm.notes == ""
        assert len(photo_vm.display_time) == len("2024-01-01 00:00")
        assert vm.photos[1].mole_size == ""
