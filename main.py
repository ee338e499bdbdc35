from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.main_window import MainWindow
from core.errors import PhotoSetError
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.photo_set_repository import PhotoSetOptions, PhotoSetRepository
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _load_settings() -> JsonSettings:
    settings_path = BASE_DIR / "settings.json"
    if settings_path.exists():
        return JsonSettings(settings_path)
    return JsonSettings()


def main() -> int:
    settings = _load_settings()
    log_dir = init_logging(settings.get("logging.dir"))

    app = QApplication(sys.argv)

    options = PhotoSetOptions.from_settings(settings)
    logger.info(
        "Photo set options: require_photos={} persist_mole_metrics={} preview_width={}",
        options.require_photos,
        options.persist_mole_metrics,
        options.preview_width,
    )
    repo = PhotoSetRepository(decoder=ImageService(), options=options)
    vm = MainVM(repo)

    # Optional directory argument opens a photo set at start-up
    if len(sys.argv) > 1:
        try:
            vm.load(sys.argv[1])
        except PhotoSetError as ex:
            logger.error("Initial load failed: {}", ex)

    win = MainWindow(vm=vm, log_dir=str(log_dir))
    win.show_status("Ready")
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
