"""Main window: photo list, selected photo and metadata editors."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PySide6.QtCore import QSize, Qt, QUrl
from PySide6.QtGui import QDesktopServices, QIcon, QImage, QPixmap
from PySide6.QtWidgets import (
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSplitter,
    QWidget,
)
from loguru import logger

from app.views.components.menu_controller import MenuController
from app.views.constants import (
    INITIAL_WINDOW_SIZE,
    METRIC_DECIMALS,
    METRIC_STEP_MM,
    PHOTO_ID_ROLE,
    PHOTO_LIST_MIN_WIDTH_PX,
    PHOTO_LIST_SPACING_PX,
    STATUS_TIMEOUT_MS,
    WINDOW_TITLE,
)
from core.errors import PhotoSetError
from core.models import MOLE_CENTER_DISTANCE_MAX, MOLE_SIZE_MAX, MoleMetrics
from core.services.interfaces import DecodedImage
from infrastructure.logging import find_latest_log_file
from infrastructure.utils import format_display_time


def decoded_to_qimage(image: DecodedImage) -> QImage:
    """Convert a `DecodedImage` to `QImage` and detach from the source buffer."""
    qimg = QImage(image.pixels, image.width, image.height, image.width * 4, QImage.Format_RGBA8888)
    return qimg.copy()


class MainWindow(QMainWindow):
    """Viewer/editor for one photo set at a time."""

    def __init__(self, vm: Any, log_dir: str | None = None) -> None:
        """Create the window.

        Args:
            vm: `MainVM` instance owning the photo set
            log_dir: Directory shown by the Log menu
        """
        super().__init__()
        self._vm = vm
        self._log_dir = log_dir
        self._populating = False

        self.menu_controller = MenuController(self)
        self._setup_ui()
        self._connect_signals()
        self.refresh()

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        self.photo_list = QListWidget()
        self.photo_list.setMinimumWidth(PHOTO_LIST_MIN_WIDTH_PX)
        self.photo_list.setSpacing(PHOTO_LIST_SPACING_PX)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setMinimumSize(200, 200)

        editor = QWidget()
        form = QFormLayout(editor)
        self.name_edit = QLineEdit()
        self.surname_edit = QLineEdit()
        self.visit_time_label = QLabel()
        self.visit_notes_edit = QPlainTextEdit()
        self.photo_time_label = QLabel()
        self.photo_notes_edit = QPlainTextEdit()
        self.center_x_spin = self._metric_spin(-MOLE_CENTER_DISTANCE_MAX, MOLE_CENTER_DISTANCE_MAX)
        self.center_y_spin = self._metric_spin(-MOLE_CENTER_DISTANCE_MAX, MOLE_CENTER_DISTANCE_MAX)
        self.diameter_spin = self._metric_spin(0.0, MOLE_SIZE_MAX)
        form.addRow("Name", self.name_edit)
        form.addRow("Surname", self.surname_edit)
        form.addRow("Visit time", self.visit_time_label)
        form.addRow("Visit notes", self.visit_notes_edit)
        form.addRow("Photo time", self.photo_time_label)
        form.addRow("Photo notes", self.photo_notes_edit)
        form.addRow("Center X (mm)", self.center_x_spin)
        form.addRow("Center Y (mm)", self.center_y_spin)
        form.addRow("Diameter (mm)", self.diameter_spin)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.photo_list)
        splitter.addWidget(self.image_label)
        splitter.addWidget(editor)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.menu_controller.setup_menus()
        self.resize(*INITIAL_WINDOW_SIZE)

    @staticmethod
    def _metric_spin(low: float, high: float) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(low, high)
        spin.setDecimals(METRIC_DECIMALS)
        spin.setSingleStep(METRIC_STEP_MM)
        return spin

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {
                "load": self.on_load,
                "save": self.on_save,
                "save_as": self.on_save_as,
                "exit": self.close,
                "open_latest_log": self.on_open_latest_log,
                "open_log_directory": self.on_open_log_directory,
            }
        )
        self.photo_list.currentRowChanged.connect(self._on_photo_selected)
        self.name_edit.editingFinished.connect(self._on_visit_edited)
        self.surname_edit.editingFinished.connect(self._on_visit_edited)
        self.visit_notes_edit.textChanged.connect(self._on_visit_edited)
        self.photo_notes_edit.textChanged.connect(self._on_photo_notes_edited)
        for spin in (self.center_x_spin, self.center_y_spin, self.diameter_spin):
            spin.valueChanged.connect(self._on_metrics_edited)

    # Actions

    def on_load(self) -> None:
        path = QFileDialog.getExistingDirectory(self, "Load photo set")
        if not path:
            return
        try:
            self._vm.load(path)
        except PhotoSetError as ex:
            self._show_error("Load failed", ex)
            return
        self.refresh()
        self.show_status(f"Loaded {len(self._vm.photos)} photo(s) from {path}")

    def on_save(self) -> None:
        try:
            self._vm.save()
        except PhotoSetError as ex:
            self._show_error("Save failed", ex)
            return
        self.show_status("Saved")

    def on_save_as(self) -> None:
        path = QFileDialog.getExistingDirectory(self, "Save photo set as")
        if not path:
            return
        try:
            self._vm.save_as(path)
        except PhotoSetError as ex:
            self._show_error("Save as failed", ex)
            return
        self._refresh_title()
        self.show_status(f"Saved to {path}")

    def on_open_latest_log(self) -> None:
        log_file = find_latest_log_file(self._log_dir)
        if log_file is None:
            self.show_status("No log file found")
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(log_file)))

    def on_open_log_directory(self) -> None:
        if self._log_dir:
            QDesktopServices.openUrl(QUrl.fromLocalFile(self._log_dir))

    def show_status(self, message: str, timeout: int = STATUS_TIMEOUT_MS) -> None:
        self.statusBar().showMessage(message, timeout)

    def _show_error(self, title: str, ex: Exception) -> None:
        logger.error("{}: {}", title, ex)
        QMessageBox.critical(self, title, str(ex))

    # Refresh

    def refresh(self) -> None:
        """Repopulate every widget from the view model."""
        self._populating = True
        try:
            self.photo_list.clear()
            for photo_vm in self._vm.photos:
                icon = QIcon(QPixmap.fromImage(decoded_to_qimage(photo_vm.photo.preview)))
                item = QListWidgetItem(icon, f"{photo_vm.file_name}\n{photo_vm.display_time}")
                item.setData(PHOTO_ID_ROLE, photo_vm.photo_id)
                self.photo_list.addItem(item)
            if self._vm.photos:
                preview = self._vm.photos[0].photo.preview
                self.photo_list.setIconSize(QSize(preview.width, preview.height))

            info = self._vm.photo_set.info if self._vm.photo_set else None
            self.name_edit.setText(info.name if info else "")
            self.surname_edit.setText(info.surname if info else "")
            self.visit_notes_edit.setPlainText(info.notes if info else "")
            self.visit_time_label.setText(format_display_time(info.time) if info else "")
        finally:
            self._populating = False

        self.menu_controller.set_document_actions_enabled(self._vm.photo_set is not None)
        self._refresh_title()
        if self._vm.has_photos:
            self.photo_list.setCurrentRow(self._vm.current_index)
        self._show_current_photo()

    def _refresh_title(self) -> None:
        if self._vm.photo_set is None:
            self.setWindowTitle(WINDOW_TITLE)
        else:
            self.setWindowTitle(f"{WINDOW_TITLE} - {Path(self._vm.photo_set.path)}")

    def _show_current_photo(self) -> None:
        photo = self._vm.current_photo
        self._populating = True
        try:
            if photo is None:
                self.image_label.clear()
                self.photo_time_label.clear()
                self.photo_notes_edit.setPlainText("")
                for spin in (self.center_x_spin, self.center_y_spin, self.diameter_spin):
                    spin.setValue(0.0)
                return
            pixmap = QPixmap()
            if pixmap.loadFromData(photo.bytes):
                scaled = pixmap.scaled(
                    self.image_label.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation
                )
                self.image_label.setPixmap(scaled)
            else:
                self.image_label.setText("Cannot display photo")
            self.photo_time_label.setText(format_display_time(photo.info.time))
            self.photo_notes_edit.setPlainText(photo.info.notes)
            metrics = photo.info.mole_metrics
            self.center_x_spin.setValue(metrics.center_x)
            self.center_y_spin.setValue(metrics.center_y)
            self.diameter_spin.setValue(metrics.diameter)
        finally:
            self._populating = False

    # Editors

    def _on_photo_selected(self, row: int) -> None:
        if self._populating or not self._vm.select(row):
            return
        self._show_current_photo()

    def _on_visit_edited(self) -> None:
        if self._populating or self._vm.photo_set is None:
            return
        self._vm.update_visit_info(
            name=self.name_edit.text(),
            surname=self.surname_edit.text(),
            notes=self.visit_notes_edit.toPlainText(),
        )

    def _on_photo_notes_edited(self) -> None:
        photo = self._vm.current_photo
        if self._populating or photo is None:
            return
        self._vm.set_photo_notes(photo.id, self.photo_notes_edit.toPlainText())

    def _on_metrics_edited(self) -> None:
        photo = self._vm.current_photo
        if self._populating or photo is None:
            return
        self._vm.set_mole_metrics(
            photo.id,
            MoleMetrics(
                center_x=self.center_x_spin.value(),
                center_y=self.center_y_spin.value(),
                diameter=self.diameter_spin.value(),
            ),
        )
