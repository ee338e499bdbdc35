"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMenuBar, QToolBar


class MenuController:
    """Manages main window menu and toolbar creation.

    File actions appear in both the File menu and the toolbar.
    """

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and the toolbar and return action references."""
        menubar = QMenuBar(self.window)

        file_menu = menubar.addMenu("File")
        self.actions["load"] = file_menu.addAction("Load…")
        self.actions["load"].setShortcut(QKeySequence.Open)
        self.actions["save"] = file_menu.addAction("Save")
        self.actions["save"].setShortcut(QKeySequence.Save)
        self.actions["save_as"] = file_menu.addAction("Save as…")
        self.actions["save_as"].setShortcut(QKeySequence.SaveAs)
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")
        self.actions["open_log_directory"] = log_menu.addAction("Open Log Directory")

        self.window.setMenuBar(menubar)

        toolbar = QToolBar("toolbar", self.window)
        toolbar.setMovable(False)
        for name in ("load", "save", "save_as"):
            toolbar.addAction(self.actions[name])
        self.window.addToolBar(toolbar)

        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect actions to their handler methods.

        Args:
            handlers: Dictionary mapping action names to handler callables
        """
        for name, handler in handlers.items():
            action = self.actions.get(name)
            if action is not None:
                action.triggered.connect(handler)

    def set_document_actions_enabled(self, enabled: bool) -> None:
        """Enable Save/Save as only while a photo set is open."""
        for name in ("save", "save_as"):
            if name in self.actions:
                self.actions[name].setEnabled(enabled)
