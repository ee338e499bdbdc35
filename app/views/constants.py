"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

WINDOW_TITLE: str = "DScope"

# Data roles
PHOTO_ID_ROLE: int = Qt.UserRole  # photo id on preview list items

# Layout defaults
PHOTO_LIST_MIN_WIDTH_PX: int = 170
PHOTO_LIST_SPACING_PX: int = 4
INITIAL_WINDOW_SIZE: tuple[int, int] = (1200, 800)
STATUS_TIMEOUT_MS: int = 3000

# Mole metric editors (mm)
METRIC_DECIMALS: int = 2
METRIC_STEP_MM: float = 0.05
