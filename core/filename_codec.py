"""Mapping between photo identifiers and their canonical file names.

A photo's identity is the number embedded in its file name, e.g.
``PICT0042.jpg`` is photo 42. These functions are the only place that
knows the naming scheme.
"""

from __future__ import annotations

PHOTO_FILE_NAME_PREFIX = "PICT"
PHOTO_FILE_NAME_SUFFIX = ".jpg"
_ID_START = len(PHOTO_FILE_NAME_PREFIX)
_MIN_NAME_LENGTH = _ID_START + 4 + len(PHOTO_FILE_NAME_SUFFIX)


def encode_filename(photo_id: int) -> str:
    """Return the canonical file name for `photo_id` (``PICT0007.jpg``)."""
    return f"{PHOTO_FILE_NAME_PREFIX}{photo_id:04d}{PHOTO_FILE_NAME_SUFFIX}"


def decode_filename(name: str) -> int | None:
    """Return the photo identifier encoded in `name`, or None.

    Prefix and suffix are matched case-insensitively. Everything between them
    must be decimal digits, at least four of them, so ids of 10000 and above
    decode back to themselves.
    """
    if len(name) < _MIN_NAME_LENGTH:
        return None
    if not name.upper().startswith(PHOTO_FILE_NAME_PREFIX):
        return None
    if not name.lower().endswith(PHOTO_FILE_NAME_SUFFIX):
        return None

    digits = name[_ID_START : len(name) - len(PHOTO_FILE_NAME_SUFFIX)]
    # str.isdigit() also accepts non-ASCII digits like "²"
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits.lstrip("0") or "0")
