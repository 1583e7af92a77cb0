"""Configuration constants, media extension sets, and .env loading.

WHY: Centralizes the album grammar vocabulary (directive marker and
names), the supported media extensions, and the template defaults so
they are easy to find and override. Keeping them as plain data means
adding a new image extension is a one-line change.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level sets and strings. Template defaults can be overridden
via environment variables.

RULES:
- Extension sets are lowercase and include the leading dot
- A file's media kind is decided by these sets alone
- DOCUMENT_EXTENSION replaces the album file's extension on output
- All template defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the working directory (where the album is compiled from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported media file extensions
# ---------------------------------------------------------------------------

IMAGE_EXTENSIONS: set[str] = {".png", ".jpg", ".jpeg"}
VIDEO_EXTENSIONS: set[str] = {".mp4"}
AUDIO_EXTENSIONS: set[str] = {".wav"}

# ---------------------------------------------------------------------------
# Album grammar
# ---------------------------------------------------------------------------

DIRECTIVE_MARKER = ":"
"""First character of every control line."""

DIRECTIVE_FOLDER = ":folder"
DIRECTIVE_USE_STYLE = ":use"
DIRECTIVE_SHOW_FILENAMES = ":show_filenames"

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

DOCUMENT_EXTENSION = ".html"
CELL_SPACER = '<td width="10px"></td>'

# ---------------------------------------------------------------------------
# Template generator defaults
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_NUM_COLS = int(os.getenv("ALBUMMER_NUM_COLS", "3"))
DEFAULT_ORDER = os.getenv("ALBUMMER_ORDER", "asc").lower()
DEFAULT_CSS = os.getenv("ALBUMMER_DEFAULT_CSS", str(PACKAGE_DIR / "default.css"))
