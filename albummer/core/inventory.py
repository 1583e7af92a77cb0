"""Media folder scanning and extension-based classification.

WHY: Album media lines refer to files by base name only. Before any line
can be classified, the compiler needs to know which base names exist in
the media folder and what kind of media each one is.

HOW: scan_media() walks the folder recursively with os.walk (top-down,
directory order as the OS reports it) and keeps every regular file with
a supported extension. build_lookup() turns the ordered list into a
dict keyed by base filename.

RULES:
- Kind is a pure function of the lowercased extension
- Unsupported extensions are excluded, never an error
- Scan order is preserved (not sorted)
- Unreadable subdirectories are skipped with a warning, not an abort
- A missing or non-directory root raises InventoryError
- Duplicate base names: the later entry in scan order wins the lookup
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from albummer.config import AUDIO_EXTENSIONS, IMAGE_EXTENSIONS, VIDEO_EXTENSIONS
from albummer.core.ir import MediaEntry, MediaKind
from albummer.errors import InventoryError

logger = logging.getLogger(__name__)


def classify_extension(path: str | Path) -> Optional[MediaKind]:
    """Return the MediaKind for a filename, or None if unsupported."""
    ext = Path(path).suffix.lower()
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    if ext in AUDIO_EXTENSIONS:
        return MediaKind.AUDIO
    return None


def scan_media(
    root: str | Path,
    on_warning: Optional[Callable[[str], None]] = None,
) -> List[MediaEntry]:
    """Recursively collect supported media files under root.

    WHY: The inventory is the set of names that media lines can refer
    to. Losing a subtree silently would change the output silently, so
    traversal problems are reported instead of swallowed.

    HOW: os.walk with an onerror hook that turns OSErrors into warnings.
    Each candidate file is stat()ed for its modification time; files
    that vanish or cannot be stat()ed mid-scan are warned about and
    skipped.

    RULES:
    - Only regular files are considered
    - Warnings go to the module logger and, when given, to on_warning

    Args:
        root: The media folder declared by the album's ``:folder`` line.
        on_warning: Optional callback receiving each warning message.

    Returns:
        MediaEntry objects in scan order, fragment unset.

    Raises:
        InventoryError: If root does not exist or is not a directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise InventoryError("Media folder not found: {}".format(root_path))

    def _warn(msg: str) -> None:
        logger.warning(msg)
        if on_warning is not None:
            on_warning(msg)

    def _on_walk_error(err: OSError) -> None:
        _warn("Skipping unreadable path {}: {}".format(err.filename, err.strerror))

    entries: List[MediaEntry] = []
    for dirpath, _dirnames, filenames in os.walk(root_path, onerror=_on_walk_error):
        for filename in filenames:
            kind = classify_extension(filename)
            if kind is None:
                continue
            path = Path(dirpath) / filename
            try:
                if not path.is_file():
                    continue
                mtime = path.stat().st_mtime
            except OSError as e:
                _warn("Skipping unreadable file {}: {}".format(path, e))
                continue
            entries.append(MediaEntry(path=path, kind=kind, mtime=mtime))

    logger.debug("Scanned %s: %d media files", root_path, len(entries))
    return entries


def build_lookup(entries: Iterable[MediaEntry]) -> Dict[str, MediaEntry]:
    """Map base filename → entry; later entries overwrite earlier ones."""
    lookup: Dict[str, MediaEntry] = {}
    for entry in entries:
        if entry.name in lookup:
            logger.debug(
                "Duplicate media name %s: %s replaces %s",
                entry.name, entry.path, lookup[entry.name].path,
            )
        lookup[entry.name] = entry
    return lookup


def sort_by_mtime(entries: Iterable[MediaEntry], descending: bool = False) -> List[MediaEntry]:
    """Order entries by modification time, oldest first unless descending."""
    return sorted(entries, key=lambda e: e.mtime, reverse=descending)
