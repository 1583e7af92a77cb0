"""Starter album generation from a media folder (``make-template``).

WHY: Writing an album description from scratch means typing every
filename. The template generator lists the folder in time order and
lays the files out as a ready-to-edit album: the user then only adds
prose and rearranges rows.

HOW: Scans the folder with the inventory, sorts by modification time,
and emits images num_cols per line. Video and audio clips always get
a line of their own, separated by blank lines, because a row of players
side by side is unusable.

RULES:
- Header: ``:folder``, ``:show_filenames``, ``:use <css>``, then a
  Markdown title with the folder's name
- Images are separated by three spaces within a line
- Order "asc" is oldest first; any other value is newest first
- num_cols below 1 is treated as the default
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from albummer.config import DEFAULT_CSS, DEFAULT_NUM_COLS, DEFAULT_ORDER
from albummer.core.inventory import scan_media, sort_by_mtime
from albummer.core.ir import MediaEntry, MediaKind

logger = logging.getLogger(__name__)

_IMAGE_SEPARATOR = "   "


def layout_media(entries: List[MediaEntry], num_cols: int) -> str:
    """Lay out media names as album lines.

    HOW: Accumulates image names on the current line until num_cols is
    reached. A clip flushes the current line and is written on its own,
    padded by blank lines.
    """
    body: List[str] = []
    line_len = 0

    for entry in entries:
        if entry.kind in (MediaKind.VIDEO, MediaKind.AUDIO):
            if line_len > 0:
                body.append("\n")
            body.append("\n{}\n\n".format(entry.name))
            line_len = 0
            continue

        if line_len > 0:
            body.append(_IMAGE_SEPARATOR)
        body.append(entry.name)
        line_len += 1
        if line_len == num_cols:
            body.append("\n")
            line_len = 0

    return "".join(body)


def build_template(
    folder: str,
    entries: List[MediaEntry],
    num_cols: int = DEFAULT_NUM_COLS,
    order: str = DEFAULT_ORDER,
    css: str = DEFAULT_CSS,
) -> str:
    """Return the text of a starter album description."""
    if num_cols < 1:
        num_cols = DEFAULT_NUM_COLS
    ordered = sort_by_mtime(entries, descending=order.lower() != "asc")
    title = Path(folder).resolve().name
    return ":folder {}\n:show_filenames\n:use {}\n\n# {}\n\n{}\n".format(
        folder, css, title, layout_media(ordered, num_cols),
    )


def make_template(
    folder: str,
    outfile: str | Path,
    num_cols: int = DEFAULT_NUM_COLS,
    order: str = DEFAULT_ORDER,
    css: Optional[str] = None,
) -> Path:
    """Scan folder and write a starter album description to outfile.

    Raises:
        InventoryError: If folder is not a directory.
        OSError: If outfile cannot be written.
    """
    entries = scan_media(folder)
    text = build_template(folder, entries, num_cols=num_cols, order=order, css=css or DEFAULT_CSS)
    out_path = Path(outfile)
    out_path.write_text(text, encoding="utf-8")
    logger.debug("Template for %s: %d media files", folder, len(entries))
    return out_path
