"""The ``generate`` pipeline: album description in, HTML document out.

WHY: The CLI, tests, and any embedding script need one call that runs
every stage in the right order with the right failure semantics.

HOW: load lines → parse_folder → scan inventory → encode referenced
media concurrently (asyncio.run) → merge fragments → assemble → write.

RULES:
- Fatal errors (no folder, unreadable album, missing media folder,
  unwritable output) raise AlbummerError before the output file exists
- A relative ``:folder`` is taken from the working directory first,
  then from the album file's directory
- Encoding completes fully before assembly starts
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from albummer.core.assembler import assemble
from albummer.core.encoder import encode_referenced, merge_fragments
from albummer.core.grammar import load_album, parse_folder
from albummer.core.inventory import build_lookup, scan_media
from albummer.writer import output_path_for, write_document

logger = logging.getLogger(__name__)


def resolve_media_folder(folder: str, album_dir: Path) -> Path:
    """Resolve the ``:folder`` path against the CWD, then the album's directory."""
    path = Path(folder).expanduser()
    if path.is_absolute() or path.is_dir():
        return path
    candidate = album_dir / path
    if candidate.is_dir():
        return candidate
    return path


def compile_album(
    album_path: str | Path,
    output_path: Optional[str | Path] = None,
    on_status: Optional[Callable[[str], None]] = None,
    on_warning: Optional[Callable[[str], None]] = None,
) -> Path:
    """Compile an album description into a single HTML document.

    Args:
        album_path: Path to the .alb file.
        output_path: Destination; defaults to the album path with ".html".
        on_status: Optional progress callback.
        on_warning: Optional callback for degraded conditions.

    Returns:
        The path of the written document.

    Raises:
        AlbumParseError: Unreadable album or no ``:folder`` directive.
        InventoryError: Media folder missing.
        DocumentWriteError: Output cannot be written.
    """
    album = Path(album_path)
    lines = load_album(album)
    folder = resolve_media_folder(parse_folder(lines), album.parent)

    entries = scan_media(folder, on_warning=on_warning)
    lookup = build_lookup(entries)
    logger.info("Album %s: %d media files in %s", album, len(lookup), folder)

    fragments = asyncio.run(
        encode_referenced(
            lines, lookup, folder, on_status=on_status, on_warning=on_warning
        )
    )
    lookup = merge_fragments(lookup, fragments)

    document = assemble(
        lines,
        lookup,
        base_dir=album.parent,
        on_status=on_status,
        on_warning=on_warning,
    )

    target = Path(output_path) if output_path else output_path_for(album)
    return write_document(document, target, on_status=on_status)
