"""Concurrent media encoding into inline data-URI fragments.

WHY: The output document must be self-contained, so every referenced
image, clip, and sound file is inlined as base64. Reading and encoding
dozens of multi-megabyte files one after another is the slowest part of
a run; doing them concurrently keeps large albums fast.

HOW: referenced_names() finds the distinct media names used by any
media line. encode_referenced() launches one asyncio task per name
(file reads run in worker threads via asyncio.to_thread), then waits on
asyncio.as_completed(), counting completions and reporting progress.
Each task returns a (name, fragment) pair; merge_fragments() builds a
new lookup whose entries carry their fragment. No entry is mutated
while tasks are in flight.

RULES:
- Only referenced entries are read; the rest of the inventory is untouched
- Bytes are read from the media folder joined with the entry name
- One task per referenced name, no upper bound on tasks in flight
- An unreadable file yields "" and a warning, never an exception
- Image subtype is "png" for .png and "jpeg" for everything else
- Video is always "video/mp4", audio always "audio/x-wav"
- Completion order never matters; callers read fragments after the join
- No timeout and no cancellation: a stuck read blocks the run
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from albummer.core.grammar import classify
from albummer.core.ir import LineKind, MediaEntry, MediaKind

logger = logging.getLogger(__name__)

_IMAGE_TEMPLATE = '<div class="imgdiv"><img class="center-fit" src="data:image/{subtype};base64,{data}"></img></div>'
_VIDEO_TEMPLATE = '<div class="viddiv"><video class="center-fit" controls src="data:video/mp4;base64,{data}"></video></div>'
_AUDIO_TEMPLATE = '<div align="center"><audio controls src="data:audio/x-wav;base64,{data}"></audio></div>'


def referenced_names(lines: List[str], lookup: Mapping[str, MediaEntry]) -> List[str]:
    """Return distinct media names used by media lines, in first-use order.

    Tokens that do not resolve in the lookup are skipped.
    """
    names: List[str] = []
    seen: set = set()
    for line in lines:
        album_line = classify(line, lookup)
        if album_line.kind != LineKind.MEDIA:
            continue
        for token in album_line.tokens:
            if token in lookup and token not in seen:
                seen.add(token)
                names.append(token)
    return names


def encode_bytes(name: str, kind: MediaKind, data: bytes) -> str:
    """Wrap raw file bytes in the inline fragment for their media kind."""
    encoded = base64.b64encode(data).decode("ascii")
    if kind == MediaKind.IMAGE:
        subtype = "png" if name.lower().endswith(".png") else "jpeg"
        return _IMAGE_TEMPLATE.format(subtype=subtype, data=encoded)
    if kind == MediaKind.VIDEO:
        return _VIDEO_TEMPLATE.format(data=encoded)
    return _AUDIO_TEMPLATE.format(data=encoded)


def encode_entry(
    entry: MediaEntry,
    folder: str | Path,
    on_warning: Optional[Callable[[str], None]] = None,
) -> str:
    """Read one media file and return its fragment, or "" if unreadable.

    WHY: A single missing photo should leave a blank cell, not abort an
    album of two hundred.

    RULES:
    - Bytes come from folder/name, not from the path found by the scan;
      a name that only exists in a subfolder reads as missing
    - Runs in a worker thread; must not touch shared state
    - OSError → "" plus a warning
    """
    path = Path(folder) / entry.name
    try:
        data = path.read_bytes()
    except OSError as e:
        msg = "Cannot read media file {}: {}".format(path, e)
        logger.warning(msg)
        if on_warning is not None:
            on_warning(msg)
        return ""
    return encode_bytes(entry.name, entry.kind, data)


async def _encode_task(
    entry: MediaEntry,
    folder: str | Path,
    on_warning: Optional[Callable[[str], None]],
) -> Tuple[str, str]:
    fragment = await asyncio.to_thread(encode_entry, entry, folder, on_warning)
    return entry.name, fragment


async def encode_referenced(
    lines: List[str],
    lookup: Mapping[str, MediaEntry],
    folder: str | Path,
    on_status: Optional[Callable[[str], None]] = None,
    on_warning: Optional[Callable[[str], None]] = None,
) -> Dict[str, str]:
    """Encode every referenced media entry concurrently.

    WHY: Fan-out/fan-in. The assembler must not run until every
    fragment exists, but the fragments themselves are independent.

    HOW: Creates all tasks up front, then drains asyncio.as_completed()
    and counts completions against the number launched, reporting
    "Loading media N of M" after each one.

    Args:
        lines: The full album description.
        lookup: Media lookup keyed by base filename.
        folder: The resolved media folder; bytes are read from folder/name.
        on_status: Optional progress callback.
        on_warning: Optional callback for unreadable files.

    Returns:
        Dict of media name → fragment for every referenced entry.
    """
    names = referenced_names(lines, lookup)
    total = len(names)
    if not total:
        return {}

    tasks = [
        asyncio.create_task(_encode_task(lookup[name], folder, on_warning))
        for name in names
    ]

    fragments: Dict[str, str] = {}
    for completed, future in enumerate(asyncio.as_completed(tasks), start=1):
        name, fragment = await future
        fragments[name] = fragment
        if on_status is not None:
            on_status("  Loading media {:4d} of {:<4d}".format(completed, total))

    logger.debug("Encoded %d media files", total)
    return fragments


def merge_fragments(
    lookup: Mapping[str, MediaEntry],
    fragments: Mapping[str, str],
) -> Dict[str, MediaEntry]:
    """Return a new lookup with encoded entries carrying their fragment."""
    merged: Dict[str, MediaEntry] = {}
    for name, entry in lookup.items():
        if name in fragments:
            merged[name] = entry.with_fragment(fragments[name])
        else:
            merged[name] = entry
    return merged
