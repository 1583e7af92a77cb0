"""Serialization of the assembled Document to a single HTML file.

WHY: The output is written once, after everything else has succeeded.
If writing fails halfway, a truncated .html must not be left behind
looking like a finished album.

HOW: The document is streamed fragment by fragment into a temporary
file in the destination directory, then moved over the target with
os.replace(), which is atomic on the same filesystem.

RULES:
- Output path: album path with its extension replaced by ".html"
- Layout: doctype + head (charset, optional style) + fragments + footer
- Fragments are written in Document order, one progress message each
- The temp file never outlives the call, whatever interrupts it
- OSError becomes DocumentWriteError
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from albummer.config import DOCUMENT_EXTENSION
from albummer.core.ir import Document
from albummer.errors import DocumentWriteError

logger = logging.getLogger(__name__)

DOCUMENT_HEADER = '<!DOCTYPE html><html><head><meta charset="UTF-8">{style}</head>\n<body>'
DOCUMENT_FOOTER = "</body>\n</html>"


def output_path_for(album_path: str | Path) -> Path:
    """Derive the output document path from the album file path."""
    return Path(album_path).with_suffix(DOCUMENT_EXTENSION)


def write_document(
    document: Document,
    path: str | Path,
    on_status: Optional[Callable[[str], None]] = None,
) -> Path:
    """Write the document to path in a single sequential pass.

    Args:
        document: The assembled Document.
        path: Destination file path.
        on_status: Optional progress callback.

    Returns:
        The destination Path.

    Raises:
        DocumentWriteError: If the destination cannot be written.
    """
    target = Path(path)
    total = len(document.fragments)
    tmp_name: Optional[str] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=target.parent,
            prefix=".{}.".format(target.name),
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(DOCUMENT_HEADER.format(style=document.style_header or ""))
            for index, fragment in enumerate(document.fragments, start=1):
                if on_status is not None:
                    on_status("  Writing HTML body     {:4d} of {:<4d}".format(index, total))
                handle.write(fragment)
            handle.write(DOCUMENT_FOOTER)
        # NamedTemporaryFile creates 0600
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except OSError as e:
        raise DocumentWriteError("Cannot write {}: {}".format(target, e)) from e
    finally:
        # No-op after a successful replace
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Wrote %s (%d fragments)", target, total)
    return target
