"""Document assembly: the ordered second pass over the album lines.

WHY: Encoding finishes in whatever order the disk and the scheduler
decide, but the document must follow the album exactly. The assembler
runs only after every fragment exists and walks the album again from
the top, so output order is a function of the album text alone.

HOW: iter_line_groups() yields control lines, media lines, and prose
blocks in album order. Control lines update AlbumSettings (and ``:use``
loads the stylesheet); each media line becomes one table row; each
prose block is rendered and sanitized by the prose collaborator.

RULES:
- One fragment per media line and one per prose block, in album order
- Row cell width is floor(100 / N) percent, N = number of tokens
  including tokens that do not resolve
- Unresolvable tokens keep their opening cell but get no content
- A media entry without a fragment renders as an empty cell
- With ``:show_filenames`` on, each resolved cell gets a caption
- Unreadable stylesheet → no style header and a warning, never an abort
"""

from __future__ import annotations

import html
import logging
from collections.abc import Callable
from pathlib import Path
from typing import List, Mapping, Optional

from albummer.config import CELL_SPACER, DIRECTIVE_USE_STYLE
from albummer.core.grammar import apply_directive, iter_line_groups
from albummer.core.ir import AlbumSettings, Document, LineKind, MediaEntry, ProseBlock
from albummer.prose import render_prose

logger = logging.getLogger(__name__)

ProseRenderer = Callable[[str], str]


def load_style_header(
    css_path: str | Path,
    on_warning: Optional[Callable[[str], None]] = None,
) -> Optional[str]:
    """Read a stylesheet and wrap it in a <style> element.

    Returns None (and warns) when the file cannot be read.
    """
    try:
        css_text = Path(css_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = "Cannot read stylesheet {}: {}".format(css_path, e)
        logger.warning(msg)
        if on_warning is not None:
            on_warning(msg)
        return None
    return "<style>{}</style>".format(css_text)


def _caption(name: str) -> str:
    return '<div class="caption">{}</div>'.format(html.escape(name))


def build_media_row(
    tokens: List[str],
    lookup: Mapping[str, MediaEntry],
    show_filenames: bool = False,
) -> str:
    """Render a media line as a centered single-row table.

    WHY: Several photos on one album line are meant to sit side by side
    at equal width.

    HOW: Opens one <td> per token with width floor(100 / len(tokens))%.
    Resolved tokens get their fragment (and optional caption) followed
    by a 10px spacer cell.
    """
    percent = 100 // len(tokens)
    parts = ['<div align="center"><table><tr>']
    for token in tokens:
        parts.append('<td style="width:{}%;">'.format(percent))
        entry = lookup.get(token)
        if entry is None:
            continue
        parts.append(entry.fragment or "")
        if show_filenames:
            parts.append(_caption(entry.name))
        parts.append("</td>")
        parts.append(CELL_SPACER)
    parts.append("</tr></table></div>")
    return "".join(parts)


def assemble(
    lines: List[str],
    lookup: Mapping[str, MediaEntry],
    base_dir: Optional[Path] = None,
    render: ProseRenderer = render_prose,
    on_status: Optional[Callable[[str], None]] = None,
    on_warning: Optional[Callable[[str], None]] = None,
) -> Document:
    """Build the Document from album lines and the encoded media lookup.

    WHY: This is the only place where output order is decided.

    HOW: Walks iter_line_groups() once. Control lines are applied to a
    fresh AlbumSettings; ``:use`` also loads the stylesheet (the last
    readable one wins). Media lines become rows; prose blocks go through
    the render callable.

    RULES:
    - Must be called after encoding has fully finished
    - Relative stylesheet paths are tried as given, then relative to base_dir

    Args:
        lines: The full album description.
        lookup: Media lookup whose referenced entries carry fragments.
        base_dir: Directory of the album file, for relative stylesheet paths.
        render: Prose collaborator, Markdown text → safe HTML.
        on_status: Optional progress callback.
        on_warning: Optional callback for degraded conditions.

    Returns:
        The assembled Document.
    """
    settings = AlbumSettings()
    document = Document()
    total = len(lines)

    for group in iter_line_groups(lines, lookup):
        if on_status is not None:
            on_status("  Generating for line   {:4d} of {:<4d}".format(group.line_no, total))

        if isinstance(group, ProseBlock):
            document.fragments.append(render(group.text))
            continue

        if group.kind == LineKind.CONTROL:
            apply_directive(group, settings)
            if group.directive == DIRECTIVE_USE_STYLE and group.argument:
                header = load_style_header(
                    _resolve_style_path(group.argument, base_dir), on_warning,
                )
                if header is not None:
                    document.style_header = header
            continue

        document.fragments.append(
            build_media_row(group.tokens, lookup, settings.show_filenames)
        )

    return document


def _resolve_style_path(css_path: str, base_dir: Optional[Path]) -> Path:
    path = Path(css_path).expanduser()
    if path.is_absolute() or base_dir is None or path.exists():
        return path
    return base_dir / path
