"""Album description grammar: line classification and prose grouping.

WHY: An album description mixes three kinds of lines with no explicit
delimiters: control directives, rows of media filenames, and free
Markdown prose. Both the encoder (which needs to know which files are
referenced) and the assembler (which needs the full structure) walk the
same lines, so the classification rule must live in exactly one place.

HOW: classify() decides a single line's kind. iter_line_groups() walks
all lines and groups consecutive prose lines into ProseBlocks using
one-line lookahead: it keeps consuming lines until the next line
classifies as a media line or input ends, and leaves that boundary line
for the next iteration. parse_folder() and apply_directive() interpret
control lines.

RULES:
- Blank (empty or whitespace-only) lines are skipped between groups
  but kept verbatim inside an open prose block
- A line starting with ":" is a control line (checked before media)
- A line whose FIRST token is a known media name is a media line, even
  if it reads like prose ("photo.jpg was taken at dawn" is a media line)
- Inside a prose block only a media line ends the block; control-looking
  lines are kept as prose text
- Unknown directives are ignored, never an error
- parse_folder() raises AlbumParseError when no ``:folder`` is declared
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Mapping, Union

from albummer.config import (
    DIRECTIVE_FOLDER,
    DIRECTIVE_MARKER,
    DIRECTIVE_SHOW_FILENAMES,
    DIRECTIVE_USE_STYLE,
)
from albummer.core.ir import AlbumLine, AlbumSettings, LineKind, ProseBlock
from albummer.errors import AlbumParseError

logger = logging.getLogger(__name__)

LineGroup = Union[AlbumLine, ProseBlock]


def load_album(path: str | Path) -> List[str]:
    """Read an album description as a list of lines.

    Raises:
        AlbumParseError: If the file cannot be read or is not UTF-8.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AlbumParseError("Cannot read album file {}: {}".format(path, e)) from e
    return text.splitlines()


def classify(line: str, lookup: Mapping[str, object], line_no: int = 0) -> AlbumLine:
    """Classify one album line as blank, control, media, or prose.

    WHY: Shared by every pass over the album so the encoder and the
    assembler can never disagree about what a line is.

    HOW: Checks, in order: no tokens → blank; leading marker → control;
    first token in lookup → media; anything else → prose.

    Args:
        line: Raw line text without trailing newline.
        lookup: Media lookup keyed by base filename (only membership is used).
        line_no: 1-based line number, carried through for progress output.

    Returns:
        The classified AlbumLine.
    """
    tokens = line.split()
    if not tokens:
        return AlbumLine(kind=LineKind.BLANK, text=line, line_no=line_no)

    if line.startswith(DIRECTIVE_MARKER):
        parts = line.split(None, 1)
        argument = parts[1].strip() if len(parts) > 1 else ""
        return AlbumLine(
            kind=LineKind.CONTROL,
            text=line,
            tokens=tokens,
            directive=parts[0],
            argument=argument,
            line_no=line_no,
        )

    if tokens[0] in lookup:
        return AlbumLine(kind=LineKind.MEDIA, text=line, tokens=tokens, line_no=line_no)

    return AlbumLine(kind=LineKind.PROSE, text=line, tokens=tokens, line_no=line_no)


def parse_folder(lines: List[str]) -> str:
    """Return the path declared by the first ``:folder`` control line.

    Raises:
        AlbumParseError: If no folder directive exists, or it has no path.
    """
    for index, line in enumerate(lines, start=1):
        album_line = classify(line, {}, line_no=index)
        if album_line.kind != LineKind.CONTROL or album_line.directive != DIRECTIVE_FOLDER:
            continue
        if not album_line.argument:
            raise AlbumParseError(
                "Folder directive on line {} has no path".format(index)
            )
        return album_line.argument
    raise AlbumParseError("No folder in album file")


def iter_line_groups(lines: List[str], lookup: Mapping[str, object]) -> Iterator[LineGroup]:
    """Yield control lines, media lines, and prose blocks in album order.

    WHY: The assembler emits one fragment per media line and one per
    prose block. Grouping prose here keeps the lookahead logic out of
    the assembler.

    HOW: Index-based walk. When a prose line opens a block, subsequent
    lines are appended until classify() reports a media line; that line
    is not consumed, so the outer loop sees it next.

    RULES:
    - Blank lines outside a block yield nothing
    - The boundary media line is re-examined, never swallowed
    """
    index = 0
    total = len(lines)
    while index < total:
        album_line = classify(lines[index], lookup, line_no=index + 1)
        index += 1

        if album_line.kind == LineKind.BLANK:
            continue
        if album_line.kind != LineKind.PROSE:
            yield album_line
            continue

        block = ProseBlock(lines=[album_line.text], line_no=album_line.line_no)
        while index < total:
            if classify(lines[index], lookup).kind == LineKind.MEDIA:
                break
            block.lines.append(lines[index])
            index += 1
        yield block


def apply_directive(album_line: AlbumLine, settings: AlbumSettings) -> None:
    """Update compiler settings from a control line.

    RULES:
    - ``:use PATH`` sets settings.style_path
    - ``:show_filenames`` sets settings.show_filenames
    - ``:folder`` is handled by parse_folder() and ignored here
    - Anything else is ignored (logged at debug level)
    """
    directive = album_line.directive
    if directive == DIRECTIVE_USE_STYLE:
        if album_line.argument:
            settings.style_path = album_line.argument
        else:
            logger.warning("Line %d: %s without a path, ignored", album_line.line_no, directive)
    elif directive == DIRECTIVE_SHOW_FILENAMES:
        settings.show_filenames = True
    elif directive == DIRECTIVE_FOLDER:
        pass
    else:
        logger.debug("Line %d: unknown directive %s ignored", album_line.line_no, directive)
