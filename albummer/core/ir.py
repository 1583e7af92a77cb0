"""Intermediate representation dataclasses for album compilation.

WHY: The inventory, grammar, encoder, and assembler each look at the
same media files and album lines from a different angle. A small set of
typed dataclasses shared by all stages keeps them decoupled: the
encoder never needs to know about prose, and the assembler never reads
a file from disk except the stylesheet.

HOW: Seven types form the model:
  MediaKind    : image / video / audio, decided from the file extension
  MediaEntry   : one media file on disk, plus its encoded fragment
  LineKind     : blank / control / media / prose
  AlbumLine    : one classified line of the album description
  ProseBlock   : contiguous prose lines rendered as one Markdown block
  AlbumSettings: compiler-wide flags set by control directives
  Document     : the ordered output fragments plus optional style header

RULES:
- MediaEntry.kind never changes after discovery
- MediaEntry.fragment is written once, by the encoder merge step
- Lookups are keyed by MediaEntry.name (base filename)
- Document.fragments has one item per media line or prose block
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional


class MediaKind(str, enum.Enum):
    """The three kinds of embeddable media.

    HOW: Inherits from str so values print cleanly in logs.
    """

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class MediaEntry:
    """A media file discovered on disk.

    WHY: The encoder needs the name and kind to produce a fragment; the
    template generator needs the modification time to order entries.

    HOW: Created by the inventory scan with fragment=None. The encoder
    produces fragments out-of-band and with_fragment() returns a copy
    carrying it, so entries are never mutated while tasks are running.

    RULES:
    - path: full path as found during the scan
    - kind: MediaKind from the lowercased extension
    - mtime: modification time in epoch seconds
    - fragment: None until encoded; "" when the file could not be read
    """

    path: Path
    kind: MediaKind
    mtime: float
    fragment: Optional[str] = None

    @property
    def name(self) -> str:
        """Base filename, the key used by album media lines."""
        return self.path.name

    def with_fragment(self, fragment: str) -> MediaEntry:
        return replace(self, fragment=fragment)


class LineKind(str, enum.Enum):
    """Classification of a single album line."""

    BLANK = "blank"
    CONTROL = "control"
    MEDIA = "media"
    PROSE = "prose"


@dataclass
class AlbumLine:
    """One classified line of the album description.

    RULES:
    - text: the raw line, without trailing newline
    - tokens: whitespace-separated fields of the line
    - directive: first token of a control line (e.g. ":folder"), else None
    - argument: rest of a control line after the directive, stripped
    - line_no: 1-based position in the album description
    """

    kind: LineKind
    text: str
    tokens: List[str] = field(default_factory=list)
    directive: Optional[str] = None
    argument: str = ""
    line_no: int = 0


@dataclass
class ProseBlock:
    """Contiguous prose lines, rendered together as one Markdown block.

    RULES:
    - lines keeps blank lines found inside the block verbatim
    - text joins the lines with newlines
    - line_no: 1-based position of the first line
    """

    lines: List[str] = field(default_factory=list)
    line_no: int = 0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class AlbumSettings:
    """Compiler-wide settings changed by control directives.

    RULES:
    - style_path: set by ``:use``, last one wins
    - show_filenames: set by ``:show_filenames``, never reset
    """

    style_path: Optional[str] = None
    show_filenames: bool = False


@dataclass
class Document:
    """The assembled output document.

    RULES:
    - fragments: rendered markup in album-line order
    - style_header: ``<style>...</style>`` or None when no stylesheet was read
    """

    fragments: List[str] = field(default_factory=list)
    style_header: Optional[str] = None
