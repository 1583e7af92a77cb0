"""Shared test fixtures for the albummer test suite.

WHY: Most test modules need the same small media folder (a couple of
PNGs, a JPEG, a clip, a voice memo, and a file that is not media) and
the lookup built from it. Centralizing the fixtures keeps every test
working on the same inventory.

HOW: The media_dir fixture writes tiny byte payloads into tmp_path.
The payloads are not real images; the compiler never decodes them, it
only base64-encodes the bytes.

RULES:
- All file I/O happens under tmp_path.
- Payload bytes are module constants so tests can compute expected base64.
"""

from pathlib import Path

import pytest

from albummer.core.inventory import build_lookup, scan_media

PNG_A = b"\x89PNG\r\n\x1a\nalpha"
PNG_B = b"\x89PNG\r\n\x1a\nbravo"
JPEG_C = b"\xff\xd8\xff\xe0charlie"
MP4_CLIP = b"\x00\x00\x00\x18ftypmp42clip"
WAV_MEMO = b"RIFF\x24\x00\x00\x00WAVEmemo"


@pytest.fixture
def media_dir(tmp_path) -> Path:
    """A media folder ``pics`` with five media files and one text file."""
    pics = tmp_path / "pics"
    pics.mkdir()
    (pics / "a.png").write_bytes(PNG_A)
    (pics / "b.png").write_bytes(PNG_B)
    (pics / "c.jpg").write_bytes(JPEG_C)
    (pics / "clip.mp4").write_bytes(MP4_CLIP)
    (pics / "memo.wav").write_bytes(WAV_MEMO)
    (pics / "notes.txt").write_text("not media", encoding="utf-8")
    return pics


@pytest.fixture
def lookup(media_dir):
    """Media lookup built from media_dir, fragments unset."""
    return build_lookup(scan_media(media_dir))
