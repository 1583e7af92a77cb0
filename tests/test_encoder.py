"""Unit tests for the concurrent media encoder.

WHY: The encoder is the only concurrent stage. Fragments must be exact
(the data URI type decides whether a browser can show the file), must
only be produced for referenced files, and must not depend on which
file happened to finish first.

HOW: Async functions are driven with asyncio.run() inside synchronous
tests. Per-kind delays are injected by patching encode_bytes, and
unreadable files by deleting them after the inventory scan.

RULES:
- Expected base64 is computed from the conftest payload constants.
"""

import asyncio
import base64
import threading
import time
from unittest.mock import patch

from albummer.core import encoder
from albummer.core.encoder import (
    encode_bytes,
    encode_entry,
    encode_referenced,
    merge_fragments,
    referenced_names,
)
from albummer.core.inventory import build_lookup, scan_media
from albummer.core.ir import MediaKind

from conftest import JPEG_C, MP4_CLIP, PNG_A, WAV_MEMO


def _b64(data):
    return base64.b64encode(data).decode("ascii")


class TestEncodeBytes:
    """Fragments are kind-specific inline elements with data URIs."""

    def test_png_image(self):
        fragment = encode_bytes("a.png", MediaKind.IMAGE, PNG_A)
        assert fragment == (
            '<div class="imgdiv"><img class="center-fit" '
            'src="data:image/png;base64,{}"></img></div>'.format(_b64(PNG_A))
        )

    def test_uppercase_png_is_png(self):
        assert "data:image/png;" in encode_bytes("A.PNG", MediaKind.IMAGE, PNG_A)

    def test_jpeg_image(self):
        assert "data:image/jpeg;base64,{}".format(_b64(JPEG_C)) in encode_bytes(
            "c.jpg", MediaKind.IMAGE, JPEG_C
        )

    def test_video(self):
        fragment = encode_bytes("clip.mp4", MediaKind.VIDEO, MP4_CLIP)
        assert fragment == (
            '<div class="viddiv"><video class="center-fit" controls '
            'src="data:video/mp4;base64,{}"></video></div>'.format(_b64(MP4_CLIP))
        )

    def test_audio(self):
        fragment = encode_bytes("memo.wav", MediaKind.AUDIO, WAV_MEMO)
        assert fragment == (
            '<div align="center"><audio controls '
            'src="data:audio/x-wav;base64,{}"></audio></div>'.format(_b64(WAV_MEMO))
        )

    def test_deterministic(self):
        assert encode_bytes("a.png", MediaKind.IMAGE, PNG_A) == encode_bytes(
            "a.png", MediaKind.IMAGE, PNG_A
        )


class TestEncodeEntry:

    def test_reads_file(self, lookup, media_dir):
        assert _b64(PNG_A) in encode_entry(lookup["a.png"], media_dir)

    def test_unreadable_file_yields_empty_fragment(self, lookup, media_dir):
        (media_dir / "a.png").unlink()
        warnings = []
        assert encode_entry(lookup["a.png"], media_dir, on_warning=warnings.append) == ""
        assert len(warnings) == 1
        assert "a.png" in warnings[0]


class TestReferencedNames:

    def test_only_media_lines_count(self, lookup):
        lines = [":folder pics", "a.png clip.mp4", "Text mentioning b.png", "a.png"]
        assert referenced_names(lines, lookup) == ["a.png", "clip.mp4"]

    def test_unresolved_tokens_skipped(self, lookup):
        assert referenced_names(["a.png ghost.png b.png"], lookup) == ["a.png", "b.png"]

    def test_no_media_lines(self, lookup):
        assert referenced_names(["just prose"], lookup) == []


class TestEncodeReferenced:

    def test_encodes_only_referenced_entries(self, lookup, media_dir):
        lines = [":folder pics", "a.png memo.wav"]
        fragments = asyncio.run(encode_referenced(lines, lookup, media_dir))
        assert set(fragments) == {"a.png", "memo.wav"}
        assert _b64(WAV_MEMO) in fragments["memo.wav"]

    def test_empty_album_encodes_nothing(self, lookup, media_dir):
        assert asyncio.run(encode_referenced(["Hello"], lookup, media_dir)) == {}

    def test_progress_reported_per_completion(self, lookup, media_dir):
        messages = []
        lines = ["a.png b.png c.jpg"]
        asyncio.run(encode_referenced(lines, lookup, media_dir, on_status=messages.append))
        assert len(messages) == 3
        assert "3 of 3" in messages[-1]

    def test_missing_file_does_not_abort(self, lookup, media_dir):
        (media_dir / "b.png").unlink()
        fragments = asyncio.run(encode_referenced(["a.png b.png"], lookup, media_dir))
        assert fragments["b.png"] == ""
        assert _b64(PNG_A) in fragments["a.png"]

    def test_result_independent_of_completion_order(self, lookup, media_dir):
        """Slow images, fast video: fragments are identical to an undelayed run."""
        lines = ["a.png clip.mp4 memo.wav c.jpg"]
        baseline = asyncio.run(encode_referenced(lines, lookup, media_dir))

        real_encode = encoder.encode_bytes
        delays = {MediaKind.IMAGE: 0.05, MediaKind.VIDEO: 0.0, MediaKind.AUDIO: 0.02}

        def _slow_encode(name, kind, data):
            time.sleep(delays[kind])
            return real_encode(name, kind, data)

        with patch("albummer.core.encoder.encode_bytes", side_effect=_slow_encode):
            delayed = asyncio.run(encode_referenced(lines, lookup, media_dir))

        assert delayed == baseline

    def test_runs_concurrently(self, lookup, media_dir):
        """All four reads must be in flight at once to pass the barrier."""
        lines = ["a.png b.png c.jpg clip.mp4"]
        real_encode = encoder.encode_bytes
        barrier = threading.Barrier(4, timeout=5)

        def _rendezvous(name, kind, data):
            barrier.wait()
            return real_encode(name, kind, data)

        with patch("albummer.core.encoder.encode_bytes", side_effect=_rendezvous):
            fragments = asyncio.run(encode_referenced(lines, lookup, media_dir))

        assert not barrier.broken
        assert all(fragments.values())


class TestMediaFolderReads:
    """Bytes come from folder/name even when the scan found a nested copy."""

    def _nested_folder(self, tmp_path):
        pics = tmp_path / "pics"
        (pics / "sub").mkdir(parents=True)
        (pics / "a.png").write_bytes(b"TOPLEVEL")
        (pics / "sub" / "a.png").write_bytes(b"NESTEDCOPY")
        (pics / "sub" / "only.png").write_bytes(b"ONLYNESTED")
        return pics

    def test_duplicate_name_reads_top_level_copy(self, tmp_path):
        pics = self._nested_folder(tmp_path)
        lookup = build_lookup(scan_media(pics))
        fragments = asyncio.run(encode_referenced(["a.png"], lookup, pics))
        assert _b64(b"TOPLEVEL") in fragments["a.png"]
        assert _b64(b"NESTEDCOPY") not in fragments["a.png"]

    def test_subfolder_only_file_is_blank(self, tmp_path):
        pics = self._nested_folder(tmp_path)
        lookup = build_lookup(scan_media(pics))
        warnings = []
        fragments = asyncio.run(
            encode_referenced(["a.png only.png"], lookup, pics, on_warning=warnings.append)
        )
        assert fragments["only.png"] == ""
        assert len(warnings) == 1
        assert "only.png" in warnings[0]


class TestMergeFragments:

    def test_referenced_entries_get_fragment(self, lookup):
        merged = merge_fragments(lookup, {"a.png": "<frag>"})
        assert merged["a.png"].fragment == "<frag>"

    def test_unreferenced_entries_untouched(self, lookup):
        merged = merge_fragments(lookup, {"a.png": "<frag>"})
        assert merged["b.png"] is lookup["b.png"]
        assert merged["b.png"].fragment is None

    def test_input_lookup_not_mutated(self, lookup):
        merge_fragments(lookup, {"a.png": "<frag>"})
        assert lookup["a.png"].fragment is None
