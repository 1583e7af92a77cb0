"""Unit tests for the template generator.

WHY: The template is the user's starting point; it must be a valid
album (folder declared, every file listed) with a sensible layout.

HOW: build_template() is tested on hand-made entries with fixed mtimes;
make_template() is tested against the conftest media folder.

RULES:
- Layout expectations are written out literally.
"""

import os

from albummer.core.grammar import parse_folder
from albummer.core.ir import MediaEntry, MediaKind
from albummer.template import build_template, layout_media, make_template


def _img(tmp_path, name, mtime):
    return MediaEntry(path=tmp_path / name, kind=MediaKind.IMAGE, mtime=mtime)


def _clip(tmp_path, name, mtime):
    return MediaEntry(path=tmp_path / name, kind=MediaKind.VIDEO, mtime=mtime)


class TestLayoutMedia:

    def test_images_per_line(self, tmp_path):
        entries = [_img(tmp_path, "{}.jpg".format(i), i) for i in range(5)]
        assert layout_media(entries, 2) == "0.jpg   1.jpg\n2.jpg   3.jpg\n4.jpg"

    def test_clip_on_own_line(self, tmp_path):
        entries = [_img(tmp_path, "a.jpg", 1), _clip(tmp_path, "v.mp4", 2), _img(tmp_path, "b.jpg", 3)]
        assert layout_media(entries, 3) == "a.jpg\n\nv.mp4\n\nb.jpg"

    def test_clip_after_full_line(self, tmp_path):
        entries = [_img(tmp_path, "a.jpg", 1), _clip(tmp_path, "v.mp4", 2)]
        assert layout_media(entries, 1) == "a.jpg\n\nv.mp4\n\n"


class TestBuildTemplate:

    def test_header(self, tmp_path):
        text = build_template(str(tmp_path / "Summer"), [], css="look.css")
        assert text.startswith(
            ":folder {}\n:show_filenames\n:use look.css\n\n# Summer\n\n".format(tmp_path / "Summer")
        )

    def test_ascending_order(self, tmp_path):
        entries = [_img(tmp_path, "new.jpg", 20), _img(tmp_path, "old.jpg", 10)]
        text = build_template(str(tmp_path), entries, num_cols=3, order="asc", css="x.css")
        assert "old.jpg   new.jpg" in text

    def test_descending_order(self, tmp_path):
        entries = [_img(tmp_path, "old.jpg", 10), _img(tmp_path, "new.jpg", 20)]
        text = build_template(str(tmp_path), entries, num_cols=3, order="desc", css="x.css")
        assert "new.jpg   old.jpg" in text

    def test_zero_columns_falls_back_to_default(self, tmp_path):
        entries = [_img(tmp_path, "a.jpg", 1)]
        text = build_template(str(tmp_path), entries, num_cols=0, css="x.css")
        assert "a.jpg" in text


class TestMakeTemplate:

    def test_writes_parseable_album(self, media_dir, tmp_path):
        for i, name in enumerate(["a.png", "b.png", "c.jpg", "clip.mp4", "memo.wav"]):
            os.utime(media_dir / name, (1000 + i, 1000 + i))
        out = make_template(str(media_dir), tmp_path / "pics.alb", num_cols=3, css="x.css")
        lines = out.read_text(encoding="utf-8").splitlines()
        assert parse_folder(lines) == str(media_dir)
        assert "a.png   b.png   c.jpg" in lines
        assert "clip.mp4" in lines
        assert "memo.wav" in lines
        assert "notes.txt" not in "\n".join(lines)
