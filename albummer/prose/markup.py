"""Markdown rendering for prose blocks.

HOW: Python-Markdown with the "extra" bundle (tables, fenced code,
footnotes, attribute lists) and "sane_lists".

RULES:
- Output is UNSAFE: raw HTML in the source passes through untouched
- Always pass the result through sanitizer.sanitize() before embedding
"""

from __future__ import annotations

import markdown

_EXTENSIONS = ["extra", "sane_lists"]


def render(markdown_text: str) -> bytes:
    """Render Markdown text to (unsanitized) UTF-8 HTML bytes."""
    html = markdown.markdown(markdown_text, extensions=_EXTENSIONS, output_format="html")
    return html.encode("utf-8")
