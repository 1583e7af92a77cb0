"""Prose rendering collaborators: Markdown to HTML, then sanitization.

WHY: Prose blocks in an album are user-written Markdown that ends up in
a document people open in a browser. Rendering and sanitizing are kept
outside the core compiler so the assembler only sees one pure function:
raw text in, safe markup out.

HOW: markup.render() turns Markdown into HTML bytes; sanitizer.sanitize()
reduces that HTML to an allow-list suitable for user-generated content.
render_prose() composes the two.

RULES:
- The assembler calls render_prose() and uses its output verbatim
- Both steps are pure: same input, same output
"""

from albummer.prose.markup import render
from albummer.prose.sanitizer import sanitize


def render_prose(markdown_text: str) -> str:
    """Render a Markdown prose block to sanitized HTML."""
    return sanitize(render(markdown_text))


__all__ = ["render", "render_prose", "sanitize"]
