"""Allow-list HTML sanitizer for rendered prose.

WHY: Markdown passes raw HTML straight through, so a prose block can
carry <script> tags, event handlers, or javascript: links. The album is
meant to be shared, so rendered prose is reduced to a permissive but
safe subset before it is embedded, following the usual policy for user-generated
content (formatting, lists, tables, headings, links, images).

HOW: Parse with BeautifulSoup's html.parser, then three passes:
  1. Remove comments and dangerous elements together with their content
  2. Unwrap any element not on the allow-list (its text survives)
  3. Strip attributes not allowed for the element, drop URLs whose
     scheme is not http/https/mailto, add rel="nofollow" to links

RULES:
- Never raises on malformed input; invalid UTF-8 is replaced
- Relative URLs and fragment links are allowed
- class is only kept on <code> when it names a language (language-xyz)
- Output is a str ready to embed verbatim
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS: FrozenSet[str] = frozenset({
    "a", "abbr", "acronym", "b", "blockquote", "br", "caption", "cite",
    "code", "col", "colgroup", "dd", "del", "details", "dfn", "div", "dl",
    "dt", "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "i", "img", "ins", "kbd", "li", "mark", "ol", "p", "pre", "q",
    "s", "samp", "small", "span", "strike", "strong", "sub", "summary",
    "sup", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "tt", "u",
    "ul", "var",
})

# Removed together with everything inside them.
DROP_WITH_CONTENT: FrozenSet[str] = frozenset({
    "applet", "base", "button", "embed", "form", "frame", "frameset",
    "iframe", "input", "link", "math", "meta", "noscript", "object",
    "script", "select", "style", "svg", "template", "textarea", "title",
})

GLOBAL_ATTRIBUTES: FrozenSet[str] = frozenset({"title", "lang", "dir"})

ALLOWED_ATTRIBUTES: Dict[str, FrozenSet[str]] = {
    "a": frozenset({"href", "name"}),
    "blockquote": frozenset({"cite"}),
    "code": frozenset({"class"}),
    "col": frozenset({"span"}),
    "colgroup": frozenset({"span"}),
    "del": frozenset({"cite", "datetime"}),
    "details": frozenset({"open"}),
    "img": frozenset({"src", "alt", "width", "height"}),
    "ins": frozenset({"cite", "datetime"}),
    "ol": frozenset({"start", "type", "reversed"}),
    "q": frozenset({"cite"}),
    "td": frozenset({"align", "colspan", "rowspan"}),
    "th": frozenset({"align", "colspan", "rowspan", "scope"}),
    "li": frozenset({"value"}),
}

URL_ATTRIBUTES: FrozenSet[str] = frozenset({"href", "src", "cite"})
ALLOWED_SCHEMES: FrozenSet[str] = frozenset({"http", "https", "mailto"})

_LANGUAGE_CLASS_RE = re.compile(r"^language-[\w.+-]+$")


def _is_safe_url(value: str) -> bool:
    try:
        scheme = urlsplit(value.strip()).scheme.lower()
    except ValueError:
        return False
    return not scheme or scheme in ALLOWED_SCHEMES


def _clean_attributes(tag) -> None:
    allowed = ALLOWED_ATTRIBUTES.get(tag.name, frozenset()) | GLOBAL_ATTRIBUTES
    for attr in list(tag.attrs):
        if attr not in allowed:
            del tag[attr]
            continue
        if attr in URL_ATTRIBUTES and not _is_safe_url(tag[attr]):
            del tag[attr]
            continue
        if attr == "class":
            classes = [c for c in tag.get("class", []) if _LANGUAGE_CLASS_RE.match(c)]
            if classes:
                tag["class"] = classes
            else:
                del tag["class"]

    if tag.name == "a" and tag.has_attr("href"):
        tag["rel"] = "nofollow"


def sanitize(unsafe: bytes) -> str:
    """Reduce rendered HTML to the allow-listed subset.

    Args:
        unsafe: HTML bytes as produced by markup.render().

    Returns:
        Sanitized HTML string.
    """
    soup = BeautifulSoup(unsafe.decode("utf-8", errors="replace"), "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(list(DROP_WITH_CONTENT)):
        if not tag.decomposed:
            tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
        else:
            _clean_attributes(tag)

    return str(soup)
