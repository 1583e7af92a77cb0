"""Albummer: single-file HTML photo albums from a plain-text description.

WHY: Sharing a folder of photos, clips, and voice memos together with a
bit of narrative usually means a web host or a slideshow tool. An album
description (.alb) is a short text file that lists media filenames and
Markdown prose in reading order; Albummer compiles it into one
self-contained HTML document that opens anywhere.

HOW: Four-stage pipeline: inventory (scan the media folder), grammar
(classify album lines), encode (concurrently turn referenced files into
base64 data-URI fragments), assemble (walk the lines again in order and
emit one fragment per media row or prose block). The writer serializes
the result in a single pass.

RULES:
- Output order always follows album-line order, never encoding order
- Missing media and unreadable stylesheets degrade to blank output
- A missing ``:folder`` directive aborts before any output is written
"""

__version__ = "0.1.0"
