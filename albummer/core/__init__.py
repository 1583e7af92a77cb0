"""Core album compilation modules.

WHY: The core package is the compiler proper, everything between the
album file on disk and the ordered list of HTML fragments. The CLI,
writer, and template generator are thin layers around it.

HOW: ir.py defines the data structures, inventory.py scans the media
folder, grammar.py classifies album lines, encoder.py turns referenced
media into data-URI fragments concurrently, and assembler.py walks the
lines a second time to build the Document.

RULES:
- Line classification lives in grammar.classify() only
- The encoder never writes to the output; the assembler never encodes
- Assembly reads media fragments only after every encoding has finished
"""
