"""Lyric Sync: synchronized lyrics model and format conversion hub.

WHY: Lyrics arrive as plain text, LRC or TTML, and players want them
back as LRC, TTML or JSON, with word timing and singer attribution kept
intact. This package imports any of them into one Document model, lets
it be edited safely, and exports it to every supported format.

HOW: Three stages: parse (parsers/), edit (core/editing.py), format
(formatters/). The CLI and the HTTP API are thin layers on top.

RULES:
- All formatters consume the same Document
- Adding a new output format = one new formatter module, no core changes
- The Document is the stable contract between parsing and formatting
"""

__version__ = "0.1.0"
