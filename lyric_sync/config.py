"""Configuration constants, supported source formats, and .env loading.

WHY: Centralizes every tunable value so it is easy to find, update, and
override. Source-format detection tables and matcher thresholds are
plain data structures rather than buried in logic, so both humans and
coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts, sets, and strings, each overridable through an
environment variable.

RULES:
- SOURCE_FORMATS maps lowercase file extensions to parser keys
- Unknown extensions fall back to plain text
- AUTHOR_MATCH_DISTANCE is the exclusive Levenshtein bound for matching
  TTML singers to known authors
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Source formats
# ---------------------------------------------------------------------------

PLAIN_TEXT = "text"
LRC_SOURCE = "lrc"
TTML_SOURCE = "ttml"
JSON_SOURCE = "json"

SOURCE_FORMATS: dict[str, str] = {
    ".lrc": LRC_SOURCE,
    ".ttml": TTML_SOURCE,
    ".xml": TTML_SOURCE,
    ".json": JSON_SOURCE,
    ".txt": PLAIN_TEXT,
}
"""File extension (lowercase, with dot) -> parser key."""

SOURCE_FORMAT_KEYS = frozenset({PLAIN_TEXT, LRC_SOURCE, TTML_SOURCE, JSON_SOURCE})


def detect_source_format(filename: str) -> str:
    """Guess the parser key for a lyrics file from its extension.

    Unknown or missing extensions are treated as plain text.
    """
    return SOURCE_FORMATS.get(Path(filename).suffix.lower(), PLAIN_TEXT)


# ---------------------------------------------------------------------------
# Import / export defaults
# ---------------------------------------------------------------------------

DEFAULT_WORD_BY_WORD = os.getenv("LYRIC_SYNC_WORD_BY_WORD", "false").lower() == "true"
AUTHOR_MATCH_DISTANCE = int(os.getenv("LYRIC_SYNC_AUTHOR_MATCH_DISTANCE", "5"))
DEFAULT_FORMATS = os.getenv("LYRIC_SYNC_DEFAULT_FORMATS", "")
"""Comma-separated formatter keys; empty means every registered format."""

AUTHORS_COMPANION_SUFFIX = "-authors.txt"
"""Companion file next to a lyrics file listing one singer per line."""

# ---------------------------------------------------------------------------
# Logging and server
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LYRIC_SYNC_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

MAX_UPLOAD_BYTES = int(os.getenv("LYRIC_SYNC_MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
