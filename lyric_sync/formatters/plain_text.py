"""Lyrics-only text formatter.

WHY: Sometimes only the words are wanted: for a lyrics site, for
proofreading, or to restart syncing from scratch.

HOW: One line per verse, the verse's display text (rebuilt from its
words in word mode).

RULES:
- No timestamps, no singer tags, no stanza names
- Output suffix: "-Lyrics.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from lyric_sync.core.ir import Document
from lyric_sync.formatters.base import BaseFormatter, FormatterOutput


class LyricsTextFormatter(BaseFormatter):
    """Export the verse texts, one per line."""

    @property
    def name(self) -> str:
        return "Lyrics text"

    @property
    def suffix(self) -> str:
        return "-Lyrics.txt"

    def format(self, document: Document) -> list[FormatterOutput]:
        content = "\n".join(verse.display_text() for verse in document.verses)
        return [FormatterOutput(suffix=self.suffix, content=content, media_type="text/plain")]
