"""Verse start positions as plain numbers.

Writes the effective start of every verse in seconds, one per line, for
tools that only need the cue points (``12.34``, ``15``). With
``include_words`` every word start follows its verse line instead.
Output suffix: "-VersePosition.txt".
"""

from __future__ import annotations

from lyric_sync.core.ir import Document
from lyric_sync.core.timestamps import format_plain_seconds
from lyric_sync.formatters.base import BaseFormatter, FormatterOutput


class VersePositionsFormatter(BaseFormatter):
    def __init__(self, include_words: bool = False) -> None:
        self.include_words = include_words

    @property
    def name(self) -> str:
        return "Verse positions"

    @property
    def suffix(self) -> str:
        return "-VersePosition.txt"

    def format(self, document: Document) -> list[FormatterOutput]:
        lines: list[str] = []
        for verse in document.verses:
            if self.include_words and verse.words:
                lines.extend(format_plain_seconds(word.start) for word in verse.words)
            else:
                lines.append(format_plain_seconds(verse.effective_start()))
        return [FormatterOutput(suffix=self.suffix, content="\n".join(lines), media_type="text/plain")]
