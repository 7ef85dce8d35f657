"""LRC formatter: line-synced or enhanced (word-synced) LRC.

WHY: LRC is what most music players and karaoke apps read. Enhanced
LRC adds ``<mm:ss.hh>`` before each word, and duet tags tell players
which singer performs a line.

HOW: One output line per verse, timestamped with the verse's effective
start. Optional pieces, all controlled by LRCExportOptions: a ``[Name]``
stanza line, a duet tag derived from the checked authors, per-word
timestamps, and line breaks where background vocals start or stop in
the middle of a verse.

RULES:
- Checked authors: 0 -> no tag, 1 -> ``v1:``/``v2:`` by registry index,
  2+ -> ``v3:``; Walaoke uses ``M:``/``F:``/``D:`` instead
- A single checked author that is not registry author 0 is ``v2:``
- Line-mode verses pick v1/v2 from whether registry author 0 is checked
- ``[bg:] `` follows the tag of a whole-background word-synced verse
- keep_seconds writes raw seconds and changes the suffix to ``.txt``
- Output suffix: ``.lrc``; media type ``text/plain``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lyric_sync.core.ir import Document, VerseEntry
from lyric_sync.core.timestamps import LRC, format_plain_seconds, format_seconds
from lyric_sync.formatters.base import BaseFormatter, FormatterOutput, verse_checked_ids


@dataclass
class LRCExportOptions:
    """Switches for LRC export.

    Attributes:
        keep_seconds: Write raw seconds instead of ``mm:ss.hh``.
        keep_authors: Emit duet tags for the checked singers.
        keep_word_by_word: Emit ``<mm:ss.hh>`` before every word.
        put_background_in_new_line: Break the line where background
            vocals start or stop mid-verse.
        add_paragraph_name: Emit a ``[Name]`` line before stanza starts.
        walaoke: Use ``M:``/``F:``/``D:`` instead of ``v1:``/``v2:``/``v3:``.
        walaoke_is_male_first: With Walaoke, registry author 0 is ``M:``.
    """

    keep_seconds: bool = False
    keep_authors: bool = False
    keep_word_by_word: bool = True
    put_background_in_new_line: bool = True
    add_paragraph_name: bool = True
    walaoke: bool = False
    walaoke_is_male_first: bool = True


class LRCFormatter(BaseFormatter):
    """Export a Document as (enhanced) LRC."""

    def __init__(self, options: LRCExportOptions | None = None) -> None:
        self.options = options or LRCExportOptions()

    @property
    def name(self) -> str:
        return "LRC"

    @property
    def suffix(self) -> str:
        return ".txt" if self.options.keep_seconds else ".lrc"

    def format(self, document: Document) -> list[FormatterOutput]:
        registry_ids = [author.id for author in document.authors]
        lines = [self._format_verse(verse, registry_ids) for verse in document.verses]
        return [
            FormatterOutput(
                suffix=self.suffix,
                content="\n".join(lines),
                media_type="text/plain",
            )
        ]

    # ------------------------------------------------------------------

    def _timestamp(self, seconds: float) -> str:
        if self.options.keep_seconds:
            return "[{}]".format(format_plain_seconds(seconds))
        return "[{}]".format(format_seconds(seconds, LRC))

    def _word_timestamp(self, seconds: float) -> str:
        if self.options.keep_seconds:
            return "<{}>".format(format_plain_seconds(seconds))
        return "<{}>".format(format_seconds(seconds, LRC))

    def _speaker_tag(self, count: int, first_singer: bool) -> str:
        opts = self.options
        if count == 0:
            return ""
        if count > 1:
            return "D: " if opts.walaoke else "v3: "
        if not opts.walaoke:
            return "v1: " if first_singer else "v2: "
        male = first_singer == opts.walaoke_is_male_first
        return "M: " if male else "F: "

    def _format_verse(self, verse: VerseEntry, registry_ids: list[str]) -> str:
        opts = self.options
        prefix = ""
        if opts.add_paragraph_name and verse.paragraph_name:
            prefix = "[{}]\n".format(verse.paragraph_name)

        if not verse.words:
            speaker = ""
            if opts.keep_authors and verse.authors:
                count = len(verse_checked_ids(verse))
                speaker = self._speaker_tag(count, verse.authors[0].checked)
            return "{}{}{}{}".format(prefix, self._timestamp(verse.start), speaker, verse.text)

        start = verse.words[0].start
        output = self._timestamp(start)
        speaker = ""
        if opts.keep_authors:
            singers = verse_checked_ids(verse)
            speaker = self._speaker_tag(len(singers), _registry_index(singers, verse, registry_ids) == 0)
            output += speaker
            if verse.is_background:
                output += "[bg:] "

        if not opts.keep_word_by_word:
            return prefix + output + " ".join(word.text for word in verse.words)

        parts = [output]
        for index, word in enumerate(verse.words):
            if opts.put_background_in_new_line and index != 0 and not verse.is_background:
                previous = verse.words[index - 1]
                if word.is_background and not previous.is_background:
                    parts.append("\n{}{}".format(self._timestamp(start), speaker))
                elif not word.is_background and previous.is_background:
                    parts.append("\n{}{}".format(self._timestamp(word.start), speaker))
            parts.append("{}{} ".format(self._word_timestamp(word.start), word.text))
        return prefix + "".join(parts)


def _registry_index(singers: list[str], verse: VerseEntry, registry_ids: list[str]) -> Optional[int]:
    """Registry position of the first singer, or None when unknown."""
    if not singers:
        return None
    reference = registry_ids
    if not reference and verse.words and verse.words[0].authors:
        reference = [author.id for author in verse.words[0].authors]
    if singers[0] in reference:
        return reference.index(singers[0])
    return None
