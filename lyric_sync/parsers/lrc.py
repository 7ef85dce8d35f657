"""LRC import: line timestamps, inline word timestamps, and duet tags.

WHY: LRC is the most common synced-lyrics format. Lines look like
``[00:12.34]v1: Hello there`` and enhanced LRC adds per-word times:
``[00:12.34]<00:12.34>Hello <00:12.80>there``. Both must land in the
same Document the rest of the tool edits and exports.

HOW: Each line is checked against LRC_LINE_RE; non-matching lines
(metadata tags such as ``[ar:...]``, blank lines, stanza names) are
dropped. The remaining text is examined for a duet prefix, then either
split into timed words, split on whitespace into untimed words, or kept
as a single verse text.

RULES:
- Duet prefixes: ``v1:``/``M:`` -> author 0, ``v2:``/``F:`` -> author 1,
  ``v3:``/``D:`` -> authors 0 and 1
- Only ``v1:``/``v2:``/``v3:`` are removed from the text; ``M:``/``F:``/
  ``D:`` stay in the verse text as written
- In word-sync mode, text before the first ``<`` tag is not a word; it
  stays at the front of the verse text
- Word-sync mode without inline tags gives every word the verse start
- Inline ``<...>`` tags that are not timestamps (``love <you>``) are
  ordinary text: the line falls back to the whitespace split
- Outside word-sync mode inline ``<...>`` tags are stripped
- A line whose verse timestamp cannot be parsed is skipped, never raised
"""

from __future__ import annotations

import logging
import re

from lyric_sync.core.authors import AuthorRegistry, propagate_checked
from lyric_sync.core.ir import AuthorEntry, Document, VerseEntry, WordEntry, new_id
from lyric_sync.core.timestamps import LRC_LINE_RE, parse_lrc

logger = logging.getLogger(__name__)

_INLINE_TAG_RE = re.compile(r"<[^>]*>")
_WORD_SPLIT_RE = re.compile(r"[<>]+")

# Duet type -> registry indexes to check
_DUET_PREFIXES = (
    (("v1:", "M:"), (0,)),
    (("v2:", "F:"), (1,)),
    (("v3:", "D:"), (0, 1)),
)
_STRIPPED_PREFIXES = ("v1:", "v2:", "v3:")


def detect_duet(text: str) -> tuple[int, ...]:
    """Return the registry indexes a duet prefix marks as singing."""
    indexes: tuple[int, ...] = ()
    for prefixes, marked in _DUET_PREFIXES:
        if text.startswith(prefixes):
            indexes = marked
    return indexes


def strip_duet_prefix(text: str) -> str:
    """Remove a numbered voice prefix (``v1:``); Walaoke tags are kept."""
    if text.startswith(_STRIPPED_PREFIXES):
        return text[text.index(":") + 1:].strip()
    return text


def split_timed_words(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Split ``prefix <ts>word <ts>word`` into the prefix and (ts, word) pairs.

    Tokens alternate between timestamp and text once the first ``<`` is
    reached; an odd count is padded with an empty trailing text.
    """
    first = text.find("<")
    prefix = text[:first].strip() if first > 0 else ""
    tokens = [token.strip() for token in _WORD_SPLIT_RE.split(text[max(first, 0):])]
    if tokens and tokens[0] == "":
        tokens.pop(0)
    if len(tokens) % 2 != 0:
        tokens.append("")
    pairs = [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]
    return prefix, pairs


def _parse_line(
    line: str,
    registry: AuthorRegistry,
    word_by_word: bool,
) -> VerseEntry:
    start = parse_lrc(line[1:line.index("]")])
    text = line[line.index("]") + 1:]

    duet = detect_duet(text)
    text = strip_duet_prefix(text)

    def _authors() -> list[AuthorEntry]:
        return registry.checked(*duet)

    words: list[WordEntry] | None = None
    prefix = ""
    if word_by_word and "<" in text and ">" in text:
        try:
            prefix, pairs = split_timed_words(text)
            words = [
                WordEntry(
                    id=new_id(),
                    start=parse_lrc(timestamp),
                    text=word_text,
                    authors=_authors(),
                )
                for timestamp, word_text in pairs
            ]
        except ValueError:
            logger.debug("Inline tags are not timestamps, splitting on whitespace: %r", line)
            prefix = ""
    if word_by_word and words is None:
        words = [
            WordEntry(id=new_id(), start=start, text=token, authors=_authors())
            for token in (text.split() or [""])
        ]
    elif not word_by_word:
        text = _INLINE_TAG_RE.sub("", text)

    verse = VerseEntry(
        id=new_id(),
        start=start,
        text=text,
        authors=_authors() if registry else None,
        words=words,
    )
    if words is not None:
        joined = verse.display_text()
        verse.text = "{} {}".format(prefix, joined) if prefix else joined
    propagate_checked(verse)
    return verse


def parse_lrc_source(
    source: str,
    registry: AuthorRegistry | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Document:
    """Parse LRC text into a Document.

    Args:
        source: Raw LRC file content.
        registry: Canonical authors; duet tags check entries by index.
        word_by_word: Build WordEntry lists for every verse.
        source_name: Stem used to name exported files.

    Returns:
        A Document with one verse per valid LRC line, in file order.
    """
    if registry is None:
        registry = AuthorRegistry()
    verses: list[VerseEntry] = []
    skipped = 0

    for line in source.splitlines():
        if not LRC_LINE_RE.match(line):
            continue
        try:
            verses.append(_parse_line(line, registry, word_by_word))
        except ValueError:
            skipped += 1
            logger.debug("Skipping LRC line with malformed timestamp: %r", line)

    if skipped:
        logger.info("Skipped %d LRC line(s) with malformed timestamps", skipped)
    return Document(verses=verses, authors=registry.snapshot(), source_name=source_name)
