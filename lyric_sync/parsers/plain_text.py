"""Plain-text lyrics import: one verse per line, nothing timed yet.

WHY: Most lyrics start life as plain text (a clipboard paste, a .txt
file, unsynced embedded lyrics). They become a Document whose start
times are all zero, to be timed later.

HOW: Split on newlines. In word-sync mode every line is further split
on whitespace into words, each starting at zero.

RULES:
- Every input line becomes a verse, blank lines included; an empty
  source yields one empty verse to type into
- Each verse and word owns an independent copy of the registry authors
- verse.authors is None when the registry is empty
"""

from __future__ import annotations

from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.ir import Document, VerseEntry, WordEntry, new_id


def parse_plain_text(
    source: str,
    registry: AuthorRegistry | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Document:
    if registry is None:
        registry = AuthorRegistry()
    verses: list[VerseEntry] = []

    for line in source.split("\n"):
        line = line.rstrip("\r")
        words = None
        if word_by_word:
            words = [
                WordEntry(id=new_id(), start=0.0, text=token, authors=registry.snapshot())
                for token in (line.split() or [""])
            ]
        verse = VerseEntry(
            id=new_id(),
            start=0.0,
            text=line,
            authors=registry.snapshot() if registry else None,
            words=words,
        )
        verse.refresh_text()
        verses.append(verse)

    return Document(verses=verses, authors=registry.snapshot(), source_name=source_name)
