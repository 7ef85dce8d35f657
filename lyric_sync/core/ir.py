"""Intermediate representation dataclasses for synchronized lyrics.

WHY: LRC files, TTML files, plain text, and the JSON export all describe
the same thing: an ordered list of verses with start times, optional
per-word timing, and per-occurrence singer attribution. Parsers and
formatters share one typed model so each format only has to convert to
and from it.

HOW: Four dataclasses form a hierarchy:
  AuthorEntry: one singer, with a per-occurrence ``checked`` flag
  WordEntry: one word with its own start time and author list
  VerseEntry: one lyric line, optionally holding WordEntry items
  Document: the ordered verses plus the canonical author registry

RULES:
- All times are float seconds
- Identifiers are UUID v4 strings, unique across the whole Document
- Author lists are owned by exactly one verse or word; copy with
  copy_authors() whenever an entry is created from another
- When words exist, verse text is the space-join of word texts and is
  refreshed with refresh_text() after every word change; a leading
  Walaoke tag (``M:``/``F:``/``D:``) that is not a word survives refreshes
- to_dict()/from_dict() use the JSON key names of the export format
  ("verse", "isBackground", "paragraphName")
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

_WALAOKE_TAGS = ("M:", "F:", "D:")


def new_id() -> str:
    """Return a fresh collision-resistant identifier."""
    return str(uuid.uuid4())


@dataclass
class AuthorEntry:
    """A singer as seen by one verse or one word.

    ``checked`` is scoped to the owning entry: it says whether this
    singer performs that particular verse/word, not a global property.
    """

    id: str
    name: str
    checked: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "id": self.id}
        if self.checked:
            data["checked"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthorEntry:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            checked=bool(data.get("checked", False)),
        )


def copy_authors(authors: Iterable[AuthorEntry] | None) -> list[AuthorEntry]:
    """Return an independent structural copy of an author list.

    Every verse and word must own its list; checking an author on one
    entry can never leak into another.
    """
    if authors is None:
        return []
    return [replace(author) for author in authors]


def checked_ids(authors: Iterable[AuthorEntry] | None) -> list[str]:
    """Ids of the checked authors, in list order."""
    return [author.id for author in (authors or []) if author.checked]


@dataclass
class WordEntry:
    """One word of a word-by-word synced verse."""

    id: str
    start: float
    text: str
    authors: list[AuthorEntry] = field(default_factory=list)
    is_background: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "start": self.start,
            "verse": self.text,
            "id": self.id,
            "authors": [author.to_dict() for author in self.authors],
        }
        if self.is_background:
            data["isBackground"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordEntry:
        return cls(
            id=str(data["id"]),
            start=float(data.get("start", 0)),
            text=str(data.get("verse", "")),
            authors=[AuthorEntry.from_dict(a) for a in data.get("authors", [])],
            is_background=bool(data.get("isBackground", False)),
        )


@dataclass
class VerseEntry:
    """One lyric line.

    RULES:
    - authors is None when no author registry exists for the document
    - words is None unless the verse is synced word-by-word
    - paragraph_name marks the first verse of a named stanza ("Chorus")
    """

    id: str
    start: float
    text: str
    authors: list[AuthorEntry] | None = None
    words: list[WordEntry] | None = None
    is_background: bool = False
    paragraph_name: str | None = None

    def display_text(self) -> str:
        """Current verse text, rebuilt from the words when they exist."""
        if self.words is not None:
            return " ".join(word.text for word in self.words)
        return self.text

    def effective_start(self) -> float:
        """Start of the first word in word mode, else the verse start."""
        if self.words:
            return self.words[0].start
        return self.start

    def refresh_text(self) -> None:
        if self.words is None:
            return
        joined = self.display_text()
        tag = self.text[:2]
        if tag in _WALAOKE_TAGS and not joined.startswith(tag):
            joined = "{} {}".format(tag, joined)
        self.text = joined

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "start": self.start,
            "verse": self.text,
            "id": self.id,
        }
        if self.authors is not None:
            data["authors"] = [author.to_dict() for author in self.authors]
        if self.words is not None:
            data["words"] = [word.to_dict() for word in self.words]
        if self.paragraph_name:
            data["paragraphName"] = self.paragraph_name
        if self.is_background:
            data["isBackground"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerseEntry:
        authors = data.get("authors")
        words = data.get("words")
        return cls(
            id=str(data["id"]),
            start=float(data.get("start", 0)),
            text=str(data.get("verse", "")),
            authors=None if authors is None else [AuthorEntry.from_dict(a) for a in authors],
            words=None if words is None else [WordEntry.from_dict(w) for w in words],
            is_background=bool(data.get("isBackground", False)),
            paragraph_name=data.get("paragraphName") or None,
        )


@dataclass
class Document:
    """The complete synchronized-lyrics document.

    WHY: Formatters need the verses and the canonical author list (for
    TTML agents and LRC voice numbering) together.

    RULES:
    - verses are in playback order
    - authors is the registry snapshot with every ``checked`` False
    - source_name is the stem used to name exported files
    """

    verses: list[VerseEntry] = field(default_factory=list)
    authors: list[AuthorEntry] = field(default_factory=list)
    source_name: str = ""

    def to_list(self) -> list[dict[str, Any]]:
        return [verse.to_dict() for verse in self.verses]

    @classmethod
    def from_list(
        cls,
        data: list[dict[str, Any]],
        source_name: str = "",
    ) -> Document:
        """Rebuild a Document from the JSON export.

        The registry is recovered from the first author list found,
        since every list carries the full registry in order.
        """
        verses = [VerseEntry.from_dict(item) for item in data]
        registry: list[AuthorEntry] = []
        for verse in verses:
            source = verse.authors
            if not source and verse.words:
                source = verse.words[0].authors
            if source:
                registry = [replace(a, checked=False) for a in source]
                break
        return cls(verses=verses, authors=registry, source_name=source_name)

    def all_ids(self) -> list[str]:
        ids: list[str] = []
        for verse in self.verses:
            ids.append(verse.id)
            for word in verse.words or []:
                ids.append(word.id)
        return ids
