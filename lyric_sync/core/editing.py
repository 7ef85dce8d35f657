"""Edit operations on a synchronized-lyrics Document.

WHY: After import, a Document is refined by hand: lines are split and
joined, words retyped, timestamps tapped in while the song plays, and
singers assigned. Every such change goes through this module so the
Document stays consistent after any sequence of edits.

HOW: Plain functions taking the Document and integer indexes.
Navigation is index based: a Position is (verse_index, word_index) and
next_position()/previous_position() walk verses and words in playback
order.

RULES:
- Every new verse or word gets a fresh id from new_id()
- Author lists are always copied with copy_authors(), never shared
- Verse text is refreshed from the words after every word change; a
  leading Walaoke tag kept in the text by LRC import is preserved
- Out-of-range indexes and unknown ids are a no-op: functions return
  None or False and leave the Document untouched
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from lyric_sync.core.ir import (
    AuthorEntry,
    Document,
    VerseEntry,
    WordEntry,
    copy_authors,
    new_id,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Position:
    """A verse, or a word inside a verse when word_index is set."""

    verse_index: int
    word_index: Optional[int] = None


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def get_verse(doc: Document, verse_index: int) -> Optional[VerseEntry]:
    if 0 <= verse_index < len(doc.verses):
        return doc.verses[verse_index]
    return None


def get_word(doc: Document, verse_index: int, word_index: int) -> Optional[WordEntry]:
    verse = get_verse(doc, verse_index)
    if verse is None or not verse.words:
        return None
    if 0 <= word_index < len(verse.words):
        return verse.words[word_index]
    return None


def find_verse_index(doc: Document, verse_id: str) -> int:
    """Index of the verse with ``verse_id`` (or owning a word with it), else -1."""
    for index, verse in enumerate(doc.verses):
        if verse.id == verse_id:
            return index
        if verse.words and any(word.id == verse_id for word in verse.words):
            return index
    return -1


def _is_valid(doc: Document, position: Position) -> bool:
    if position.word_index is None:
        return get_verse(doc, position.verse_index) is not None
    return get_word(doc, position.verse_index, position.word_index) is not None


# ---------------------------------------------------------------------------
# Structural edits
# ---------------------------------------------------------------------------


def insert_verse_after(
    doc: Document,
    index: int,
    template: VerseEntry | None = None,
    current_time: float | None = None,
) -> Optional[VerseEntry]:
    """Insert an empty verse after ``index`` (``-1`` inserts at the top).

    The new verse copies the template's authors (the verse at ``index``
    when no template is given) and starts at ``current_time`` when the
    song is playing, else at the template's start. In word mode it gets
    one empty placeholder word.
    """
    if not -1 <= index < len(doc.verses):
        return None
    if template is None:
        template = get_verse(doc, index)

    start = current_time
    if start is None:
        start = template.effective_start() if template is not None else 0.0
    authors = None
    if template is not None and template.authors is not None:
        authors = copy_authors(template.authors)
    elif doc.authors:
        authors = copy_authors(doc.authors)

    words = None
    if template is not None and template.words is not None:
        word_authors = template.words[-1].authors if template.words else authors
        words = [WordEntry(id=new_id(), start=start, text="", authors=copy_authors(word_authors))]

    verse = VerseEntry(id=new_id(), start=start, text="", authors=authors, words=words)
    doc.verses.insert(index + 1, verse)
    return verse


def split_word_verse_at(
    doc: Document,
    verse_index: int,
    word_index: int,
    current_time: float | None = None,
) -> Optional[VerseEntry]:
    """Move the words after ``word_index`` into a new verse below.

    The new verse starts at ``current_time`` when given (song playing),
    else at the first moved word, else at the last remaining word. When
    no word follows the split point the new verse holds one empty
    placeholder word carrying that start.
    """
    verse = get_verse(doc, verse_index)
    if verse is None or not verse.words or not 0 <= word_index < len(verse.words):
        return None

    moved = verse.words[word_index + 1:]
    del verse.words[word_index + 1:]
    verse.refresh_text()

    if current_time is not None:
        start = current_time
    elif moved:
        start = moved[0].start
    else:
        start = verse.words[-1].start

    if not moved:
        moved = [WordEntry(id=new_id(), start=start, text="", authors=copy_authors(verse.authors))]

    new_verse = VerseEntry(
        id=new_id(),
        start=start,
        text="",
        authors=copy_authors(verse.authors) if verse.authors is not None else None,
        words=moved,
    )
    new_verse.refresh_text()
    doc.verses.insert(verse_index + 1, new_verse)
    return new_verse


def delete_word_or_verse(
    doc: Document,
    verse_index: int,
    word_index: int | None = None,
) -> bool:
    """Delete a word, or the whole verse when it is the verse's last word.

    With ``word_index`` None the verse itself is deleted.
    """
    verse = get_verse(doc, verse_index)
    if verse is None:
        return False
    if word_index is None:
        del doc.verses[verse_index]
        return True
    if not verse.words or not 0 <= word_index < len(verse.words):
        return False
    if len(verse.words) == 1:
        del doc.verses[verse_index]
        return True
    del verse.words[word_index]
    verse.refresh_text()
    return True


def auto_split_on_whitespace(
    doc: Document,
    verse_index: int,
    word_index: int,
    new_text: str,
) -> list[WordEntry]:
    """Commit typed text to a word, splitting on embedded whitespace.

    The first token stays in the edited word; each following token is
    inserted right after it as a sibling with the same start and a copy
    of its authors. Empty text deletes the word (and the verse when it
    was the last word). Returns the words now holding the text.
    """
    word = get_word(doc, verse_index, word_index)
    if word is None:
        return []
    if new_text == "":
        delete_word_or_verse(doc, verse_index, word_index)
        return []

    tokens = _WHITESPACE_RE.split(new_text)
    word.text = tokens[0]
    siblings = [
        WordEntry(
            id=new_id(),
            start=word.start,
            text=token,
            authors=copy_authors(word.authors),
            is_background=word.is_background,
        )
        for token in tokens[1:]
    ]
    verse = doc.verses[verse_index]
    verse.words[word_index + 1:word_index + 1] = siblings
    verse.refresh_text()
    return [word] + siblings


def update_verse_text(doc: Document, verse_index: int, text: str) -> bool:
    """Replace a line-mode verse's text; empty text deletes the verse."""
    verse = get_verse(doc, verse_index)
    if verse is None:
        return False
    if text == "":
        del doc.verses[verse_index]
        return True
    verse.text = text
    return True


def set_paragraph_name(doc: Document, verse_index: int, name: str | None) -> bool:
    """Mark a verse as the first of a stanza; blank clears the mark."""
    verse = get_verse(doc, verse_index)
    if verse is None:
        return False
    verse.paragraph_name = name or None
    return True


def set_background(
    doc: Document,
    verse_index: int,
    is_background: bool,
    word_index: int | None = None,
) -> bool:
    if word_index is None:
        verse = get_verse(doc, verse_index)
        if verse is None:
            return False
        verse.is_background = is_background
        return True
    word = get_word(doc, verse_index, word_index)
    if word is None:
        return False
    word.is_background = is_background
    return True


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


def _set_checked(authors: Iterable[AuthorEntry] | None, author_id: str, checked: bool) -> bool:
    found = False
    for author in authors or []:
        if author.id == author_id:
            author.checked = checked
            found = True
    return found


def set_verse_author(doc: Document, verse_index: int, author_id: str, checked: bool) -> bool:
    """Check or uncheck a singer for a whole verse and each of its words."""
    verse = get_verse(doc, verse_index)
    if verse is None:
        return False
    found = _set_checked(verse.authors, author_id, checked)
    for word in verse.words or []:
        found = _set_checked(word.authors, author_id, checked) or found
    return found


def set_word_author(
    doc: Document,
    verse_index: int,
    word_index: int,
    author_id: str,
    checked: bool,
) -> bool:
    word = get_word(doc, verse_index, word_index)
    if word is None:
        return False
    return _set_checked(word.authors, author_id, checked)


def assign_authors_to_range(
    doc: Document,
    first_id: str,
    last_id: str,
    author_ids: Iterable[str],
) -> int:
    """Set exactly ``author_ids`` as the singers of a range of verses.

    The range runs between the two verse ids inclusive, in either order.
    Every author of every verse and word in it is checked iff its id is
    in ``author_ids``. Returns the number of verses changed.
    """
    first = find_verse_index(doc, first_id)
    last = find_verse_index(doc, last_id)
    if first == -1 or last == -1:
        return 0
    if first > last:
        first, last = last, first

    selected = set(author_ids)
    for verse in doc.verses[first:last + 1]:
        for author in verse.authors or []:
            author.checked = author.id in selected
        for word in verse.words or []:
            for author in word.authors:
                author.checked = author.id in selected
    logger.debug("Assigned %d author(s) to verses %d-%d", len(selected), first, last)
    return last - first + 1


# ---------------------------------------------------------------------------
# Navigation and syncing
# ---------------------------------------------------------------------------


def first_position(doc: Document) -> Optional[Position]:
    if not doc.verses:
        return None
    verse = doc.verses[0]
    return Position(0, 0) if verse.words else Position(0)


def next_position(doc: Document, position: Position) -> Optional[Position]:
    """The position after ``position`` in playback order, or None at the end.

    Word-synced verses are walked word by word; a verse without words is
    a single stop.
    """
    if not _is_valid(doc, position):
        return None
    verse = doc.verses[position.verse_index]
    if position.word_index is not None and verse.words and position.word_index + 1 < len(verse.words):
        return Position(position.verse_index, position.word_index + 1)
    following = position.verse_index + 1
    if following >= len(doc.verses):
        return None
    return Position(following, 0) if doc.verses[following].words else Position(following)


def previous_position(doc: Document, position: Position) -> Optional[Position]:
    """The position before ``position`` in playback order, or None at the start."""
    if not _is_valid(doc, position):
        return None
    if position.word_index:
        return Position(position.verse_index, position.word_index - 1)
    preceding = position.verse_index - 1
    if preceding < 0:
        return None
    words = doc.verses[preceding].words
    return Position(preceding, len(words) - 1) if words else Position(preceding)


def set_start(doc: Document, position: Position, start: float) -> bool:
    """Set the start time of the verse or word at ``position``."""
    if not _is_valid(doc, position):
        return False
    verse = doc.verses[position.verse_index]
    if position.word_index is None:
        verse.start = start
    else:
        verse.words[position.word_index].start = start
        if position.word_index == 0:
            verse.start = start
    return True


def sync_position(doc: Document, position: Position, time: float) -> Optional[Position]:
    """Tap "starts now": time the entry at ``position`` and advance.

    Returns the next position to sync, or None at the end (or when
    ``position`` is invalid).
    """
    if not set_start(doc, position, time):
        return None
    return next_position(doc, position)


def mark_line_end(doc: Document, position: Position, time: float) -> Optional[Position]:
    """Tap "ends here": the entry after ``position`` starts at ``time``.

    Returns that following position, or None when there is none.
    """
    following = next_position(doc, position)
    if following is None:
        return None
    set_start(doc, following, time)
    return following


def active_position(doc: Document, time: float) -> Optional[Position]:
    """The entry being sung at ``time`` during playback.

    The last verse whose non-zero effective start is before ``time``,
    and inside it the last word with a non-zero start before ``time``.
    Untimed (zero) entries are never active.
    """
    active: Optional[Position] = None
    for index, verse in enumerate(doc.verses):
        start = verse.effective_start()
        if start != 0 and start < time:
            active = Position(index)
    if active is None:
        return None

    words = doc.verses[active.verse_index].words
    if not words:
        return active
    for word_index in range(len(words) - 1, -1, -1):
        word = words[word_index]
        if word.start != 0 and word.start < time:
            return Position(active.verse_index, word_index)
    return active
