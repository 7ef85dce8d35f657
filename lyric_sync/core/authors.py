"""Author registry, fuzzy singer matching, and checked-state propagation.

WHY: Singer information arrives from three independent places: the
author names typed by the user, LRC duet tags (v1:/v2:/v3:, M:/F:/D:),
and TTML ``ttm:agent`` metadata. TTML files name singers with their own
ids and spellings ("Beyonce" vs "Beyoncé Knowles"), so the registry
reconciles them into one canonical, ordered author list.

HOW: AuthorRegistry owns the canonical list. TTML person agents are
matched to existing authors by edit distance on normalized names; a
match records the agent's ``xml:id`` as an alias, a miss appends a new
author with id ``p<n>``. Group agents are kept aside and resolved by
substring containment. resolve_agent() turns a ``ttm:agent`` reference
into a fresh author list with the right entries checked.

RULES:
- Normalization: lowercase, drop every non-alphanumeric character
- A TTML singer matches an author when the distance is below
  AUTHOR_MATCH_DISTANCE (default 5)
- resolve_agent() never raises; unknown references give the full list
  with nothing checked
- Group fallback: no member name found and exactly two authors exist
  -> both are checked
- Every list handed out is an independent copy
"""

from __future__ import annotations

import logging
from typing import Iterable

from rapidfuzz.distance import Levenshtein

from lyric_sync.config import AUTHOR_MATCH_DISTANCE
from lyric_sync.core.ir import AuthorEntry, VerseEntry, WordEntry, copy_authors, new_id

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Lowercase a name and keep only its letters and digits."""
    return "".join(ch for ch in name.lower() if ch.isalnum())


def levenshtein_distance(s1: str, s2: str) -> int:
    """Unit-cost edit distance between two names."""
    return Levenshtein.distance(s1, s2)


class AuthorRegistry:
    """The canonical, ordered list of singers for one document.

    Usage::

        registry = AuthorRegistry.from_names(["Alice", "Bob"])
        registry.register_agent("v1", "alice")    # alias of Alice
        registry.register_group("v1000", "Alice & Bob")
        registry.resolve_agent("v1000")           # both checked
    """

    def __init__(
        self,
        authors: Iterable[AuthorEntry] = (),
        match_distance: int = AUTHOR_MATCH_DISTANCE,
    ) -> None:
        self._authors: list[AuthorEntry] = copy_authors(authors)
        for author in self._authors:
            author.checked = False
        self._match_distance = match_distance
        # TTML xml:id -> canonical author id
        self._aliases: dict[str, str] = {}
        # TTML group xml:id -> group display name
        self._groups: dict[str, str] = {}

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        match_distance: int = AUTHOR_MATCH_DISTANCE,
    ) -> AuthorRegistry:
        """Build a registry from user-entered names (blank names skipped)."""
        authors = [
            AuthorEntry(id=new_id(), name=name.strip())
            for name in names
            if name and name.strip()
        ]
        return cls(authors, match_distance=match_distance)

    def __len__(self) -> int:
        return len(self._authors)

    def __bool__(self) -> bool:
        return bool(self._authors)

    @property
    def match_distance(self) -> int:
        return self._match_distance

    @property
    def authors(self) -> list[AuthorEntry]:
        """A fresh, fully unchecked copy of the canonical list."""
        return self.snapshot()

    def snapshot(self) -> list[AuthorEntry]:
        return copy_authors(self._authors)

    def copy(self) -> AuthorRegistry:
        clone = AuthorRegistry(self._authors, match_distance=self._match_distance)
        clone._aliases = dict(self._aliases)
        clone._groups = dict(self._groups)
        return clone

    def index_of(self, author_id: str) -> int:
        for index, author in enumerate(self._authors):
            if author.id == author_id:
                return index
        return -1

    def checked(self, *indexes: int) -> list[AuthorEntry]:
        """Copy of the list with the authors at ``indexes`` checked.

        Indexes past the end of the registry are ignored.
        """
        authors = self.snapshot()
        for index in indexes:
            if 0 <= index < len(authors):
                authors[index].checked = True
        return authors

    # ------------------------------------------------------------------
    # TTML agent registration
    # ------------------------------------------------------------------

    def find_match(self, name: str) -> AuthorEntry | None:
        """Return the first author within the edit-distance threshold."""
        target = normalize_name(name)
        for author in self._authors:
            distance = levenshtein_distance(normalize_name(author.name), target)
            if distance < self._match_distance:
                return author
        return None

    def register_agent(self, agent_id: str | None, name: str | None) -> AuthorEntry:
        """Register a TTML person agent, merging it into a known author.

        Returns the canonical author the agent now refers to.
        """
        if name:
            match = self.find_match(name)
            if match is not None:
                if agent_id:
                    self._aliases[agent_id] = match.id
                logger.debug("TTML agent %s matched author %s", agent_id, match.name)
                return match
            author = AuthorEntry(id="p{}".format(len(self._authors) + 1), name=name)
        else:
            position = len(self._authors) + 1
            author = AuthorEntry(id="p{}".format(position), name="Author {}".format(position))
        self._authors.append(author)
        if agent_id:
            self._aliases[agent_id] = author.id
        logger.debug("TTML agent %s added as %s (%s)", agent_id, author.id, author.name)
        return author

    def register_group(self, agent_id: str | None, name: str | None) -> None:
        """Remember a TTML group agent for later resolution."""
        self._groups[agent_id or new_id()] = name or new_id()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _author_index_for_agent(self, agent_id: str) -> int:
        canonical = self._aliases.get(agent_id)
        if canonical is not None:
            return self.index_of(canonical)
        aliased = set(self._aliases.values())
        for index, author in enumerate(self._authors):
            if author.id not in aliased and "p{}".format(index + 1) == agent_id:
                return index
        return -1

    def resolve_agent(self, agent_id: str | None) -> list[AuthorEntry]:
        """Map a ``ttm:agent`` reference to a fresh author list.

        RULES:
        - Person alias (or positional ``p<n>``) -> that author checked
        - Group -> members whose normalized name occurs in the group name
        - Anything else -> the full list, nothing checked
        """
        authors = self.snapshot()
        if not agent_id:
            return authors

        index = self._author_index_for_agent(agent_id)
        if index != -1:
            authors[index].checked = True
            return authors

        group_name = self._groups.get(agent_id)
        if group_name is None:
            logger.debug("Unresolved TTML agent reference %s", agent_id)
            return authors

        normalized_group = normalize_name(group_name)
        updated = False
        for author in authors:
            member = normalize_name(author.name)
            if member and member in normalized_group:
                author.checked = True
                updated = True
        if not updated and len(authors) == 2:
            for author in authors:
                author.checked = True
        return authors


def propagate_checked(
    verse: VerseEntry,
    words: list[WordEntry] | None = None,
) -> None:
    """Reconcile checked authors between a verse and its words.

    Two passes, in order:
      1. word -> verse: an author checked in every word is checked on
         the verse
      2. verse -> word: an author checked on the verse is checked in
         every word of ``verse.words``

    ``words`` lets the first pass read words that were parsed but not
    attached to the verse (TTML import outside word-sync mode).
    """
    if verse.authors is None:
        return

    source_words = verse.words if words is None else words
    if source_words:
        for author in verse.authors:
            if all(_is_checked(word.authors, author.id) for word in source_words):
                author.checked = True

    if not verse.words:
        return
    for author in verse.authors:
        if not author.checked:
            continue
        for word in verse.words:
            for word_author in word.authors:
                if word_author.id == author.id:
                    word_author.checked = True


def _is_checked(authors: list[AuthorEntry], author_id: str) -> bool:
    for author in authors:
        if author.id == author_id:
            return author.checked
    return False
