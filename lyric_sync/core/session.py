"""One-document editing session: load, import once, replace wholesale.

WHY: A source (file, clipboard, embedded tags) is loaded, parsed exactly
once, then edited. Metadata extraction can finish after the user has
already moved on to another file; its late result must not overwrite
the newer source.

HOW: LyricsSession keeps a generation counter. load() bumps it and
drops the previous Document. import_document() parses the current
source the first time it is called and returns the cached Document
afterwards. apply_metadata() takes the generation it was started for
and is ignored when that generation is stale.

RULES:
- At most one Document per session
- Import runs once per loaded source
- A newer source always wins; results are never merged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from lyric_sync.config import DEFAULT_WORD_BY_WORD, PLAIN_TEXT
from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.ir import Document
from lyric_sync.parsers import load_document
from lyric_sync.parsers.embedded import EmbeddedLyrics, embedded_to_source

logger = logging.getLogger(__name__)


@dataclass
class LyricsSource:
    """Raw source text waiting to be imported."""

    content: str
    source_format: str = PLAIN_TEXT
    source_name: str = ""


class LyricsSession:
    """Holds the current source and its Document.

    Usage::

        session = LyricsSession(authors=["Alice", "Bob"])
        generation = session.load(LyricsSource(text, "lrc", "song"))
        doc = session.import_document()
    """

    def __init__(
        self,
        authors: AuthorRegistry | Iterable[str] | None = None,
        word_by_word: bool = DEFAULT_WORD_BY_WORD,
    ) -> None:
        if authors is None or isinstance(authors, AuthorRegistry):
            self.registry = authors if authors is not None else AuthorRegistry()
        else:
            self.registry = AuthorRegistry.from_names(authors)
        self.word_by_word = word_by_word
        self.generation = 0
        self.source: Optional[LyricsSource] = None
        self.document: Optional[Document] = None
        self._imported = False

    def load(self, source: LyricsSource) -> int:
        """Replace the current source and discard its Document.

        Returns the new generation, to be passed to apply_metadata().
        """
        self.generation += 1
        self.source = source
        self.document = None
        self._imported = False
        logger.debug("Loaded %s source %r (generation %d)",
                     source.source_format, source.source_name, self.generation)
        return self.generation

    def import_document(self) -> Optional[Document]:
        """Parse the current source once; later calls return the same Document.

        Returns None when nothing is loaded or the source was invalid.
        """
        if self._imported or self.source is None:
            return self.document
        self._imported = True
        self.document = load_document(
            self.source.content,
            self.source.source_format,
            authors=self.registry,
            word_by_word=self.word_by_word,
            source_name=self.source.source_name,
        )
        if self.document is not None:
            # TTML may have added singers
            self.registry = AuthorRegistry(
                self.document.authors, match_distance=self.registry.match_distance
            )
        return self.document

    def apply_metadata(self, generation: int, embedded: EmbeddedLyrics) -> bool:
        """Replace the source with embedded lyrics if still current.

        Returns False (and changes nothing) for a stale generation.
        """
        if generation != self.generation:
            logger.debug("Ignoring metadata for stale generation %d (current %d)",
                         generation, self.generation)
            return False
        source_format, content = embedded_to_source(embedded)
        name = self.source.source_name if self.source is not None else ""
        self.load(LyricsSource(content, source_format, name))
        return True
