"""Source parsers: plain text, LRC, TTML, and JSON into a Document.

WHY: The CLI, the API and LyricsSession all need "turn this text into a
Document" without caring which format it is. load_document() is that
single entry point.

HOW: PARSERS maps source-format keys (see config.SOURCE_FORMATS) to
parser functions sharing one signature. TTML and JSON parsers return
None for an invalid file; the others always return a Document.

RULES:
- Keys are the config source-format constants
- The caller's AuthorRegistry is never mutated by a parser
- Unknown keys raise ValueError
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from lyric_sync.config import JSON_SOURCE, LRC_SOURCE, PLAIN_TEXT, TTML_SOURCE
from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.ir import Document
from lyric_sync.parsers.json_source import parse_json_source
from lyric_sync.parsers.lrc import parse_lrc_source
from lyric_sync.parsers.plain_text import parse_plain_text
from lyric_sync.parsers.ttml import parse_ttml_source

logger = logging.getLogger(__name__)

ParserFunc = Callable[[str, Optional[AuthorRegistry], bool, str], Optional[Document]]


def _parse_json(
    source: str,
    registry: AuthorRegistry | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Optional[Document]:
    # The export carries its own authors and word lists
    return parse_json_source(source, source_name=source_name)


PARSERS: dict[str, ParserFunc] = {
    PLAIN_TEXT: parse_plain_text,
    LRC_SOURCE: parse_lrc_source,
    TTML_SOURCE: parse_ttml_source,
    JSON_SOURCE: _parse_json,
}


def load_document(
    content: str,
    source_format: str,
    authors: AuthorRegistry | Iterable[str] | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Optional[Document]:
    """Parse ``content`` with the parser registered for ``source_format``.

    Args:
        content: Raw source text.
        source_format: A key of PARSERS.
        authors: An AuthorRegistry, or plain author names.
        word_by_word: Build word lists for every verse.
        source_name: Stem used to name exported files.

    Returns:
        The Document, or None when a TTML/JSON source is invalid.

    Raises:
        ValueError: If ``source_format`` is not a known parser key.
    """
    parser = PARSERS.get(source_format)
    if parser is None:
        raise ValueError(
            "Unknown source format '{}'. Available: {}".format(
                source_format, ", ".join(sorted(PARSERS))
            )
        )
    if authors is None or isinstance(authors, AuthorRegistry):
        registry = authors
    else:
        registry = AuthorRegistry.from_names(authors)

    document = parser(content, registry, word_by_word, source_name)
    if document is not None:
        logger.info(
            "Imported %d verse(s) from %s source %s",
            len(document.verses), source_format, source_name or "<text>",
        )
    return document


__all__ = [
    "PARSERS",
    "load_document",
    "parse_json_source",
    "parse_lrc_source",
    "parse_plain_text",
    "parse_ttml_source",
]
