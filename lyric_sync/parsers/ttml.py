"""TTML import: paragraphs, timed spans, background vocals, and agents.

WHY: Music services distribute word-synced lyrics as TTML. A file
carries its own singer metadata (``ttm:agent`` elements, optionally
named, optionally grouped) that must be merged with the authors the
user already entered, and background vocals that must keep their flag.

HOW: The XML is parsed with ElementTree. Agents are registered on a
copy of the caller's AuthorRegistry (person agents fuzzy-matched, group
agents set aside). Every ``p`` with a ``begin`` becomes a verse; its
direct ``span`` children become words, descending through background
wrapper spans to the innermost timed span. Checked authors are then
reconciled between each verse and its words.

RULES:
- Any XML or timestamp error aborts the whole import: parse_ttml_source
  returns None and nothing is registered
- Paragraphs without ``begin`` are skipped
- ``ttm:role="x-bg"`` on the paragraph or on any span level marks
  background
- Spans without ``begin`` or without text are skipped
- Words are attached only in word-sync mode, but verse text is rebuilt
  from the spans whenever spans exist
- paragraph_name comes from the parent div's ``itunes:songPart`` when
  the paragraph is that div's first child
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from lyric_sync.core.authors import AuthorRegistry, propagate_checked
from lyric_sync.core.ir import Document, VerseEntry, WordEntry, new_id
from lyric_sync.core.timestamps import parse_ttml_value

logger = logging.getLogger(__name__)

TT_NS = "http://www.w3.org/ns/ttml"
TTM_NS = "http://www.w3.org/ns/ttml#metadata"
TTS_NS = "http://www.w3.org/ns/ttml#styling"
ITUNES_NS = "http://itunes.apple.com/lyric-ttml-extensions"
XML_NS = "http://www.w3.org/XML/1998/namespace"

BACKGROUND_ROLE = "x-bg"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _attr(element: ET.Element, namespace: str, name: str) -> Optional[str]:
    """Read a namespaced attribute, accepting an unbound prefix too."""
    value = element.get("{%s}%s" % (namespace, name))
    if value is None:
        value = element.get(name)
    return value


def _text(element: ET.Element) -> str:
    return "".join(element.itertext())


def _is_background(element: ET.Element) -> bool:
    return _attr(element, TTM_NS, "role") == BACKGROUND_ROLE


def _register_agents(root: ET.Element, registry: AuthorRegistry) -> None:
    for element in root.iter():
        if _local(element.tag) != "agent":
            continue
        name_element = next(
            (child for child in element.iter() if _local(child.tag) == "name"),
            None,
        )
        name = _text(name_element) if name_element is not None else None
        agent_id = _attr(element, XML_NS, "id")
        if element.get("type") == "group":
            registry.register_group(agent_id, name)
        else:
            registry.register_agent(agent_id, name)


def _paragraph_name(paragraph: ET.Element, parents: dict[ET.Element, ET.Element]) -> Optional[str]:
    parent = parents.get(paragraph)
    if parent is None or len(parent) == 0 or parent[0] is not paragraph:
        return None
    return _attr(parent, ITUNES_NS, "songPart") or _attr(parent, ITUNES_NS, "song-part")


def _parse_words(paragraph: ET.Element, registry: AuthorRegistry) -> tuple[bool, list[WordEntry]]:
    """Return (paragraph has spans, parsed words)."""
    spans = [child for child in paragraph if _local(child.tag) == "span"]
    words: list[WordEntry] = []
    for span in spans:
        is_background = _is_background(span)
        inner = span.find(".//{*}span")
        while inner is not None:
            span = inner
            if not is_background:
                is_background = _is_background(span)
            inner = span.find(".//{*}span")

        begin = span.get("begin")
        content = _text(span)
        if not begin or not content:
            continue
        words.append(WordEntry(
            id=new_id(),
            start=parse_ttml_value(begin),
            text=content.strip(),
            authors=registry.resolve_agent(_attr(span, TTM_NS, "agent")),
            is_background=is_background,
        ))
    return bool(spans), words


def _parse_document(
    root: ET.Element,
    registry: AuthorRegistry,
    word_by_word: bool,
) -> list[VerseEntry]:
    _register_agents(root, registry)
    parents = {child: parent for parent in root.iter() for child in parent}

    verses: list[VerseEntry] = []
    for paragraph in root.iter():
        if _local(paragraph.tag) != "p":
            continue
        begin = paragraph.get("begin")
        if not begin:
            continue

        verse = VerseEntry(
            id=new_id(),
            start=parse_ttml_value(begin),
            text=_text(paragraph),
            authors=registry.resolve_agent(_attr(paragraph, TTM_NS, "agent")) if registry else None,
            is_background=_is_background(paragraph),
            paragraph_name=_paragraph_name(paragraph, parents),
        )
        has_spans, words = _parse_words(paragraph, registry)
        if has_spans:
            if word_by_word:
                verse.words = words
            verse.text = " ".join(word.text for word in words)
        propagate_checked(verse, words if has_spans else None)
        verses.append(verse)
    return verses


def parse_ttml_with_registry(
    source: str,
    registry: AuthorRegistry | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Optional[tuple[Document, AuthorRegistry]]:
    """Parse TTML text, returning the Document and the merged registry.

    The caller's registry is never modified. Returns None when the file
    is not valid XML or holds a malformed timestamp.
    """
    working = registry.copy() if registry is not None else AuthorRegistry()
    try:
        root = ET.fromstring(source)
        verses = _parse_document(root, working, word_by_word)
    except (ET.ParseError, ValueError) as exc:
        logger.warning("TTML import failed, document left unchanged: %s", exc)
        return None
    document = Document(verses=verses, authors=working.snapshot(), source_name=source_name)
    return document, working


def parse_ttml_source(
    source: str,
    registry: AuthorRegistry | None = None,
    word_by_word: bool = False,
    source_name: str = "",
) -> Optional[Document]:
    """Parse TTML text into a Document, or None when the file is invalid.

    The returned Document's ``authors`` holds the merged registry (user
    authors plus any new TTML singers).
    """
    result = parse_ttml_with_registry(source, registry, word_by_word, source_name)
    return result[0] if result is not None else None
