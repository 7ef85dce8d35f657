"""TTML formatter: Apple-Music-style timed lyrics XML.

WHY: TTML is the format music services ingest for word-synced lyrics
with singer attribution and background vocals.

HOW: An ElementTree document is built with literal prefixed names
(``ttm:agent``, ``itunes:songPart``) and the namespace declarations set
as attributes on ``tt``, so the output reads exactly like hand-written
Apple TTML. The head lists one person agent per registry author
(``p1``, ``p2``...); group agents (``g1``...) are added lazily the first
time a combination of singers is needed. Stanzas become ``div``
elements, verses ``p`` elements, words ``span`` elements.

RULES:
- Each ``p`` ends where the next verse starts (effective start); the
  last ``p`` ends at its own last start
- Each word span ends where the next word starts; the last one at the
  paragraph end
- A new ``div`` opens at every verse with paragraph_name (except the
  first verse, which names the initial div); the closed div ends at the
  new div's begin
- Background words inside a foreground verse are wrapped in
  ``span ttm:role="x-bg"``; background verses get the role on the ``p``
- A word-synced verse's paragraph agent uses recomputed authors: checked
  iff checked in every word
- Group display name: ``"A, B & C"``, names in alphabetical order
- Output suffix: ``.ttml``; media type ``application/xml``
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

from lyric_sync.core.ir import AuthorEntry, Document, VerseEntry, copy_authors
from lyric_sync.core.timestamps import TTML, format_seconds
from lyric_sync.formatters.base import BaseFormatter, FormatterOutput
from lyric_sync.parsers.ttml import ITUNES_NS, TT_NS, TTM_NS, TTS_NS


@dataclass
class TTMLExportOptions:
    """Switches for TTML export.

    Attributes:
        paragraph_author: Put ``ttm:agent`` on every ``p``.
        word_author: Put ``ttm:agent`` on every word span (some players
            reject this).
        add_space: End every span but the last of a verse with a space.
        word_by_word: Emit one span per word.
        duration: Song length in seconds; sets ``body@dur`` and the end
            of every open ``div``.
        lang: Value of ``xml:lang``.
    """

    paragraph_author: bool = True
    word_author: bool = False
    add_space: bool = True
    word_by_word: bool = True
    duration: Optional[float] = None
    lang: str = "en"


def format_group_name(names: list[str]) -> str:
    """``["A", "B", "C"]`` -> ``"A, B & C"``."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return "{} & {}".format(", ".join(names[:-1]), names[-1])


def _ts(seconds: float) -> str:
    return format_seconds(seconds, TTML)


class _AgentTable:
    """Person agents up front, group agents created on first use."""

    def __init__(self, metadata: ET.Element, authors: list[AuthorEntry]) -> None:
        self._metadata = metadata
        self._groups: dict[str, str] = {}
        for index, author in enumerate(authors):
            self._add("person", "p{}".format(index + 1), author.name)

    def _add(self, agent_type: str, agent_id: str, name: str) -> None:
        agent = ET.SubElement(self._metadata, "ttm:agent", {"type": agent_type, "xml:id": agent_id})
        ET.SubElement(agent, "ttm:name").text = name

    def agent_for(self, authors: list[AuthorEntry] | None) -> Optional[str]:
        """Agent id for the checked authors, or None when nobody is checked."""
        checked = [(index, author) for index, author in enumerate(authors or []) if author.checked]
        if not checked:
            return None
        if len(checked) == 1:
            return "p{}".format(checked[0][0] + 1)
        group = format_group_name(sorted(author.name for _, author in checked))
        if group not in self._groups:
            self._groups[group] = "g{}".format(len(self._groups) + 1)
            self._add("group", self._groups[group], group)
        return self._groups[group]


def _authors_in_every_word(verse: VerseEntry) -> list[AuthorEntry]:
    authors = copy_authors(verse.words[0].authors)
    for author in authors:
        author.checked = all(
            any(other.id == author.id and other.checked for other in word.authors)
            for word in verse.words
        )
    return authors


class TTMLFormatter(BaseFormatter):
    """Export a Document as TTML."""

    def __init__(self, options: TTMLExportOptions | None = None) -> None:
        self.options = options or TTMLExportOptions()

    @property
    def name(self) -> str:
        return "TTML"

    @property
    def suffix(self) -> str:
        return ".ttml"

    def format(self, document: Document) -> list[FormatterOutput]:
        root = self.build_tree(document)
        content = ET.tostring(root, encoding="unicode")
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="application/xml",
            )
        ]

    def build_tree(self, document: Document) -> ET.Element:
        opts = self.options
        root = ET.Element("tt", {
            "xmlns": TT_NS,
            "xmlns:ttm": TTM_NS,
            "xml:lang": opts.lang,
            "xmlns:tts": TTS_NS,
            "xmlns:itunes": ITUNES_NS,
        })
        head = ET.SubElement(root, "head")
        metadata = ET.SubElement(head, "metadata")
        agents = _AgentTable(metadata, document.authors)

        body = ET.SubElement(root, "body")
        if opts.duration is not None:
            body.set("dur", _ts(opts.duration))

        verses = document.verses
        if not verses:
            return root

        div = self._open_div(body, verses[0].effective_start())
        for index, verse in enumerate(verses):
            if verse.paragraph_name:
                if index != 0:
                    boundary = verse.effective_start()
                    div.set("end", _ts(boundary))
                    div = self._open_div(body, boundary)
                div.set("itunes:songPart", verse.paragraph_name)

            if index + 1 < len(verses):
                end = verses[index + 1].effective_start()
            elif verse.words:
                end = verse.words[-1].start
            else:
                end = verse.start
            self._add_paragraph(div, verse, end, agents)
        return root

    def _open_div(self, body: ET.Element, begin: float) -> ET.Element:
        div = ET.SubElement(body, "div", {"begin": _ts(begin)})
        if self.options.duration is not None:
            div.set("end", _ts(self.options.duration))
        return div

    def _add_paragraph(
        self,
        div: ET.Element,
        verse: VerseEntry,
        end: float,
        agents: _AgentTable,
    ) -> None:
        opts = self.options
        p = ET.SubElement(div, "p", {"begin": _ts(verse.effective_start()), "end": _ts(end)})

        if verse.words and opts.word_by_word:
            last = len(verse.words) - 1
            for index, word in enumerate(verse.words):
                parent = p
                if word.is_background and not verse.is_background:
                    parent = ET.SubElement(p, "span", {"ttm:role": "x-bg"})
                word_end = verse.words[index + 1].start if index != last else end
                span = ET.SubElement(parent, "span", {"begin": _ts(word.start), "end": _ts(word_end)})
                span.text = word.text + (" " if opts.add_space and index != last else "")
                if opts.word_author:
                    agent = agents.agent_for(word.authors)
                    if agent is not None:
                        span.set("ttm:agent", agent)
        else:
            p.text = verse.display_text()

        if verse.is_background:
            p.set("ttm:role", "x-bg")

        authors = verse.authors
        if verse.words:
            authors = _authors_in_every_word(verse)
        if authors is not None and opts.paragraph_author:
            agent = agents.agent_for(authors)
            if agent is not None:
                p.set("ttm:agent", agent)
