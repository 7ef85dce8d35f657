"""Tests for the output formatters: LRC, TTML, JSON, lyrics text and positions."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET

import jsonschema
import pytest

from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.formatters import (
    FORMATTERS,
    LRCExportOptions,
    LRCFormatter,
    LyricsTextFormatter,
    SyncedJSONFormatter,
    TTMLExportOptions,
    TTMLFormatter,
    VersePositionsFormatter,
    create_formatter,
    resolve_format_keys,
)
from lyric_sync.formatters.base import FormatterOutput, verse_checked_ids
from lyric_sync.formatters.ttml import format_group_name
from lyric_sync.parsers.lrc import parse_lrc_source
from lyric_sync.parsers.ttml import ITUNES_NS, TT_NS, TTM_NS, parse_ttml_source

P_TAG = "{%s}p" % TT_NS
SPAN_TAG = "{%s}span" % TT_NS
DIV_TAG = "{%s}div" % TT_NS
AGENT_ATTR = "{%s}agent" % TTM_NS
ROLE_ATTR = "{%s}role" % TTM_NS


def _content(formatter, document) -> str:
    outputs = formatter.format(document)
    assert len(outputs) == 1
    assert isinstance(outputs[0], FormatterOutput)
    return outputs[0].content


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:

    def test_all_formatters_construct_without_arguments(self):
        for formatter_cls in FORMATTERS.values():
            formatter = formatter_cls()
            assert formatter.name
            assert formatter.suffix

    def test_create_formatter_passes_options(self):
        formatter = create_formatter("lrc", lrc_options=LRCExportOptions(keep_seconds=True))
        assert formatter.suffix == ".txt"
        ttml = create_formatter("ttml", ttml_options=TTMLExportOptions(lang="fr"))
        assert ttml.options.lang == "fr"

    def test_resolve_format_keys(self):
        assert resolve_format_keys("lrc, ttml") == ["lrc", "ttml"]
        with pytest.raises(ValueError, match="Unknown format 'bogus'"):
            resolve_format_keys("lrc,bogus")

    def test_verse_checked_ids_union(self, word_document, make_authors):
        verse = word_document.verses[1]
        assert verse_checked_ids(verse) == [a.id for a in make_authors()]


# ---------------------------------------------------------------------------
# LRC
# ---------------------------------------------------------------------------


class TestLRCFormatter:

    def test_default_word_by_word_output(self, word_document):
        content = _content(LRCFormatter(), word_document)
        assert content == (
            "[00:01.00]<00:01.00>hello <00:01.50>world \n"
            "[Chorus]\n"
            "[00:03.00]<00:03.00>we <00:03.40>sing \n"
            "[00:03.00]<00:04.00>(yeah) \n"
            "[00:06.00]outro"
        )

    def test_line_mode_document(self, line_document):
        content = _content(LRCFormatter(), line_document)
        assert content == (
            "[00:00.50]first line\n"
            "[00:02.25]second line\n"
            "[01:01.00]third line"
        )

    def test_round_trip_within_a_hundredth(self, line_document):
        content = _content(LRCFormatter(), line_document)
        reparsed = parse_lrc_source(content)
        assert len(reparsed.verses) == len(line_document.verses)
        for expected, verse in zip(line_document.verses, reparsed.verses):
            assert verse.start == pytest.approx(expected.start, abs=0.01)
            assert verse.text == expected.text

    def test_word_mode_round_trip_keeps_word_times(self, word_document):
        options = LRCExportOptions(put_background_in_new_line=False, add_paragraph_name=False)
        content = _content(LRCFormatter(options), word_document)
        reparsed = parse_lrc_source(content, word_by_word=True)
        assert len(reparsed.verses) == len(word_document.verses)
        for expected, verse in zip(word_document.verses, reparsed.verses):
            assert verse.effective_start() == pytest.approx(expected.effective_start(), abs=0.01)
            assert verse.display_text() == expected.display_text()
            if expected.words is not None:
                assert [w.text for w in verse.words] == [w.text for w in expected.words]
                assert [w.start for w in verse.words] == [
                    pytest.approx(w.start, abs=0.01) for w in expected.words
                ]

    def test_duet_tags(self, word_document):
        options = LRCExportOptions(keep_authors=True, keep_word_by_word=False)
        lines = _content(LRCFormatter(options), word_document).split("\n")
        assert lines[0] == "[00:01.00]v1: hello world"
        assert lines[2] == "[00:03.00]v3: we sing (yeah)"
        assert lines[3] == "[00:06.00]outro"

    def test_second_singer_alone_is_v2(self, word_document, make_authors):
        verse = word_document.verses[0]
        verse.authors = make_authors(word_document.authors[1].id)
        for word in verse.words:
            word.authors = make_authors(word_document.authors[1].id)
        options = LRCExportOptions(keep_authors=True, keep_word_by_word=False)
        assert _content(LRCFormatter(options), word_document).startswith("[00:01.00]v2: ")

    def test_line_mode_tags(self, word_document, make_authors):
        verse = word_document.verses[2]
        verse.authors = make_authors(word_document.authors[0].id)
        options = LRCExportOptions(keep_authors=True)
        assert _content(LRCFormatter(options), word_document).endswith("[00:06.00]v1: outro")

    def test_walaoke_tags(self, word_document):
        options = LRCExportOptions(keep_authors=True, keep_word_by_word=False, walaoke=True)
        lines = _content(LRCFormatter(options), word_document).split("\n")
        assert lines[0] == "[00:01.00]M: hello world"
        assert lines[2] == "[00:03.00]D: we sing (yeah)"

    def test_walaoke_female_first(self, word_document):
        options = LRCExportOptions(
            keep_authors=True, keep_word_by_word=False,
            walaoke=True, walaoke_is_male_first=False,
        )
        assert _content(LRCFormatter(options), word_document).startswith("[00:01.00]F: ")

    def test_background_verse_tag(self, word_document):
        word_document.verses[1].is_background = True
        options = LRCExportOptions(keep_authors=True, add_paragraph_name=False)
        lines = _content(LRCFormatter(options), word_document).split("\n")
        # no extra line break inside a background verse
        assert lines[1] == "[00:03.00]v3: [bg:] <00:03.00>we <00:03.40>sing <00:04.00>(yeah) "

    def test_background_on_same_line_when_disabled(self, word_document):
        options = LRCExportOptions(put_background_in_new_line=False, add_paragraph_name=False)
        lines = _content(LRCFormatter(options), word_document).split("\n")
        assert lines[1] == "[00:03.00]<00:03.00>we <00:03.40>sing <00:04.00>(yeah) "

    def test_keep_seconds(self, line_document):
        formatter = LRCFormatter(LRCExportOptions(keep_seconds=True))
        outputs = formatter.format(line_document)
        assert outputs[0].suffix == ".txt"
        assert outputs[0].content == "[0.5]first line\n[2.25]second line\n[61]third line"

    def test_empty_document(self):
        from lyric_sync.core.ir import Document

        assert _content(LRCFormatter(), Document()) == ""


# ---------------------------------------------------------------------------
# TTML
# ---------------------------------------------------------------------------


class TestTTMLFormatter:

    def _root(self, document, options=None):
        return ET.fromstring(_content(TTMLFormatter(options), document))

    def test_group_name(self):
        assert format_group_name(["A"]) == "A"
        assert format_group_name(["A", "B"]) == "A & B"
        assert format_group_name(["A", "B", "C"]) == "A, B & C"

    def test_person_agents(self, word_document):
        root = self._root(word_document)
        agents = [el for el in root.iter() if el.tag == AGENT_ATTR]
        names = ["".join(agent.itertext()) for agent in agents]
        assert names == ["Alice", "Bob"]
        assert [a.get("type") for a in agents] == ["person", "person"]

    def test_paragraph_timing_and_agents(self, word_document):
        paragraphs = list(self._root(word_document).iter(P_TAG))
        assert [(p.get("begin"), p.get("end")) for p in paragraphs] == [
            ("1.000", "3.000"), ("3.000", "6.000"), ("6.000", "6.000"),
        ]
        # verse 1 agent is recomputed from its words: only Bob sings all of them
        assert [p.get(AGENT_ATTR) for p in paragraphs] == ["p1", "p2", None]
        assert paragraphs[2].text == "outro"

    def test_export_does_not_touch_document(self, word_document):
        before = word_document.to_list()
        TTMLFormatter().format(word_document)
        assert word_document.to_list() == before

    def test_spans(self, word_document):
        first = next(self._root(word_document).iter(P_TAG))
        spans = list(first.iter(SPAN_TAG))
        assert [(s.get("begin"), s.get("end"), s.text) for s in spans] == [
            ("1.000", "1.500", "hello "),
            ("1.500", "3.000", "world"),
        ]

    def test_background_word_is_wrapped(self, word_document):
        second = list(self._root(word_document).iter(P_TAG))[1]
        wrappers = [s for s in second if s.get(ROLE_ATTR) == "x-bg"]
        assert len(wrappers) == 1
        inner = wrappers[0][0]
        assert inner.text == "(yeah)"
        assert inner.get("end") == "6.000"

    def test_divs_follow_paragraph_names(self, word_document):
        divs = list(self._root(word_document).iter(DIV_TAG))
        assert len(divs) == 2
        assert divs[0].get("begin") == "1.000"
        assert divs[0].get("end") == "3.000"
        assert divs[1].get("{%s}songPart" % ITUNES_NS) == "Chorus"

    def test_duration(self, word_document):
        root = self._root(word_document, TTMLExportOptions(duration=65))
        body = root.find("{%s}body" % TT_NS)
        assert body.get("dur") == "1:05.000"
        divs = list(root.iter(DIV_TAG))
        assert divs[0].get("end") == "3.000"
        assert divs[1].get("end") == "1:05.000"

    def test_word_authors_create_groups(self, word_document):
        root = self._root(word_document, TTMLExportOptions(word_author=True))
        groups = [el for el in root.iter() if el.tag == AGENT_ATTR and el.get("type") == "group"]
        assert ["".join(g.itertext()) for g in groups] == ["Alice & Bob"]
        second = list(root.iter(P_TAG))[1]
        assert [s.get(AGENT_ATTR) for s in second.iter(SPAN_TAG) if s.get("begin")] == [
            "g1", "g1", "p2",
        ]

    def test_line_mode_export(self, word_document):
        paragraphs = list(self._root(word_document, TTMLExportOptions(word_by_word=False)).iter(P_TAG))
        assert paragraphs[0].text == "hello world"
        assert list(paragraphs[0].iter(SPAN_TAG)) == []

    def test_round_trip(self, word_document):
        content = _content(TTMLFormatter(TTMLExportOptions(word_author=True)), word_document)
        registry = AuthorRegistry(word_document.authors)
        doc = parse_ttml_source(content, registry, word_by_word=True)
        assert [v.text for v in doc.verses] == ["hello world", "we sing (yeah)", "outro"]
        assert [v.paragraph_name for v in doc.verses] == [None, "Chorus", None]
        assert [a.name for a in doc.authors] == ["Alice", "Bob"]
        second = doc.verses[1]
        assert [w.is_background for w in second.words] == [False, False, True]
        assert [[a.checked for a in w.authors] for w in second.words] == [
            [True, True], [True, True], [False, True],
        ]
        for expected, verse in zip(word_document.verses, doc.verses):
            assert verse.effective_start() == pytest.approx(expected.effective_start(), abs=0.001)


# ---------------------------------------------------------------------------
# JSON, lyrics text, verse positions
# ---------------------------------------------------------------------------


class TestSyncedJSONFormatter:

    def test_keys(self, word_document):
        output = SyncedJSONFormatter().format(word_document)[0]
        assert output.suffix == "-Synced.json"
        assert output.media_type == "application/json"
        data = json.loads(output.content)
        assert [item["verse"] for item in data] == ["hello world", "we sing (yeah)", "outro"]
        assert data[1]["paragraphName"] == "Chorus"
        assert data[1]["words"][2]["isBackground"] is True
        assert "isBackground" not in data[1]["words"][0]
        assert "words" not in data[2]
        assert data[0]["authors"][0]["checked"] is True
        assert "checked" not in data[0]["authors"][1]

    def test_line_document_has_no_authors_key(self, line_document):
        data = json.loads(_content(SyncedJSONFormatter(), line_document))
        assert all("authors" not in item for item in data)

    def test_invalid_document_raises(self, line_document):
        line_document.verses[0].start = -1
        with pytest.raises(jsonschema.ValidationError):
            SyncedJSONFormatter().format(line_document)

    def test_non_ascii_kept(self, line_document):
        line_document.verses[0].text = "café"
        assert "café" in _content(SyncedJSONFormatter(), line_document)


class TestTextFormatters:

    def test_lyrics_text(self, word_document):
        assert _content(LyricsTextFormatter(), word_document) == "hello world\nwe sing (yeah)\noutro"

    def test_verse_positions(self, word_document):
        assert _content(VersePositionsFormatter(), word_document) == "1\n3\n6"

    def test_verse_positions_with_words(self, word_document):
        content = _content(VersePositionsFormatter(include_words=True), word_document)
        assert content == "1\n1.5\n3\n3.4\n4\n6"
