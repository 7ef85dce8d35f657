"""Tests for LRC import: line filtering, duet tags and word timing."""

from __future__ import annotations

import pytest

from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.parsers.lrc import (
    detect_duet,
    parse_lrc_source,
    split_timed_words,
    strip_duet_prefix,
)


class TestDuetPrefixes:

    @pytest.mark.parametrize("text, expected", [
        ("v1: hi", (0,)),
        ("M: hi", (0,)),
        ("v2: hi", (1,)),
        ("F: hi", (1,)),
        ("v3: hi", (0, 1)),
        ("D: hi", (0, 1)),
        ("hi", ()),
    ])
    def test_detect(self, text, expected):
        assert detect_duet(text) == expected

    def test_only_numbered_prefixes_are_stripped(self):
        assert strip_duet_prefix("v2: Hello") == "Hello"
        assert strip_duet_prefix("F: Hello") == "F: Hello"


class TestLineMode:

    def test_single_author_v1(self, one_author):
        doc = parse_lrc_source("[00:12.34]v1: Hello there", one_author)
        assert len(doc.verses) == 1
        verse = doc.verses[0]
        assert verse.start == pytest.approx(12.34)
        assert verse.text == "Hello there"
        assert "v1:" not in verse.text
        assert verse.authors[0].checked is True

    def test_non_matching_lines_are_dropped(self, duet_lrc, two_authors):
        doc = parse_lrc_source(duet_lrc, two_authors)
        assert [v.text for v in doc.verses] == [
            "Hello there",
            "General Kenobi",
            "Both of us now",
            "Nobody in particular",
        ]

    def test_duet_checks(self, duet_lrc, two_authors):
        doc = parse_lrc_source(duet_lrc, two_authors)
        checks = [[a.checked for a in v.authors] for v in doc.verses]
        assert checks == [[True, False], [False, True], [True, True], [False, False]]

    def test_author_lists_are_not_shared(self, duet_lrc, two_authors):
        doc = parse_lrc_source(duet_lrc, two_authors)
        doc.verses[0].authors[1].checked = True
        assert doc.verses[3].authors[1].checked is False
        assert two_authors.authors[1].checked is False

    def test_no_registry_leaves_authors_unset(self, duet_lrc):
        doc = parse_lrc_source(duet_lrc)
        assert all(v.authors is None for v in doc.verses)
        assert doc.authors == []

    def test_inline_tags_stripped_outside_word_mode(self, enhanced_lrc):
        doc = parse_lrc_source(enhanced_lrc)
        assert doc.verses[0].text == "Hi there"
        assert doc.verses[0].words is None

    def test_ids_unique(self, duet_lrc, two_authors):
        doc = parse_lrc_source(duet_lrc, two_authors)
        ids = doc.all_ids()
        assert len(ids) == len(set(ids))


class TestWordMode:

    def test_walaoke_word_line(self, two_authors):
        doc = parse_lrc_source(
            "[00:05.00]M: <00:05.00>Hi <00:05.50>there",
            two_authors,
            word_by_word=True,
        )
        verse = doc.verses[0]
        assert [w.text for w in verse.words] == ["Hi", "there"]
        assert [w.start for w in verse.words] == [pytest.approx(5.0), pytest.approx(5.5)]
        assert verse.authors[0].checked is True
        assert all(w.authors[0].checked for w in verse.words)
        assert all(not w.authors[1].checked for w in verse.words)
        assert "M:" in verse.text

    def test_timed_words(self, enhanced_lrc):
        doc = parse_lrc_source(enhanced_lrc, word_by_word=True)
        assert len(doc.verses) == 2
        assert doc.verses[1].text == "How are you"
        assert doc.verses[1].words[2].start == pytest.approx(7.8)
        assert all(w.authors == [] for w in doc.verses[1].words)

    def test_fallback_shares_verse_time(self, one_author):
        doc = parse_lrc_source("[01:00.00]v1: one two  three", one_author, word_by_word=True)
        verse = doc.verses[0]
        assert [w.text for w in verse.words] == ["one", "two", "three"]
        assert all(w.start == pytest.approx(60.0) for w in verse.words)
        assert verse.text == "one two three"
        assert all(w.authors[0].checked for w in verse.words)

    def test_empty_line_gets_one_empty_word(self):
        doc = parse_lrc_source("[00:01.00]", word_by_word=True)
        assert [w.text for w in doc.verses[0].words] == [""]

    def test_odd_token_count_is_padded(self):
        prefix, pairs = split_timed_words("<00:01.00>a <00:02.00>")
        assert prefix == ""
        assert pairs == [("00:01.00", "a"), ("00:02.00", "")]

    def test_prefix_before_first_tag(self):
        prefix, pairs = split_timed_words("F: <00:01.00>la")
        assert prefix == "F:"
        assert pairs == [("00:01.00", "la")]

    def test_angle_bracket_text_falls_back_to_whitespace_words(self):
        doc = parse_lrc_source(
            "[00:01.00]love <you> always\n[00:02.00]next",
            word_by_word=True,
        )
        assert len(doc.verses) == 2
        first = doc.verses[0]
        assert [w.text for w in first.words] == ["love", "<you>", "always"]
        assert all(w.start == pytest.approx(1.0) for w in first.words)
        assert first.text == "love <you> always"

    def test_non_timestamp_tag_keeps_line_next_to_timed_line(self):
        doc = parse_lrc_source(
            "[00:01.00]<xx>bad\n[00:02.00]<00:02.00>good",
            word_by_word=True,
        )
        assert [v.text for v in doc.verses] == ["<xx>bad", "good"]
        assert doc.verses[0].words[0].start == pytest.approx(1.0)


class TestRegistryUntouched:

    def test_parse_does_not_mutate_registry(self, duet_lrc):
        registry = AuthorRegistry.from_names(["Alice", "Bob"])
        before = [(a.id, a.name, a.checked) for a in registry.authors]
        parse_lrc_source(duet_lrc, registry, word_by_word=True)
        assert [(a.id, a.name, a.checked) for a in registry.authors] == before
