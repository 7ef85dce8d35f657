"""Shared test fixtures for the lyric_sync test suite.

WHY: Several test modules need the same small songs: a duet in enhanced
LRC, an Apple-style TTML file with named singers, groups and background
vocals, and a hand-built word-synced Document. Centralizing them keeps
every module working on the same data.

HOW: Module-level string constants hold the raw sources; fixtures wrap
them and build registries and Documents with deterministic author ids.

RULES:
- Author ids are hardcoded for reproducible assertions
- Fixtures return fresh objects per test; nothing is shared
"""

from __future__ import annotations

import pytest

from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.ir import AuthorEntry, Document, VerseEntry, WordEntry

ALICE_ID = "aaaaaaaa-1111-4000-8000-000000000001"
BOB_ID = "bbbbbbbb-2222-4000-8000-000000000002"


# ---------------------------------------------------------------------------
# Raw sources
# ---------------------------------------------------------------------------

DUET_LRC = """[ar:Alice & Bob]
[ti:Duet]
[00:12.34]v1: Hello there
[00:15.00]v2: General Kenobi
[00:18.50]v3: Both of us now

not a lyric line
[00:21.00]Nobody in particular
"""

ENHANCED_LRC = """[00:05.00]<00:05.00>Hi <00:05.50>there
[00:07.00]<00:07.00>How <00:07.40>are <00:07.80>you
"""

APPLE_TTML = """<?xml version="1.0" encoding="UTF-8"?>
<tt xmlns="http://www.w3.org/ns/ttml"
    xmlns:ttm="http://www.w3.org/ns/ttml#metadata"
    xmlns:itunes="http://itunes.apple.com/lyric-ttml-extensions"
    xml:lang="en">
  <head>
    <metadata>
      <ttm:agent type="person" xml:id="v1"><ttm:name>alice</ttm:name></ttm:agent>
      <ttm:agent type="person" xml:id="v2"><ttm:name>Carol Singer</ttm:name></ttm:agent>
      <ttm:agent type="group" xml:id="v1000"><ttm:name>Alice &amp; Bob</ttm:name></ttm:agent>
    </metadata>
  </head>
  <body dur="1:00.000">
    <div begin="5.000" end="12.000" itunes:songPart="Verse">
      <p begin="5.000" end="7.000" ttm:agent="v1"><span begin="5.000" end="5.500">Hi </span><span begin="5.500" end="7.000">there</span></p>
      <p begin="7.000" end="9.000" ttm:agent="v2"><span begin="7.000" end="8.000">Hello</span><span ttm:role="x-bg"><span begin="8.000" end="9.000">(ooh)</span></span></p>
      <p end="9.500">no begin, dropped</p>
    </div>
    <div begin="9.000" end="12.000" itunes:songPart="Chorus">
      <p begin="9.000" end="12.000" ttm:agent="v1000">Sing it together</p>
    </div>
  </body>
</tt>
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def duet_lrc():
    return DUET_LRC


@pytest.fixture
def enhanced_lrc():
    return ENHANCED_LRC


@pytest.fixture
def apple_ttml():
    return APPLE_TTML


@pytest.fixture
def one_author():
    return AuthorRegistry([AuthorEntry(id=ALICE_ID, name="Alice")])


@pytest.fixture
def two_authors():
    return AuthorRegistry([
        AuthorEntry(id=ALICE_ID, name="Alice"),
        AuthorEntry(id=BOB_ID, name="Bob"),
    ])


def _authors(*checked_ids):
    return [
        AuthorEntry(id=ALICE_ID, name="Alice", checked=ALICE_ID in checked_ids),
        AuthorEntry(id=BOB_ID, name="Bob", checked=BOB_ID in checked_ids),
    ]


@pytest.fixture
def make_authors():
    """Factory: a two-author list with the given ids checked."""
    return _authors


@pytest.fixture
def word_document():
    """Two word-synced verses plus one line-mode verse.

    Verse 0: "hello world" sung by Alice (verse and both words)
    Verse 1: "we sing (yeah)" by both, last word background, stanza "Chorus"
    Verse 2: "outro" line mode, nobody checked
    """
    verses = [
        VerseEntry(
            id="v0", start=1.0, text="hello world", authors=_authors(ALICE_ID),
            words=[
                WordEntry(id="w0", start=1.0, text="hello", authors=_authors(ALICE_ID)),
                WordEntry(id="w1", start=1.5, text="world", authors=_authors(ALICE_ID)),
            ],
        ),
        VerseEntry(
            id="v1", start=3.0, text="we sing (yeah)", authors=_authors(ALICE_ID, BOB_ID),
            paragraph_name="Chorus",
            words=[
                WordEntry(id="w2", start=3.0, text="we", authors=_authors(ALICE_ID, BOB_ID)),
                WordEntry(id="w3", start=3.4, text="sing", authors=_authors(ALICE_ID, BOB_ID)),
                WordEntry(id="w4", start=4.0, text="(yeah)", authors=_authors(BOB_ID),
                          is_background=True),
            ],
        ),
        VerseEntry(id="v2", start=6.0, text="outro", authors=_authors()),
    ]
    return Document(
        verses=verses,
        authors=[AuthorEntry(id=ALICE_ID, name="Alice"), AuthorEntry(id=BOB_ID, name="Bob")],
        source_name="song",
    )


@pytest.fixture
def line_document():
    """Three line-mode verses without any authors."""
    return Document(
        verses=[
            VerseEntry(id="l0", start=0.5, text="first line"),
            VerseEntry(id="l1", start=2.25, text="second line"),
            VerseEntry(id="l2", start=61.0, text="third line"),
        ],
        source_name="plain",
    )
