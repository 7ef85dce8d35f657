"""Seed an import from lyrics embedded in audio-file metadata.

WHY: Audio files often carry lyrics in their tags, either unsynced text
(ID3 USLT) or timestamped lines (ID3 SYLT). Reading the tags belongs to
an external metadata service; this module only turns the result into a
source the regular parsers understand.

HOW: Timestamped lines are rendered as LRC (``[mm:ss.hh]text``) so they
go through the LRC parser; otherwise the plain text is used as is.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lyric_sync.config import LRC_SOURCE, PLAIN_TEXT
from lyric_sync.core.timestamps import LRC, format_seconds


@dataclass
class EmbeddedLyrics:
    """Lyrics found in audio metadata.

    Attributes:
        text: Unsynced lyrics, newline separated.
        synced: ``(timestamp_ms, text)`` pairs, in playback order.
    """

    text: str | None = None
    synced: list[tuple[int, str]] = field(default_factory=list)


def embedded_to_lrc(synced: list[tuple[int, str]]) -> str:
    lines = [
        "[{}]{}".format(format_seconds((timestamp or 0) / 1000, LRC), text.strip())
        for timestamp, text in synced
    ]
    return "\n".join(lines)


def embedded_to_source(embedded: EmbeddedLyrics) -> tuple[str, str]:
    """Return ``(source_format, content)`` for an embedded-lyrics value.

    Synced lines win over unsynced text.
    """
    if embedded.synced:
        return LRC_SOURCE, embedded_to_lrc(embedded.synced)
    return PLAIN_TEXT, embedded.text or ""
