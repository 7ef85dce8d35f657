"""Output formatter registry: pluggable format hub.

WHY: The CLI and API layers need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["ttml"]()``, or
pass options: ``LRCFormatter(LRCExportOptions(keep_authors=True))``.

RULES:
- Keys are snake_case identifiers (used in CLI flags, config, etc.)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be constructible without arguments
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lyric_sync.config import DEFAULT_FORMATS
from lyric_sync.formatters.json_export import SyncedJSONFormatter
from lyric_sync.formatters.lrc import LRCExportOptions, LRCFormatter
from lyric_sync.formatters.plain_text import LyricsTextFormatter
from lyric_sync.formatters.ttml import TTMLExportOptions, TTMLFormatter
from lyric_sync.formatters.verse_positions import VersePositionsFormatter

if TYPE_CHECKING:
    from lyric_sync.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "lrc": LRCFormatter,
    "ttml": TTMLFormatter,
    "json": SyncedJSONFormatter,
    "lyrics_text": LyricsTextFormatter,
    "verse_positions": VersePositionsFormatter,
}

__all__ = [
    "FORMATTERS",
    "LRCExportOptions",
    "LRCFormatter",
    "LyricsTextFormatter",
    "SyncedJSONFormatter",
    "TTMLExportOptions",
    "TTMLFormatter",
    "VersePositionsFormatter",
    "create_formatter",
    "resolve_format_keys",
]


def create_formatter(
    key: str,
    lrc_options: LRCExportOptions | None = None,
    ttml_options: TTMLExportOptions | None = None,
) -> BaseFormatter:
    """Instantiate the formatter for ``key`` with its export options.

    Raises:
        KeyError: If ``key`` is not registered.
    """
    formatter_cls = FORMATTERS[key]
    if formatter_cls is LRCFormatter:
        return LRCFormatter(lrc_options)
    if formatter_cls is TTMLFormatter:
        return TTMLFormatter(ttml_options)
    return formatter_cls()


def resolve_format_keys(value: str | None) -> list[str]:
    """Turn ``"lrc,ttml"`` into validated formatter keys.

    Empty input falls back to LYRIC_SYNC_DEFAULT_FORMATS, then to every
    registered format.

    Raises:
        ValueError: On an unknown key.
    """
    value = value or DEFAULT_FORMATS
    if not value:
        return list(FORMATTERS.keys())
    keys = [key.strip() for key in value.split(",") if key.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise ValueError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                )
            )
    return keys
