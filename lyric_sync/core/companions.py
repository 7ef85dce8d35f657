"""Helper functions for discovering and loading companion author lists.

WHY: Singers are usually known before a lyrics file is imported, and
typing them on every run is tedious. Users can place a plain-text author
list next to the lyrics file (``song-authors.txt`` beside ``song.lrc``)
and the converter picks it up automatically.

HOW: resolve_companion_files() looks for ``{stem}-authors.txt`` next to
the lyrics file. load_authors() reads one name per line. parse_author_list()
splits the comma-separated form used on the command line and in the API.

RULES:
- Author files: one name per line, strip whitespace, ignore blank lines
  and lines starting with '#'
- Missing companion files are not an error
- Order is preserved; it defines v1/v2 numbering and TTML p1/p2 ids
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lyric_sync.config import AUTHORS_COMPANION_SUFFIX


@dataclass
class CompanionFiles:
    """Resolved paths to optional companion files (None when absent)."""

    authors_path: Path | None = None


def resolve_companion_files(lyrics_path: str | Path) -> CompanionFiles:
    """Discover ``{stem}-authors.txt`` next to the lyrics file."""
    path = Path(lyrics_path)
    candidate = path.parent / "{}{}".format(path.stem, AUTHORS_COMPANION_SUFFIX)
    return CompanionFiles(authors_path=candidate if candidate.is_file() else None)


def load_authors(path: str | Path) -> list[str]:
    """Read an author list file, one singer per line."""
    names: list[str] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        name = line.strip()
        if name and not name.startswith("#"):
            names.append(name)
    return names


def parse_author_list(value: str | None) -> list[str]:
    """Split ``"Alice, Bob"`` into ``["Alice", "Bob"]``."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]
