"""Abstract base formatter and output container.

WHY: Every output format consumes the same Document but produces
different file content. This base class enforces a consistent interface
so the CLI and API layers can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type. Format options are
constructor arguments, so ``FORMATTERS[key]()`` always gives the
defaults.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` is appended to the source stem: ``".lrc"``, ``"-Synced.json"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lyric_sync.core.ir import Document, checked_ids


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".ttml"`` -> ``"song.ttml"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"application/xml"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'TTML'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Suffix of the file this formatter produces."""

    @abstractmethod
    def format(self, document: Document) -> list[FormatterOutput]:
        """Convert the Document into one or more output files.

        Args:
            document: The verses plus the canonical author registry.

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string, and MIME type.
        """


def verse_checked_ids(verse) -> list[str]:
    """Union of checked author ids on a verse and all of its words.

    Order is first appearance: words first, then the verse list.
    """
    ids: list[str] = []
    for word in verse.words or []:
        for author_id in checked_ids(word.authors):
            if author_id not in ids:
                ids.append(author_id)
    for author_id in checked_ids(verse.authors):
        if author_id not in ids:
            ids.append(author_id)
    return ids
