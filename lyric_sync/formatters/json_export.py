"""Synced-lyrics JSON formatter.

WHY: The JSON export keeps every detail of the Document (ids, per-word
authors, background flags, stanza names) and is the format other tools
and a later re-import read.

HOW: Document.to_list() gives the verse array with the established key
names (``verse``, ``isBackground``, ``paragraphName``). The array is
validated with jsonschema against the bundled schema, then dumped.

RULES:
- Top level is the verse array, in playback order
- ``checked`` only appears when true; ``words`` only in word mode
- Validate output against the schema before returning; raise on failure
- Output suffix: "-Synced.json"
"""

from __future__ import annotations

import json

import jsonschema

from lyric_sync.core.ir import Document
from lyric_sync.core.schema import get_schema
from lyric_sync.formatters.base import BaseFormatter, FormatterOutput


class SyncedJSONFormatter(BaseFormatter):
    """Export the Document as the synced-lyrics JSON array."""

    @property
    def name(self) -> str:
        return "Synced JSON"

    @property
    def suffix(self) -> str:
        return "-Synced.json"

    def format(self, document: Document) -> list[FormatterOutput]:
        """Serialize the verses.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the synced-lyrics schema.
        """
        output = document.to_list()
        jsonschema.validate(instance=output, schema=get_schema())

        content = json.dumps(output, indent=2, ensure_ascii=False)
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="application/json",
            )
        ]
