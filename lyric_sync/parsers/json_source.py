"""Re-import of the synced-lyrics JSON export.

WHY: The JSON export is the only format that keeps everything (ids,
per-word authors, background flags, stanza names), so it doubles as a
project file to continue syncing later.

HOW: json.loads, jsonschema validation against the bundled schema, then
Document.from_list(). Invalid input is logged and gives None, like a
failed TTML import.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import jsonschema

from lyric_sync.core.ir import Document
from lyric_sync.core.schema import get_schema

logger = logging.getLogger(__name__)


def parse_json_source(source: str, source_name: str = "") -> Optional[Document]:
    try:
        data = json.loads(source)
        jsonschema.validate(instance=data, schema=get_schema())
    except json.JSONDecodeError as exc:
        logger.warning("JSON import failed, not valid JSON: %s", exc)
        return None
    except jsonschema.ValidationError as exc:
        logger.warning("JSON import failed, schema mismatch: %s", exc.message)
        return None

    document = Document.from_list(data, source_name=source_name)
    if len(set(document.all_ids())) != len(document.all_ids()):
        logger.warning("JSON import failed, duplicate ids in %s", source_name or "source")
        return None
    return document
