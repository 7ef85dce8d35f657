"""Loader for the bundled synced-lyrics JSON schema.

The schema ships inside the package (``lyric_sync/schemas``) and is
read once, then cached at module level. The JSON formatter validates
its output against it and the JSON parser validates input with it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "synced_lyrics.schema.json"

_CACHED_SCHEMA: dict[str, Any] | None = None


def _load_schema() -> dict[str, Any]:
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA
