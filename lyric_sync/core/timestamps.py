"""Timestamp codec: float seconds <-> LRC and TTML textual timestamps.

WHY: LRC uses ``mm:ss.hh`` in square or angle brackets, TTML uses
clock values such as ``1:05.250`` or offset values such as ``12.5s``.
Parsers and formatters must agree on one conversion so an exported file
re-imports to the same times.

HOW: Parsing splits on ``:`` and ``.`` and combines the fragments.
Formatting rounds to the target precision once and derives every field
from that integer, so carries (59.999 -> 01:00.00) stay consistent.

RULES:
- LRC fraction is read as hundredths: ``int(fragment) / 100``
- TTML fraction is read as a decimal string: ``float("0." + fragment)``
- TTML output trims a leading ``00:`` and then one leading ``0``
  (``00:05.500`` -> ``5.500``, ``01:05.000`` -> ``1:05.000``)
- Hours are only written when the value is at least one hour
- Malformed input raises ValueError; callers decide whether to skip
"""

from __future__ import annotations

import re
from typing import Sequence

LRC = "lrc"
TTML = "ttml"

# A line is an LRC lyric line only when it starts with [mm:ss.x...]
LRC_LINE_RE = re.compile(r"^\[\d+:\d{2}\.\d+\]")

_FRAGMENT_SPLIT_RE = re.compile(r"[:.]+")


def split_fragments(token: str) -> list[str]:
    """Split a timestamp on every run of ``:`` and ``.``."""
    return _FRAGMENT_SPLIT_RE.split(token.strip())


def parse_lrc(token: str) -> float:
    """Convert an LRC ``mm:ss.hh`` token (no brackets) to seconds."""
    parts = split_fragments(token)
    if len(parts) < 3:
        raise ValueError("Not an LRC timestamp: {!r}".format(token))
    return int(parts[0]) * 60 + int(parts[1]) + int(parts[2]) / 100


def parse_ttml(parts: Sequence[str]) -> float:
    """Convert pre-split TTML timestamp fragments to seconds.

    ``["1", "05", "250"]`` is 1 minute, 5 seconds and ``0.250``;
    ``["12", "5s"]`` is an offset already in seconds.
    """
    if not parts or not parts[-1]:
        raise ValueError("Empty TTML timestamp")
    if parts[-1].endswith("s"):
        return float(".".join(parts).replace("s", ""))

    count = len(parts)
    if count == 1:
        return float(parts[0])
    hours = int(parts[0]) * 3600 if count == 4 else 0
    minutes = int(parts[1 if count == 4 else 0]) * 60 if count >= 3 else 0
    seconds = int(parts[2 if count == 4 else 1 if count == 3 else 0])
    fraction = float("0." + parts[-1])
    return hours + minutes + seconds + fraction


def parse_ttml_value(value: str) -> float:
    """Parse a raw TTML ``begin``/``end`` attribute value."""
    return parse_ttml(split_fragments(value))


def format_seconds(seconds: float, mode: str = LRC) -> str:
    """Render seconds as an LRC (``mm:ss.hh``) or TTML timestamp."""
    seconds = max(0.0, float(seconds))
    if mode == TTML:
        total = int(round(seconds * 1000))
        fraction = "{:03d}".format(total % 1000)
        whole = total // 1000
    else:
        total = int(round(seconds * 100))
        fraction = "{:02d}".format(total % 100)
        whole = total // 100

    minutes, secs = divmod(whole, 60)
    if mode == TTML and minutes >= 60:
        hours, minutes = divmod(minutes, 60)
        value = "{:02d}:{:02d}:{:02d}.{}".format(hours, minutes, secs, fraction)
    else:
        value = "{:02d}:{:02d}.{}".format(minutes, secs, fraction)

    if mode == TTML:
        if value.startswith("00:"):
            value = value[3:]
        if value.startswith("0"):
            value = value[1:]
    return value


def format_plain_seconds(seconds: float) -> str:
    """Render seconds as a bare number (``12.5``, ``3``)."""
    value = float(seconds)
    if value.is_integer():
        return str(int(value))
    return repr(value)
