"""
Form input helpers: text sanitisation and permissive integer parsing.

The order desk accepts whatever the upload form sends. Free text is
stripped of markup; numbers that cannot be read become 0 instead of
rejecting the order.
"""

from __future__ import annotations

import html
import re
from typing import Any, Optional

import bleach

# Leading integer, the way a form field like "50", " 2 copies" or "12.5" reads
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def sanitize_text(text: Any, max_length: Optional[int] = None) -> str:
    """
    Strip markup from user input text, keeping it as plain text.

    Args:
        text: Raw input text (None and non-strings are treated as empty)
        max_length: Optional maximum length to enforce

    Returns:
        Plain text with tags removed; characters such as "&" survive as typed
    """
    if not text or not isinstance(text, str):
        return ""

    # Tags are dropped; entities bleach escapes are turned back into plain text
    text = html.unescape(bleach.clean(text.strip(), tags=[], strip=True)).strip()

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse the leading integer of value, or None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_int(value: Any) -> int:
    """
    Parse a non-negative integer, defaulting to 0.

    Unparsable and negative values both become 0.
    """
    parsed = parse_optional_int(value)
    if parsed is None or parsed < 0:
        return 0
    return parsed
