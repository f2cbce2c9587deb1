"""Utility helper functions."""

import re
from datetime import datetime, timezone
from typing import Optional


_TAG_RE = re.compile(r"<[^>]*>")
_DECIMAL_ENTITY_RE = re.compile(r"&#(\d+);")

# Applied in order: "&amp;lt;" ends up as "<".
_NAMED_ENTITIES = (
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def _decode_decimal_entity(match: re.Match) -> str:
    try:
        return chr(int(match.group(1)))
    except (ValueError, OverflowError):
        return match.group(0)


def strip_html(text: Optional[str]) -> str:
    """Remove markup tags and decode the common HTML entities."""
    if not text:
        return ""
    cleaned = _TAG_RE.sub("", text)
    for entity, char in _NAMED_ENTITIES:
        cleaned = cleaned.replace(entity, char)
    cleaned = _DECIMAL_ENTITY_RE.sub(_decode_decimal_entity, cleaned)
    return cleaned.strip()


def truncate_text(text: str, max_length: int = 30) -> str:
    """Truncate text to max length."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def get_timestamp() -> str:
    """Get current UTC timestamp as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
