"""
Common primitives shared by the document model.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional


def generate_id() -> str:
    """Generate an opaque, globally unique document identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


_SEPARATORS = {"-", "_"}


def to_camel_case(value: Optional[str]) -> str:
    """
    Convert a topic into a CamelCase page name.

    - Whitespace, hyphens and underscores start a new word
    - Other non-alphanumeric characters are dropped
    - The first character of each word is upper-cased, the rest kept as-is

    Examples:
        "event driven architecture" -> "EventDrivenArchitecture"
        "My-Topic_Name" -> "MyTopicName"
        "" -> ""
    """
    if not value or not value.strip():
        return ""

    result = []
    capitalize_next = True
    for char in value:
        if char.isspace() or char in _SEPARATORS:
            capitalize_next = True
        elif char.isalnum():
            result.append(char.upper() if capitalize_next else char)
            capitalize_next = False
    return "".join(result)


def to_camel_case_or_default(value: Optional[str], default: str) -> str:
    """CamelCase page name, or ``default`` when nothing usable remains."""
    return to_camel_case(value) or default
