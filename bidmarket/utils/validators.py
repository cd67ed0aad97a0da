"""Deterministic sanitizers for caller-supplied free text."""

from __future__ import annotations

import enum
import html
from typing import Any


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence.

    Escaping is idempotent: text that was already escaped (for example a value
    echoed back from an earlier response) is stored unchanged.
    """
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return html.escape(html.unescape(cleaned), quote=False)


def sanitize_value(value: Any, max_len: int = 5000) -> Any:
    """Sanitize strings; leave enums, numbers and ``None`` untouched."""
    if isinstance(value, str) and not isinstance(value, enum.Enum):
        return sanitize_text(value, max_len=max_len)
    return value


def sanitize_payload(value: Any, max_len: int = 20000) -> Any:
    """Recursively sanitize every string inside a request payload."""
    if isinstance(value, dict):
        return {key: sanitize_payload(item, max_len=max_len) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_payload(item, max_len=max_len) for item in value]
    return sanitize_value(value, max_len=max_len)
