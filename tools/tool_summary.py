"""Helpers to summarize tool invocations for logs."""
from __future__ import annotations

from typing import Any, List, Mapping

# Identifying arguments, most specific first.
_SUMMARY_KEYS: tuple[str, ...] = (
    "hash",
    "hash1",
    "hash2",
    "file_path",
    "finding_id",
    "file",
    "scan_type",
    "type",
    "page",
)


def truncate_text(value: Any, *, limit: int = 60) -> str:
    text = str(value)
    if len(text) <= limit:
        return text
    if limit < 4:
        return text[:limit]
    return text[: limit - 3] + "..."


def summarize_arguments(arguments: Any, *, limit: int = 60, max_fields: int = 2) -> str:
    """Return ``key=value`` pairs for the identifying arguments of a call."""
    if not isinstance(arguments, Mapping):
        return ""
    parts: List[str] = []
    for key in _SUMMARY_KEYS:
        value = arguments.get(key)
        if value is None or isinstance(value, (Mapping, list, tuple)):
            continue
        parts.append(f"{key}={truncate_text(value, limit=limit)}")
        if len(parts) >= max_fields:
            break
    return ", ".join(parts)


def summarize_tool_call(name: str, arguments: Any, *, limit: int = 60) -> str:
    base = name or "tool"
    return f"{base}({summarize_arguments(arguments, limit=limit)})"


__all__ = ["summarize_arguments", "summarize_tool_call", "truncate_text"]
