"""Core tool handler protocol and the call result envelope."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from errors import ErrorKind, classify_error
from .tool_summary import summarize_tool_call, truncate_text

logger = logging.getLogger(__name__)


@dataclass
class ToolInvocation:
    """Context for a single tool invocation."""

    client: Any
    call_id: str
    tool_name: str
    # Raw caller arguments; handlers validate before use.
    arguments: Any = field(default_factory=dict)


@dataclass
class ToolResult:
    """Terminal outcome of one tool call: a payload or a classified failure."""

    tool_name: str
    success: bool
    payload: Any = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    duration_ms: int = 0

    @classmethod
    def ok(cls, tool_name: str, payload: Any) -> "ToolResult":
        return cls(tool_name=tool_name, success=True, payload=payload)

    @classmethod
    def failure(cls, tool_name: str, kind: ErrorKind, message: str) -> "ToolResult":
        return cls(tool_name=tool_name, success=False, error_kind=kind, message=message)

    @property
    def is_error(self) -> bool:
        return not self.success

    def render_text(self) -> str:
        """Render the envelope as text for the caller."""
        if self.success:
            return json.dumps(self.payload, indent=2, ensure_ascii=False, default=str)
        kind = self.error_kind.value if self.error_kind is not None else ErrorKind.EXECUTION.value
        return f"Error executing {self.tool_name} ({kind}): {self.message}"

    def log_preview(self, max_bytes: int = 2048, max_lines: int = 64) -> str:
        """Return a truncated preview string suitable for logging."""
        content = self.render_text()
        if len(content) <= max_bytes and content.count("\n") < max_lines:
            return content

        lines = content.splitlines()
        preview = "\n".join(lines[:max_lines])
        if len(preview) > max_bytes:
            preview = preview[:max_bytes]
        if len(preview) < len(content):
            preview += "\n[... truncated for logging ...]"
        return preview


class ToolHandler(Protocol):
    """Protocol describing tool handler implementations."""

    async def handle(self, invocation: ToolInvocation) -> Any:
        ...


async def execute_handler(handler: ToolHandler, invocation: ToolInvocation) -> ToolResult:
    """Run a handler and turn whatever happens into a ``ToolResult``."""
    start = time.perf_counter()
    request_summary = summarize_tool_call(invocation.tool_name, invocation.arguments)
    try:
        payload = await handler.handle(invocation)
        result = ToolResult.ok(invocation.tool_name, payload)
    except Exception as exc:
        kind, message = classify_error(exc)
        result = ToolResult.failure(invocation.tool_name, kind, message)
        if kind is ErrorKind.EXECUTION:
            logger.exception("%s raised an unclassified error", request_summary)
    result.duration_ms = int((time.perf_counter() - start) * 1000)

    if result.success:
        logger.info("%s -> ok [%dms]", request_summary, result.duration_ms)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s payload:\n%s", request_summary, result.log_preview())
    else:
        logger.warning(
            "%s -> %s: %s [%dms]",
            request_summary,
            result.error_kind.value if result.error_kind else "error",
            truncate_text(result.message, limit=160),
            result.duration_ms,
        )
    return result


__all__ = [
    "ToolHandler",
    "ToolInvocation",
    "ToolResult",
    "execute_handler",
]
