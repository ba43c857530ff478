"""Structured tool error types and failure classification."""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional, Tuple


class ErrorKind(Enum):
    """Classification of tool failures."""

    CONFIGURATION = "configuration_error"
    VALIDATION = "validation_error"
    UPSTREAM = "upstream_error"
    TIMEOUT = "timeout"
    TRANSPORT = "transport_error"
    NOT_FOUND = "not_found"
    EXECUTION = "execution_error"


class ToolError(Exception):
    """Base class for tool execution errors."""

    def __init__(self, message: str, error_kind: ErrorKind = ErrorKind.EXECUTION) -> None:
        super().__init__(message)
        self.message = message
        self.error_kind = error_kind

    def __str__(self) -> str:  # pragma: no cover - convenience
        return self.message


class ConfigurationError(ToolError):
    """Start-up configuration is missing or invalid; the server must not start."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.CONFIGURATION)


class ValidationToolError(ToolError):
    """Error indicating invalid tool input supplied by the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.VALIDATION)


class UnknownToolError(ToolError):
    """Raised when a call names a tool that is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}", ErrorKind.NOT_FOUND)
        self.name = name


class PollTimeoutError(ToolError):
    """The completion poller ran out of time before the artifact was ready."""

    def __init__(self, identifier: str, timeout_ms: int, attempts: int) -> None:
        super().__init__(
            f"Timed out waiting for report of {identifier} after {timeout_ms}ms ({attempts} attempts)",
            ErrorKind.TIMEOUT,
        )
        self.identifier = identifier
        self.timeout_ms = timeout_ms
        self.attempts = attempts


class RemoteServiceError(ToolError):
    """A request to the MobSF service failed.

    ``status`` is ``None`` when no response arrived at all (connection refused,
    DNS failure, read timeout). ``body`` holds the decoded response body, when
    there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Any = None,
    ) -> None:
        kind = ErrorKind.TRANSPORT if status is None else ErrorKind.UPSTREAM
        super().__init__(render_remote_failure(status, body, message), kind)
        self.reason = message
        self.status = status
        self.body = body


def render_remote_failure(status: Optional[int], body: Any, message: str) -> str:
    """Render a remote failure the way callers see it."""
    if status is None:
        return f"Network/unknown error: {message}"
    if body is None or body == "":
        return f"HTTP {status}: {message}"
    return f"HTTP {status}: {json.dumps(body, ensure_ascii=False)}"


def classify_error(exc: BaseException) -> Tuple[ErrorKind, str]:
    """Map any failure raised by an operation body to ``(kind, message)``."""
    if isinstance(exc, ToolError):
        return exc.error_kind, exc.message
    message = str(exc) or exc.__class__.__name__
    return ErrorKind.EXECUTION, message


__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "PollTimeoutError",
    "RemoteServiceError",
    "ToolError",
    "UnknownToolError",
    "ValidationToolError",
    "classify_error",
    "render_remote_failure",
]
