"""Tool dispatch and polling subsystem for the MobSF MCP server."""

from .handler import ToolHandler, ToolInvocation, ToolResult, execute_handler
from .handlers import FunctionToolHandler
from .polling import PollSession, PollState, RETRYABLE_STATUSES, ReportPoller, is_retryable
from .registry import ToolRegistry, ToolRegistryBuilder, build_registry_from_tools
from .router import CallRequest, ToolRouter, render_envelope
from .schemas import ToolSchema, parse_tool_input, validate_tool_input
from .spec import Tool, ToolSpec
from errors import (
    ConfigurationError,
    ErrorKind,
    PollTimeoutError,
    RemoteServiceError,
    ToolError,
    UnknownToolError,
    ValidationToolError,
)

__all__ = [
    "CallRequest",
    "ConfigurationError",
    "ErrorKind",
    "FunctionToolHandler",
    "PollSession",
    "PollState",
    "PollTimeoutError",
    "RETRYABLE_STATUSES",
    "RemoteServiceError",
    "ReportPoller",
    "Tool",
    "ToolError",
    "ToolHandler",
    "ToolInvocation",
    "ToolRegistry",
    "ToolRegistryBuilder",
    "ToolResult",
    "ToolRouter",
    "ToolSchema",
    "ToolSpec",
    "UnknownToolError",
    "ValidationToolError",
    "build_registry_from_tools",
    "execute_handler",
    "is_retryable",
    "parse_tool_input",
    "render_envelope",
    "validate_tool_input",
]
