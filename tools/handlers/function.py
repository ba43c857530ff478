"""Function-based tool handler wrapping catalog operation bodies."""
from __future__ import annotations

from typing import Any

from ..handler import ToolHandler, ToolInvocation
from ..schemas import validate_tool_input
from ..spec import Tool


class FunctionToolHandler(ToolHandler):
    """Validate arguments against the tool's schema, then run its operation body.

    The body only ever sees the validated, defaulted argument dict.
    """

    def __init__(self, tool: Tool) -> None:
        self._tool = tool

    async def handle(self, invocation: ToolInvocation) -> Any:
        arguments = validate_tool_input(self._tool.input_model, invocation.arguments)
        return await self._tool.fn(invocation.client, arguments)

    @property
    def tool(self) -> Tool:  # pragma: no cover - convenience for callers
        return self._tool


__all__ = ["FunctionToolHandler"]
