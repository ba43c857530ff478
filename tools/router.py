"""Tool routing: the single boundary where a call becomes a terminal result."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .handler import ToolInvocation, ToolResult
from .registry import ToolRegistry
from .spec import ToolSpec


@dataclass
class CallRequest:
    """A caller's request to run a named tool."""

    name: str
    arguments: Optional[Mapping[str, Any]] = None
    call_id: str = ""


class ToolRouter:
    """Routes calls through a registry and renders MCP ``tools/call`` envelopes.

    ``invoke`` never raises for business failures: unknown tools, invalid
    arguments and failing operation bodies all come back as a ``ToolResult``.
    """

    def __init__(self, registry: ToolRegistry, client: Any):
        self._registry = registry
        self._client = client

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def list_tools(self) -> List[ToolSpec]:
        return self._registry.list_tools()

    async def invoke(self, request: CallRequest) -> ToolResult:
        invocation = ToolInvocation(
            client=self._client,
            call_id=request.call_id or uuid.uuid4().hex[:12],
            tool_name=request.name,
            arguments=request.arguments if request.arguments is not None else {},
        )
        return await self._registry.dispatch(invocation)

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        result = await self.invoke(CallRequest(name=name, arguments=arguments))
        return render_envelope(result)


def render_envelope(result: ToolResult) -> Dict[str, Any]:
    """Render a ``ToolResult`` as an MCP ``CallToolResult`` payload."""
    return {
        "content": [{"type": "text", "text": result.render_text()}],
        "isError": result.is_error,
    }


__all__ = ["CallRequest", "ToolRouter", "render_envelope"]
