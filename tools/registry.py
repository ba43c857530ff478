"""Immutable tool catalog mapping tool names to descriptors and handlers."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence

from errors import ErrorKind, UnknownToolError
from .handler import ToolHandler, ToolInvocation, ToolResult, execute_handler
from .handlers.function import FunctionToolHandler
from .spec import Tool, ToolSpec

logger = logging.getLogger(__name__)

class ToolRegistry:
    """Central catalog of tools, fixed at construction.

    Iteration and ``list_tools`` follow registration order.
    """

    def __init__(self, tools: Sequence[Tool], handlers: Dict[str, ToolHandler]):
        self._order: tuple[Tool, ...] = tuple(tools)
        self._tools = MappingProxyType({tool.name: tool for tool in self._order})
        self._handlers = MappingProxyType(dict(handlers))

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def list_tools(self) -> List[ToolSpec]:
        return [tool.spec for tool in self._order]

    def lookup(self, name: str) -> Tool:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool

    def get_handler(self, name: str) -> Optional[ToolHandler]:
        return self._handlers.get(name)

    async def dispatch(self, invocation: ToolInvocation) -> ToolResult:
        handler = self.get_handler(invocation.tool_name)
        if handler is None:
            logger.warning("unknown tool requested: %s", invocation.tool_name)
            return ToolResult.failure(
                invocation.tool_name,
                ErrorKind.NOT_FOUND,
                UnknownToolError(invocation.tool_name).message,
            )
        return await execute_handler(handler, invocation)


class ToolRegistryBuilder:
    """Builder object for constructing tool registries."""

    def __init__(self) -> None:
        self.tools: List[Tool] = []
        self.handlers: Dict[str, ToolHandler] = {}

    def register(self, tool: Tool, handler: Optional[ToolHandler] = None) -> None:
        if tool.name in self.handlers:
            raise ValueError(f"duplicate tool name '{tool.name}'")
        self.tools.append(tool)
        self.handlers[tool.name] = handler if handler is not None else FunctionToolHandler(tool)

    def build(self) -> ToolRegistry:
        return ToolRegistry(self.tools, self.handlers)


def build_registry_from_tools(tools: Sequence[Tool]) -> ToolRegistry:
    """Create a ``ToolRegistry`` wrapping each tool in a ``FunctionToolHandler``."""
    builder = ToolRegistryBuilder()
    for tool in tools:
        builder.register(tool)
    return builder.build()


__all__ = [
    "ToolRegistry",
    "ToolRegistryBuilder",
    "build_registry_from_tools",
]
