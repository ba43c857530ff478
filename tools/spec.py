"""Tool specification models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Type, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from mobsf_client import MobSFClient
    from .schemas import ToolSchema


ToolFunc = Callable[["MobSFClient", Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Describes a tool as advertised to callers."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)

    def to_mcp_definition(self) -> Dict[str, Any]:
        """Return a dict compatible with MCP ``tools/list`` entries."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True, slots=True)
class Tool:
    """A catalog entry: advertised spec, validating model and operation body."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    fn: ToolFunc
    input_model: Type["ToolSchema"]

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(name=self.name, description=self.description, input_schema=self.input_schema)


__all__ = ["Tool", "ToolFunc", "ToolSpec"]
