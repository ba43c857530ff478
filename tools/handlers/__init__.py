"""Tool handler implementations."""
from .function import FunctionToolHandler

__all__ = ["FunctionToolHandler"]
