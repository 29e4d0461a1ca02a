"""expose - serve async Python tools to MCP clients over JSON-RPC."""

from expose.mcp.dispatcher import Dispatcher
from expose.mcp.registry import ToolRegistry
from expose.mcp.schema import PydanticSchema
from expose.tools.base import ToolDefinition, tool

__version__ = "0.0.1"

__all__ = ["Dispatcher", "ToolRegistry", "PydanticSchema", "ToolDefinition", "tool"]
