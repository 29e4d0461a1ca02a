"""MCP (Model Context Protocol) implementation with JSON-RPC 2.0."""

from expose.mcp.models import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    Tool,
    TextContent,
    ToolCallResult,
)
from expose.mcp.schema import (
    SchemaAdapter,
    PydanticSchema,
    ValidationIssue,
    ValidationOutcome,
)
from expose.mcp.errors import (
    PARSE_ERROR,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    McpError,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "Tool",
    "TextContent",
    "ToolCallResult",
    "SchemaAdapter",
    "PydanticSchema",
    "ValidationIssue",
    "ValidationOutcome",
    "PARSE_ERROR",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "McpError",
]
