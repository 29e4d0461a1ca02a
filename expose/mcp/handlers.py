"""MCP method handlers for JSON-RPC requests."""

import json
import logging
from typing import Any

from pydantic_core import to_jsonable_python

from expose.mcp.errors import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, McpError
from expose.mcp.models import (
    CallToolRequest,
    Capabilities,
    InitializeRequest,
    InitializeResult,
    JsonRpcRequest,
    ListToolsRequest,
    ServerInfo,
    TextContent,
    ToolCallResult,
    ToolsListResult,
)
from expose.mcp.registry import ToolRegistry
from expose.mcp.schema import validate

logger = logging.getLogger(__name__)

# MCP protocol version we support
PROTOCOL_VERSION = "2024-11-05"


def render_tool_result(value: Any) -> str:
    """Serialize a tool's return value as pretty-printed JSON text."""
    return json.dumps(to_jsonable_python(value), indent=2, ensure_ascii=False)


class MCPHandlers:
    """Handlers for MCP protocol methods."""

    def __init__(self, registry: ToolRegistry, server_info: ServerInfo):
        self.registry = registry
        self.server_info = server_info

    async def handle_initialize(self, request: InitializeRequest) -> dict[str, Any]:
        """Handle the initialize request. Static, so repeated calls agree."""
        result = InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=Capabilities(tools={}),
            serverInfo=self.server_info,
        )
        return result.model_dump()

    async def handle_tools_list(self, request: ListToolsRequest) -> dict[str, Any]:
        """Handle the tools/list request."""
        result = ToolsListResult(tools=self.registry.list_tools())
        return result.model_dump()

    async def handle_tools_call(self, request: CallToolRequest) -> dict[str, Any]:
        """
        Handle the tools/call request.

        Raises McpError for an unknown tool, invalid arguments, or a tool
        that raised; the tool never runs when its arguments are invalid.
        """
        name = request.params.name
        definition = self.registry.get(name)
        if definition is None:
            logger.warning(f"tools/call for unknown tool: {name}")
            raise McpError(METHOD_NOT_FOUND, "Tool not found")

        arguments: Any = request.params.arguments
        if definition.args_schema is not None:
            outcome = await validate(definition.args_schema, arguments)
            if not outcome.ok:
                logger.info(
                    f"Invalid arguments for tool {name}: "
                    + "; ".join(
                        f"{'.'.join(str(p) for p in issue.path) or '<root>'}: {issue.message}"
                        for issue in outcome.issues
                    )
                )
                raise McpError(INVALID_PARAMS, "Invalid arguments", issues=outcome.issues)
            arguments = outcome.value
        elif arguments is None:
            arguments = {}

        logger.info(f"Calling tool: {name}")
        try:
            value = await definition.run(arguments)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e!r}")
            raise McpError(INTERNAL_ERROR, str(e) or type(e).__name__) from e

        result = ToolCallResult(content=[TextContent(text=render_tool_result(value))])
        return result.model_dump()

    async def dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        """Route a parsed request to its handler; the set of methods is closed."""
        if isinstance(request, InitializeRequest):
            return await self.handle_initialize(request)
        if isinstance(request, ListToolsRequest):
            return await self.handle_tools_list(request)
        if isinstance(request, CallToolRequest):
            return await self.handle_tools_call(request)
        raise McpError(METHOD_NOT_FOUND, f"Method not found: {request.method}")
