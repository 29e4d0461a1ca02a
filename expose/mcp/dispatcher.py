"""JSON-RPC 2.0 message processing for the MCP methods."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from expose.config.loader import get_settings
from expose.mcp.errors import INTERNAL_ERROR, METHOD_NOT_FOUND, PARSE_ERROR, McpError, make_error_data
from expose.mcp.handlers import MCPHandlers
from expose.mcp.models import JsonRpcError, JsonRpcResponse, McpRequest, ServerInfo, mcp_request_adapter
from expose.mcp.registry import ToolRegistry
from expose.mcp.schema import ValidationIssue

logger = logging.getLogger(__name__)


def extract_request_id(message: Any) -> int | float | str | None:
    """Return the id of a raw message if it has a usable one."""
    if not isinstance(message, dict):
        return None
    request_id = message.get("id")
    if isinstance(request_id, bool) or not isinstance(request_id, (int, float, str)):
        return None
    return request_id


def error_response(request_id: int | float | str | None, code: int, message: str | None = None) -> JsonRpcResponse:
    return JsonRpcResponse(id=request_id, error=JsonRpcError(**make_error_data(code, message)))


@dataclass
class DispatchResult:
    """The response for one request plus any argument validation issues."""

    response: JsonRpcResponse
    issues: list[ValidationIssue] = field(default_factory=list)


class Dispatcher:
    """
    Turn one parsed JSON-RPC request into one JSON-RPC response.

    Each call is self-contained. The only shared state is the read-only
    registry, so concurrent calls are safe.
    """

    def __init__(self, registry: ToolRegistry, server_info: ServerInfo | None = None):
        if server_info is None:
            settings = get_settings()
            server_info = ServerInfo(name=settings.server_name, version=settings.server_version)
        self.registry = registry
        self.handlers = MCPHandlers(registry, server_info)

    def parse_request(self, message: Any) -> McpRequest:
        """
        Validate the envelope against the known request shapes.

        Raises McpError(METHOD_NOT_FOUND) when the message has an id, and
        ValueError when it cannot be tied to an id at all.
        """
        try:
            return mcp_request_adapter.validate_python(message)
        except ValidationError as e:
            if extract_request_id(message) is None:
                raise ValueError(f"Request without a usable id: {e}") from e
            method = message.get("method") if isinstance(message, dict) else None
            logger.info(f"Rejected request for method {method!r}: {e.error_count()} errors")
            raise McpError(METHOD_NOT_FOUND, "Method not found") from e

    async def dispatch(self, message: Any) -> DispatchResult:
        """Process a message, keeping the validation issues for the caller."""
        request_id = extract_request_id(message)
        try:
            request = self.parse_request(message)
            result = await self.handlers.dispatch(request)
            return DispatchResult(JsonRpcResponse(id=request.id, result=result))
        except McpError as e:
            return DispatchResult(
                JsonRpcResponse(id=request_id, error=JsonRpcError(**e.to_error_data())),
                issues=e.issues,
            )
        except Exception:
            logger.exception(f"Unexpected error processing request id={request_id!r}")
            return DispatchResult(error_response(request_id, INTERNAL_ERROR, "Internal error"))

    async def process(self, message: Any) -> dict[str, Any]:
        """Process a parsed JSON-RPC message and return the response object."""
        result = await self.dispatch(message)
        return result.response.model_dump()

    async def handle_message(self, raw_data: str | bytes) -> dict[str, Any]:
        """Handle a raw JSON body end-to-end; bodies that are not JSON get PARSE_ERROR."""
        try:
            message = json.loads(raw_data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.info(f"Could not parse request body: {e}")
            return error_response(None, PARSE_ERROR, f"Invalid JSON: {e}").model_dump()
        return await self.process(message)
