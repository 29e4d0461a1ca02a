"""Pydantic models for MCP JSON-RPC 2.0 protocol."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, TypeAdapter

# Any JSON number or string; booleans are not valid ids
RequestId = StrictInt | StrictFloat | StrictStr


# =============================================================================
# JSON-RPC 2.0 Base Models
# =============================================================================


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request object."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            data["data"] = self.data
        return data


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response object."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId | None = None
    result: Any = None
    error: JsonRpcError | None = None

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Custom serialization so exactly one of result/error is present."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = self.result
        return data


# =============================================================================
# MCP Content Types
# =============================================================================


class TextContent(BaseModel):
    """Text content returned by tools."""

    type: Literal["text"] = "text"
    text: str


# =============================================================================
# MCP Tool Models
# =============================================================================


class Tool(BaseModel):
    """MCP tool definition as advertised by tools/list."""

    name: str = Field(..., description="Tool name")
    description: str | None = Field(None, description="Human-readable description")
    inputSchema: dict[str, Any] = Field(
        ..., description="JSON Schema for tool input"
    )

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Omit a missing description; inputSchema is passed through untouched."""
        data: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["inputSchema"] = self.inputSchema
        return data


class ToolCallResult(BaseModel):
    """Result of a tool call."""

    content: list[TextContent]


# =============================================================================
# MCP Protocol Models
# =============================================================================


class ServerInfo(BaseModel):
    """Server information returned during initialization."""

    name: str
    version: str


class Capabilities(BaseModel):
    """Server capabilities."""

    tools: dict[str, Any] = Field(default_factory=dict)


class InitializeResult(BaseModel):
    """Result of initialize request."""

    protocolVersion: str
    capabilities: Capabilities
    serverInfo: ServerInfo


class ToolsListResult(BaseModel):
    """Result of tools/list request."""

    tools: list[Tool]

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        return {"tools": [tool.model_dump() for tool in self.tools]}


class ToolCallParams(BaseModel):
    """Parameters for tools/call request."""

    name: str
    arguments: dict[str, Any] | None = None


# =============================================================================
# MCP Requests
# =============================================================================


class InitializeRequest(JsonRpcRequest):
    """initialize: params are accepted but not required."""

    method: Literal["initialize"]


class ListToolsRequest(JsonRpcRequest):
    """tools/list: takes no params (a pagination cursor is ignored)."""

    method: Literal["tools/list"]


class CallToolRequest(JsonRpcRequest):
    """tools/call: params name the tool and carry its arguments."""

    method: Literal["tools/call"]
    params: ToolCallParams  # type: ignore[assignment]


McpRequest = Annotated[
    InitializeRequest | ListToolsRequest | CallToolRequest,
    Field(discriminator="method"),
]

mcp_request_adapter: TypeAdapter[McpRequest] = TypeAdapter(McpRequest)
