"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from expose.config.loader import get_settings
from expose.main import create_app
from expose.mcp.dispatcher import Dispatcher
from expose.mcp.models import ServerInfo
from expose.mcp.registry import ToolRegistry
from expose.tools.base import ToolDefinition, tool


class EchoArgs(BaseModel):
    message: str


class CallLog:
    """Records the arguments every test tool was run with."""

    def __init__(self):
        self.calls: list[tuple[str, object]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def call_log():
    return CallLog()


@pytest.fixture
def tools(call_log) -> list[ToolDefinition]:
    """echo (with schema), boom (always fails) and raw (no schema)."""

    @tool(name="echo", description="echoes the message back", args=EchoArgs)
    async def echo(args: EchoArgs) -> str:
        call_log.calls.append(("echo", args))
        return "Echo from server: " + args.message

    @tool(name="boom", description="always fails")
    async def boom(arguments: dict) -> None:
        call_log.calls.append(("boom", arguments))
        raise RuntimeError("boom")

    @tool(name="raw")
    async def raw(arguments: dict) -> dict:
        call_log.calls.append(("raw", arguments))
        return {"received": arguments, "count": len(arguments)}

    return [echo, boom, raw]


@pytest.fixture
def registry(tools) -> ToolRegistry:
    return ToolRegistry(tools)


@pytest.fixture
def dispatcher(registry) -> Dispatcher:
    return Dispatcher(registry, ServerInfo(name="expose-test", version="9.9.9"))


@pytest.fixture
def app(tools):
    return create_app(tools=tools)


@pytest.fixture
def client(app):
    """Synchronous test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def settings():
    """Get application settings."""
    return get_settings()


@pytest.fixture
def sample_jsonrpc_request():
    """Sample JSON-RPC request factory."""
    def _make_request(method: str, params: dict = None, id: int | str = 1):
        request = {
            "jsonrpc": "2.0",
            "id": id,
            "method": method,
        }
        if params is not None:
            request["params"] = params
        return request
    return _make_request
