"""FastAPI MCP Server - HTTP transport for the dispatcher."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expose.config.loader import Settings, get_enabled_providers, get_settings, load_provider_config
from expose.mcp.dispatcher import Dispatcher
from expose.mcp.handlers import PROTOCOL_VERSION
from expose.mcp.models import ServerInfo
from expose.mcp.registry import ToolRegistry, load_providers
from expose.tools.base import ToolDefinition
from expose.utils.http import close_shared_client
from expose.utils.logging import get_logger, set_request_id, setup_logging


def build_dispatcher(tools: Iterable[ToolDefinition], settings: Settings) -> Dispatcher:
    registry = ToolRegistry(tools)
    server_info = ServerInfo(name=settings.server_name, version=settings.server_version)
    return Dispatcher(registry, server_info)


def create_app(
    tools: Iterable[ToolDefinition] | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the HTTP app around a fixed set of tools.

    With tools=None the tools of the providers enabled in
    config/providers.yaml are loaded when the app starts.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging()
        log = get_logger("startup")
        log.info(
            "Starting MCP server",
            server_name=settings.server_name,
            version=settings.server_version,
        )

        if getattr(app.state, "dispatcher", None) is None:
            enabled_providers = get_enabled_providers(load_provider_config())
            log.info("Loading providers", providers=enabled_providers)
            app.state.dispatcher = build_dispatcher(load_providers(enabled_providers), settings)

        log.info("Tool registry ready", tool_count=app.state.dispatcher.registry.tool_count)

        yield

        log.info("Shutting down MCP server")
        await close_shared_client()

    app = FastAPI(
        title="expose",
        description="Expose tools to MCP clients over JSON-RPC",
        version=settings.server_version,
        lifespan=lifespan,
    )
    app.state.dispatcher = build_dispatcher(tools, settings) if tools is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = set_request_id(request.headers.get("X-Request-ID"))
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root(request: Request) -> dict:
        """Server info."""
        dispatcher: Dispatcher | None = request.app.state.dispatcher
        return {
            "name": settings.server_name,
            "version": settings.server_version,
            "endpoints": {"health": "/health", "message": "/"},
            "tools_available": dispatcher.registry.tool_count if dispatcher else 0,
            "mcp_protocol_version": PROTOCOL_VERSION,
        }

    @app.post("/")
    async def message_endpoint(request: Request) -> JSONResponse:
        """
        Message endpoint for JSON-RPC requests.

        Always answers 200 with a JSON-RPC response body, success or error.
        """
        dispatcher: Dispatcher = request.app.state.dispatcher
        body = await request.body()

        log = get_logger("mcp")
        log.debug("mcp request", body=body.decode("utf-8", errors="replace"))
        response = await dispatcher.handle_message(body)
        log.debug("mcp response", id=response.get("id"), error=response.get("error"))

        return JSONResponse(content=response)

    return app


app = create_app()


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "expose.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
