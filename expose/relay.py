"""expose-relay: connect a stdio MCP client to a remote expose server.

Usage:
    expose-relay http://localhost:3000

Set EXPOSE_KEY to send it as a bearer token with every forwarded request.
"""

import asyncio
import sys

import click

from expose.config.loader import get_settings
from expose.mcp.proxy import run_stdio
from expose.utils.logging import setup_logging


@click.command()
@click.argument("url")
def main(url: str) -> None:
    """Relay MCP messages between stdin/stdout and the server at URL."""
    # stdout carries protocol messages, so logs go to stderr
    setup_logging(stream=sys.stderr)
    settings = get_settings()
    try:
        asyncio.run(
            run_stdio(
                url,
                token=settings.expose_key if settings.relay_auth_enabled else None,
                timeout=float(settings.default_timeout),
            )
        )
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
