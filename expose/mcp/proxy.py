"""Relay between a local newline-delimited JSON-RPC stream and a remote endpoint.

MCP clients talk to local servers over the server process's stdin/stdout.
:class:`StreamProxy` sits in that position and forwards every message that
expects a reply to a remote HTTP endpoint running the dispatcher, one POST per
message, writing the endpoint's reply back onto the stream.
"""

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, TextIO

import httpx

from expose.mcp.errors import PARSE_ERROR, make_error_data
from expose.utils.http import create_http_client
from expose.utils.logging import get_logger

log = get_logger(__name__)

# Largest single stream message accepted
MAX_LINE_BYTES = 16 * 1024 * 1024

Send = Callable[[Any], Awaitable[None]]


class LineWriter:
    """Write messages to a text stream as newline-delimited JSON."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    async def __call__(self, message: Any) -> None:
        """Write one message. The write and flush block; fine for stdout."""
        self.stream.write(json.dumps(message, ensure_ascii=False) + "\n")
        self.stream.flush()


class StreamProxy:
    """
    Forward stream messages that carry an id to a remote endpoint.

    Messages without an id (notifications) are written straight back onto
    the stream. Each forwarded message is its own round trip; overlapping
    calls are not serialized, so replies can come back out of order.
    Transport failures are logged and produce no reply.
    """

    def __init__(
        self,
        endpoint: str,
        send: Send,
        client: httpx.AsyncClient | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        self.endpoint = endpoint
        self._send = send
        self._owns_client = client is None
        self._client = client or create_http_client(timeout=timeout)
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._pending: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> "StreamProxy":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def forward(self, message: dict[str, Any]) -> Any | None:
        """POST one message to the endpoint; None if no usable reply came back."""
        try:
            response = await self._client.post(
                self.endpoint, json=message, headers=self._headers
            )
        except httpx.HTTPError as e:
            log.error(
                "Remote endpoint request failed",
                endpoint=self.endpoint,
                id=message.get("id"),
                error=repr(e),
            )
            return None

        try:
            return response.json()
        except ValueError as e:
            log.error(
                "Remote endpoint reply is not JSON",
                endpoint=self.endpoint,
                id=message.get("id"),
                status_code=response.status_code,
                error=str(e),
            )
            return None

    async def handle_message(self, message: Any) -> None:
        """Relay one inbound stream message."""
        if isinstance(message, dict) and "id" in message:
            reply = await self.forward(message)
            if reply is not None:
                await self._send(reply)
            return
        await self._send(message)

    async def _handle_logged(self, message: Any) -> None:
        try:
            await self.handle_message(message)
        except Exception:
            log.exception("Failed to relay message")

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """
        Read newline-delimited JSON messages until EOF.

        Every message is handled in its own task. Lines that are not JSON get
        a PARSE_ERROR reply. Returns once the stream ends and all in-flight
        messages have been relayed.
        """
        while True:
            line = await reader.readline()
            if not line:
                break
            line = line.strip()
            if not line:
                continue

            try:
                message = json.loads(line)
            except ValueError as e:
                log.warning("Could not parse stream message", error=str(e))
                await self._send({
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": make_error_data(PARSE_ERROR),
                })
                continue

            task = asyncio.create_task(self._handle_logged(message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        if self._pending:
            await asyncio.gather(*self._pending)
        log.info("Input stream closed")


async def run_stdio(endpoint: str, token: str | None = None, timeout: float | None = None) -> None:
    """Relay this process's stdin/stdout to ``endpoint``."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=MAX_LINE_BYTES)
    await loop.connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), sys.stdin
    )

    log.info("Relaying stdio", endpoint=endpoint, auth=bool(token))
    async with StreamProxy(endpoint, LineWriter(sys.stdout), token=token, timeout=timeout) as proxy:
        await proxy.serve(reader)
