"""JSON-RPC 2.0 error codes and the exception used to carry them."""

from typing import Any, Sequence

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700  # Invalid JSON was received
METHOD_NOT_FOUND = -32601  # Unknown method, malformed envelope, or unknown tool
INVALID_PARAMS = -32602  # Tool arguments failed schema validation
INTERNAL_ERROR = -32603  # Tool raised, or the dispatcher failed


def error_message(code: int) -> str:
    """Get the standard message for a JSON-RPC error code."""
    messages = {
        PARSE_ERROR: "Parse error",
        METHOD_NOT_FOUND: "Method not found",
        INVALID_PARAMS: "Invalid params",
        INTERNAL_ERROR: "Internal error",
    }
    return messages.get(code, "Unknown error")


def make_error_data(code: int, message: str | None = None, data: Any = None) -> dict[str, Any]:
    """Create an error object for JSON-RPC response."""
    error: dict[str, Any] = {
        "code": code,
        "message": message or error_message(code),
    }
    if data is not None:
        error["data"] = data
    return error


class McpError(Exception):
    """A protocol-level failure that maps onto a JSON-RPC error object.

    ``issues`` holds the schema validation issues behind an INVALID_PARAMS
    error so the dispatcher's caller can inspect them. They are not sent
    over the wire.
    """

    def __init__(self, code: int, message: str | None = None, issues: Sequence[Any] = ()):
        self.code = code
        self.message = message or error_message(code)
        self.issues = list(issues)
        super().__init__(self.message)

    def to_error_data(self) -> dict[str, Any]:
        return make_error_data(self.code, self.message)
