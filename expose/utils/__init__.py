"""Utility modules: logging, HTTP client."""

from expose.utils.logging import setup_logging, get_logger
from expose.utils.http import create_http_client, get_shared_client

__all__ = [
    "setup_logging",
    "get_logger",
    "create_http_client",
    "get_shared_client",
]
