"""Tool registry for managing MCP tools."""

import importlib
import logging
from types import MappingProxyType
from typing import Iterable, Iterator

from expose.mcp.models import Tool
from expose.mcp.schema import describe
from expose.tools.base import ToolDefinition

logger = logging.getLogger(__name__)


class DuplicateToolError(ValueError):
    """Raised when two tools in one registry share a name."""


class ToolRegistry:
    """Read-only, ordered set of tools built once at startup."""

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        registered: dict[str, ToolDefinition] = {}
        for definition in tools:
            if not isinstance(definition, ToolDefinition):
                raise TypeError(
                    f"Expected ToolDefinition, got {type(definition).__name__}"
                )
            if definition.name in registered:
                raise DuplicateToolError(
                    f"Tool '{definition.name}' is registered more than once"
                )
            registered[definition.name] = definition
            logger.info(f"Registered tool: {definition.name}")
        self._tools = MappingProxyType(registered)

    def get(self, name: str) -> ToolDefinition | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools as MCP Tool models, in registration order."""
        return [
            Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=describe(definition.args_schema),
            )
            for definition in self._tools.values()
        ]

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)


def load_provider(provider_name: str) -> list[ToolDefinition]:
    """
    Import a provider module and return its tools.

    Providers live in expose/tools/<provider_name>/ and expose a
    get_tools() function. A provider that cannot be imported yields no tools.
    """
    module_path = f"expose.tools.{provider_name}.tools"
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.warning(f"Could not import provider '{provider_name}': {e}")
        return []

    if not hasattr(module, "get_tools"):
        logger.warning(f"Provider '{provider_name}' has no get_tools function")
        return []

    tools = list(module.get_tools())
    logger.info(f"Loaded provider: {provider_name} ({len(tools)} tools)")
    return tools


def load_providers(provider_names: list[str]) -> list[ToolDefinition]:
    """Collect the tools of several providers, in the order given."""
    tools: list[ToolDefinition] = []
    for name in provider_names:
        tools.extend(load_provider(name))
    return tools
