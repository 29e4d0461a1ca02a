"""Tool definition and decorator for tool registration."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from expose.mcp.schema import SchemaAdapter, as_schema

# Type alias for tool run functions
ToolRun = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    """
    A named operation the server can expose.

    ``run`` receives the validated arguments (a model instance for pydantic
    schemas) or, when the tool has no schema, the raw arguments object. It
    returns any JSON-serializable value and signals failure by raising.
    """

    name: str
    run: ToolRun
    description: str | None = None
    args_schema: SchemaAdapter | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Tool name must be a non-empty string")
        if not callable(self.run):
            raise TypeError(f"Tool '{self.name}' run must be callable")


def tool(
    name: str,
    description: str | None = None,
    args: SchemaAdapter | type[BaseModel] | None = None,
) -> Callable[[ToolRun], ToolDefinition]:
    """
    Decorator to turn an async function into a ToolDefinition.

    Usage:
        class EchoArgs(BaseModel):
            message: str

        @tool(name="echo", description="Echoes the message back", args=EchoArgs)
        async def echo(args: EchoArgs) -> str:
            return "Echo from server: " + args.message
    """
    def decorator(func: ToolRun) -> ToolDefinition:
        return ToolDefinition(
            name=name,
            run=func,
            description=description,
            args_schema=as_schema(args),
        )

    return decorator
