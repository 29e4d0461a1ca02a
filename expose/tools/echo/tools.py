"""Echo provider - the smallest possible tool, handy for testing clients."""

from pydantic import BaseModel, Field

from expose.tools.base import ToolDefinition, tool


class EchoArgs(BaseModel):
    message: str = Field(..., description="The message to echo back")


@tool(name="echo", description="echoes the message back", args=EchoArgs)
async def echo(args: EchoArgs) -> str:
    return "Echo from server: " + args.message


def get_tools() -> list[ToolDefinition]:
    """Return all echo provider tools."""
    return [echo]
