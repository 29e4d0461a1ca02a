"""System info provider tools."""

from expose.tools.base import ToolDefinition, tool
from expose.tools.systeminfo.client import server_info


@tool(
    name="systemInfo",
    description="Get system information about the server like uptime, memory, cpu, etc.",
)
async def system_info(arguments: dict) -> dict:
    return server_info()


def get_tools() -> list[ToolDefinition]:
    """Return all systeminfo provider tools."""
    return [system_info]
