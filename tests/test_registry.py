"""Tests for the tool registry and tool definitions."""

import pytest
from pydantic import BaseModel

from expose.mcp.registry import DuplicateToolError, ToolRegistry, load_provider, load_providers
from expose.mcp.schema import PydanticSchema
from expose.tools.base import ToolDefinition, tool


async def noop(arguments):
    return None


class TestToolDefinition:
    """Tests for the tool contract."""

    def test_decorator_builds_definition(self):
        class Args(BaseModel):
            message: str

        @tool(name="echo", description="echoes", args=Args)
        async def echo(args: Args) -> str:
            return args.message

        assert isinstance(echo, ToolDefinition)
        assert echo.name == "echo"
        assert echo.description == "echoes"
        assert isinstance(echo.args_schema, PydanticSchema)

    def test_optional_fields_default_to_none(self):
        definition = ToolDefinition(name="plain", run=noop)
        assert definition.description is None
        assert definition.args_schema is None

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_name_must_be_non_empty_string(self, name):
        with pytest.raises(ValueError):
            ToolDefinition(name=name, run=noop)

    def test_run_must_be_callable(self):
        with pytest.raises(TypeError):
            ToolDefinition(name="x", run="not callable")

    def test_definitions_are_immutable(self):
        definition = ToolDefinition(name="plain", run=noop)
        with pytest.raises(AttributeError):
            definition.name = "other"


class TestToolRegistry:
    """Tests for the registry itself."""

    def test_get(self, registry):
        assert registry.get("echo").name == "echo"
        assert registry.get("missing") is None

    def test_registration_order_is_kept(self):
        names = ["zeta", "alpha", "mid"]
        registry = ToolRegistry(ToolDefinition(name=n, run=noop) for n in names)
        assert [t.name for t in registry.list_tools()] == names
        assert [t.name for t in registry] == names

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(DuplicateToolError):
            ToolRegistry([
                ToolDefinition(name="same", run=noop),
                ToolDefinition(name="same", run=noop),
            ])

    def test_rejects_non_definitions(self):
        with pytest.raises(TypeError):
            ToolRegistry([noop])

    def test_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._tools["new"] = ToolDefinition(name="new", run=noop)

    def test_counts(self, registry):
        assert registry.tool_count == 3
        assert len(registry) == 3
        assert "echo" in registry
        assert "missing" not in registry
        assert ToolRegistry().tool_count == 0

    def test_list_tools_describes_schemas(self, registry):
        tools = {t.name: t for t in registry.list_tools()}
        assert tools["echo"].inputSchema["required"] == ["message"]
        assert tools["raw"].inputSchema == {"type": "object"}
        assert tools["raw"].description is None


class TestProviderLoading:
    """Tests for loading bundled providers."""

    def test_load_echo_provider(self):
        tools = load_provider("echo")
        assert [t.name for t in tools] == ["echo"]

    def test_load_unknown_provider(self):
        assert load_provider("does_not_exist") == []

    def test_load_providers_in_order(self):
        tools = load_providers(["systeminfo", "echo", "crm"])
        assert [t.name for t in tools] == [
            "systemInfo",
            "echo",
            "create_sales_crm_record",
            "list_sales_crm_records",
            "update_sales_crm_record",
        ]
        # bundled providers can share one registry
        assert ToolRegistry(tools).tool_count == 5
