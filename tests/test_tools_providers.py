"""Tests for the bundled tool providers."""

import json

import httpx
import pytest

from expose.config.loader import Settings
from expose.mcp.dispatcher import Dispatcher
from expose.mcp.errors import INTERNAL_ERROR, INVALID_PARAMS
from expose.mcp.models import ServerInfo
from expose.mcp.registry import ToolRegistry
from expose.tools.crm import tools as crm_tools
from expose.tools.crm.client import CrmClient, CrmError, from_record, to_columns
from expose.tools.echo.tools import EchoArgs, echo
from expose.tools.systeminfo.client import server_info
from expose.tools.systeminfo.tools import system_info
from expose.utils.http import set_shared_client

CRM_SETTINGS = Settings(
    crm_api_key="key123",
    crm_base_id="appBase",
    crm_table="Default",
    crm_api_url="https://crm.test/v0",
)


class TestEchoProvider:
    """Tests for the echo tool."""

    @pytest.mark.asyncio
    async def test_echo(self):
        assert await echo.run(EchoArgs(message="hi")) == "Echo from server: hi"

    def test_echo_schema(self):
        schema = echo.args_schema.describe()
        assert schema["required"] == ["message"]
        assert schema["properties"]["message"]["description"] == "The message to echo back"


class TestSystemInfoProvider:
    """Tests for the systemInfo tool."""

    def test_server_info_fields(self):
        info = server_info()
        for key in ("hostname", "platform", "arch", "uptime", "totalMemory", "freeMemory", "cpuCount", "loadAvg"):
            assert key in info
        json.dumps(info)

    @pytest.mark.asyncio
    async def test_tool_has_no_schema(self):
        assert system_info.args_schema is None
        result = await system_info.run({})
        assert result["hostname"]


class FakeAirtable:
    """In-memory stand-in for the Airtable REST API."""

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.records = {
            "rec1": {"Email": "a@x.io", "Company": "A", "Stage": "Prospect"},
            "rec2": {"Email": "b@x.io", "Company": "B", "Stage": "Closed"},
            "rec3": {"Company": "C", "Stage": "Qualified", "Notes": "warm"},
        }
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != "Bearer key123":
            return httpx.Response(401, json={"error": "AUTHENTICATION_REQUIRED"})

        parts = request.url.path.split("/")
        if request.method == "GET":
            ids = sorted(self.records)
            start = int(request.url.params.get("offset", 0))
            page = ids[start:start + self.page_size]
            body = {"records": [{"id": i, "fields": self.records[i]} for i in page]}
            if start + self.page_size < len(ids):
                body["offset"] = str(start + self.page_size)
            return httpx.Response(200, json=body)

        fields = json.loads(request.content)["fields"]
        if request.method == "POST":
            record_id = f"rec{len(self.records) + 1}"
            self.records[record_id] = fields
            return httpx.Response(200, json={"id": record_id, "fields": fields})
        if request.method == "PATCH":
            record_id = parts[-1]
            if record_id not in self.records:
                return httpx.Response(404, json={"error": "NOT_FOUND"})
            self.records[record_id].update(fields)
            return httpx.Response(200, json={"id": record_id, "fields": self.records[record_id]})
        return httpx.Response(405)


@pytest.fixture
def airtable():
    fake = FakeAirtable()
    set_shared_client(httpx.AsyncClient(transport=httpx.MockTransport(fake)))
    yield fake
    set_shared_client(None)


@pytest.fixture
def crm_client(airtable, monkeypatch):
    client = CrmClient(CRM_SETTINGS)
    monkeypatch.setattr(crm_tools, "get_client", lambda: client)
    return client


class TestCrmClient:
    """Tests for the Airtable-backed CRM client."""

    def test_field_mapping(self):
        assert to_columns({"email": "a@x.io", "notes": None, "id": "rec1", "stage": ""}) == {
            "Email": "a@x.io"
        }
        assert from_record({"id": "rec9", "fields": {"Company": "Acme"}}) == {
            "id": "rec9",
            "email": None,
            "company": "Acme",
            "stage": None,
            "contact": None,
            "notes": None,
        }

    @pytest.mark.asyncio
    async def test_list_follows_pagination(self, crm_client, airtable):
        records = await crm_client.list_records()
        assert [r["id"] for r in records] == ["rec1", "rec2", "rec3"]
        assert records[2]["notes"] == "warm"
        assert len(airtable.requests) == 2
        assert airtable.requests[0].url.params["view"] == "Grid view"

    @pytest.mark.asyncio
    async def test_create(self, crm_client, airtable):
        record_id = await crm_client.create_record({
            "email": "new@x.io", "company": "New", "stage": "Prospect", "contact": "Nia", "notes": "",
        })
        assert record_id == "rec4"
        assert airtable.records["rec4"] == {
            "Email": "new@x.io", "Company": "New", "Stage": "Prospect", "Contact": "Nia",
        }

    @pytest.mark.asyncio
    async def test_update_missing_record(self, crm_client):
        with pytest.raises(CrmError):
            await crm_client.update_record("recX", {"notes": "x"})

    @pytest.mark.asyncio
    async def test_unconfigured_client_raises(self, airtable):
        client = CrmClient(Settings(crm_api_key="", crm_base_id=""))
        with pytest.raises(CrmError, match="not configured"):
            await client.list_records()
        assert airtable.requests == []


class TestCrmTools:
    """Tests for the CRM tools through the dispatcher."""

    @pytest.fixture
    def dispatcher(self, crm_client):
        return Dispatcher(
            ToolRegistry(crm_tools.get_tools()), ServerInfo(name="crm", version="1")
        )

    @pytest.mark.asyncio
    async def test_update_record(self, dispatcher, airtable, sample_jsonrpc_request):
        response = await dispatcher.process(sample_jsonrpc_request(
            "tools/call",
            {"name": "update_sales_crm_record", "arguments": {"id": "rec3", "contact": "Cy"}},
        ))
        assert json.loads(response["result"]["content"][0]["text"]) == "rec3"
        assert airtable.records["rec3"]["Contact"] == "Cy"
        assert airtable.records["rec3"]["Notes"] == "warm"

    @pytest.mark.asyncio
    async def test_list_records(self, dispatcher, sample_jsonrpc_request):
        response = await dispatcher.process(sample_jsonrpc_request(
            "tools/call", {"name": "list_sales_crm_records", "arguments": {}},
        ))
        records = json.loads(response["result"]["content"][0]["text"])
        assert len(records) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [
        {"email": "not-an-email", "company": "A", "stage": "Prospect", "contact": "x", "notes": ""},
        {"email": "a@x.io", "company": "A", "stage": "Lost", "contact": "x", "notes": ""},
        {"email": "a@x.io", "company": "A"},
    ])
    async def test_create_rejects_invalid_arguments(
        self, dispatcher, airtable, arguments, sample_jsonrpc_request
    ):
        response = await dispatcher.process(sample_jsonrpc_request(
            "tools/call", {"name": "create_sales_crm_record", "arguments": arguments},
        ))
        assert response["error"]["code"] == INVALID_PARAMS
        assert airtable.requests == []

    @pytest.mark.asyncio
    async def test_backend_failure_is_tool_error(self, dispatcher, sample_jsonrpc_request):
        response = await dispatcher.process(sample_jsonrpc_request(
            "tools/call",
            {"name": "update_sales_crm_record", "arguments": {"id": "recX", "notes": "x"}},
        ))
        assert response["error"]["code"] == INTERNAL_ERROR
        assert "recX" in response["error"]["message"]

    def test_stage_is_advertised_as_enum(self, dispatcher):
        (create, _, update) = dispatcher.registry.list_tools()
        assert create.inputSchema["properties"]["stage"]["enum"] == ["Prospect", "Qualified", "Closed"]
        assert update.inputSchema["required"] == ["id"]
