"""Sales CRM provider tools."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from expose.tools.base import ToolDefinition, tool
from expose.tools.crm.client import get_client

Stage = Literal["Prospect", "Qualified", "Closed"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Email = Annotated[str, Field(pattern=EMAIL_PATTERN)]


class CreateRecordArgs(BaseModel):
    email: Email
    company: str
    stage: Stage
    contact: str
    notes: str


class UpdateRecordArgs(BaseModel):
    id: str
    email: Email | None = None
    company: str | None = None
    stage: Stage | None = None
    contact: str | None = None
    notes: str | None = None


@tool(
    name="create_sales_crm_record",
    description="Creates a new record in Sales CRM and generates a unique ID",
    args=CreateRecordArgs,
)
async def create_record(args: CreateRecordArgs) -> str:
    return await get_client().create_record(args.model_dump())


@tool(
    name="list_sales_crm_records",
    description="Lists all sales CRM records",
)
async def list_records(arguments: dict) -> list[dict]:
    return await get_client().list_records()


@tool(
    name="update_sales_crm_record",
    description="Updates an existing record in Sales CRM",
    args=UpdateRecordArgs,
)
async def update_record(args: UpdateRecordArgs) -> str:
    return await get_client().update_record(args.id, args.model_dump(exclude={"id"}))


def get_tools() -> list[ToolDefinition]:
    """Return all CRM provider tools."""
    return [create_record, list_records, update_record]
