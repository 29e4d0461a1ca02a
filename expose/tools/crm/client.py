"""Airtable client for the sales CRM provider."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from expose.config.loader import Settings, get_settings
from expose.utils.http import fetch_json, send_json

logger = logging.getLogger(__name__)

# Airtable column for each record field
FIELD_COLUMNS = {
    "email": "Email",
    "company": "Company",
    "stage": "Stage",
    "contact": "Contact",
    "notes": "Notes",
}


class CrmError(Exception):
    """Raised when the CRM cannot be reached or rejects a request."""


def to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Map record fields to Airtable columns, leaving out empty values."""
    return {
        FIELD_COLUMNS[key]: value
        for key, value in fields.items()
        if key in FIELD_COLUMNS and value
    }


def from_record(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten an Airtable record into the CRM record shape."""
    columns = record.get("fields", {})
    return {
        "id": record.get("id"),
        **{key: columns.get(column) for key, column in FIELD_COLUMNS.items()},
    }


class CrmClient:
    """Sales CRM backed by an Airtable table."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @property
    def table_url(self) -> str:
        s = self.settings
        return f"{s.crm_api_url.rstrip('/')}/{quote(s.crm_base_id)}/{quote(s.crm_table)}"

    def _headers(self) -> dict[str, str]:
        if not self.settings.crm_enabled:
            raise CrmError("CRM is not configured: set CRM_API_KEY and CRM_BASE_ID")
        return {"Authorization": f"Bearer {self.settings.crm_api_key}"}

    async def list_records(self) -> list[dict[str, Any]]:
        """Fetch every record in the configured view, following pagination."""
        headers = self._headers()
        records: list[dict[str, Any]] = []
        params: dict[str, Any] = {"view": self.settings.crm_view}
        while True:
            try:
                page = await fetch_json(self.table_url, params=params, headers=headers)
            except httpx.HTTPError as e:
                raise CrmError(f"Could not list CRM records: {e}") from e
            records.extend(from_record(r) for r in page.get("records", []))
            offset = page.get("offset")
            if not offset:
                return records
            params = {**params, "offset": offset}

    async def create_record(self, fields: dict[str, Any]) -> str:
        """Create a record and return its id."""
        headers = self._headers()
        try:
            record = await send_json(
                "POST", self.table_url, {"fields": to_columns(fields)}, headers=headers
            )
        except httpx.HTTPError as e:
            raise CrmError(f"Could not create CRM record: {e}") from e
        logger.info(f"Created CRM record {record.get('id')}")
        return record["id"]

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> str:
        """Update the non-empty fields of a record and return its id."""
        headers = self._headers()
        try:
            record = await send_json(
                "PATCH",
                f"{self.table_url}/{quote(record_id)}",
                {"fields": to_columns(fields)},
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise CrmError(f"Could not update CRM record {record_id}: {e}") from e
        logger.info(f"Updated CRM record {record_id}")
        return record["id"]


# Singleton client instance
_client: CrmClient | None = None


def get_client() -> CrmClient:
    """Get the CRM client instance."""
    global _client
    if _client is None:
        _client = CrmClient()
    return _client
