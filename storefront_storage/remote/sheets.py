"""
Direct spreadsheet reader.

Secondary, read-only path that fetches a sheet through the spreadsheet
values API with an API key:

    GET {base}/{spreadsheet_id}/values/{sheet}!A:Z?key={api_key}

The first row holds the headers; every later row becomes a dict keyed
by the lowercased header.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import aiohttp

from ..config import DEFAULT_SHEETS_BASE_URL, is_configured_value
from ..exceptions import RemoteUnavailableError
from ..models import EntityType
from .client import RemoteAction, RemoteResult
from .http import HttpClientBase
from .normalize import records_from_remote

logger = logging.getLogger(__name__)

SHEET_NAMES = {
    EntityType.USERS: "Users",
    EntityType.PRODUCTS: "Products",
    EntityType.ORDERS: "Orders",
}

_READ_ACTIONS = {
    EntityType.USERS: RemoteAction.GET_USERS,
    EntityType.PRODUCTS: RemoteAction.GET_PRODUCTS,
    EntityType.ORDERS: RemoteAction.GET_ORDERS,
}


def rows_to_dicts(values: list[list[Any]]) -> list[dict[str, Any]]:
    """Turn a header row plus data rows into dicts.

    Short rows are padded with empty strings.
    """
    if not values:
        return []
    headers = [str(h).strip().lower() for h in values[0]]
    return [
        {header: (row[i] if i < len(row) else "") for i, header in enumerate(headers)}
        for row in values[1:]
    ]


class SheetsReader(HttpClientBase):
    """Read-only client for the spreadsheet values API."""

    def __init__(
        self,
        api_key: str | None,
        spreadsheet_id: str | None,
        base_url: str = DEFAULT_SHEETS_BASE_URL,
        timeout: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        super().__init__(timeout=timeout, session=session)
        self.api_key = api_key
        self.spreadsheet_id = spreadsheet_id
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return is_configured_value(self.api_key) and is_configured_value(self.spreadsheet_id)

    def sheet_url(self, sheet_name: str, cell_range: str = "A:Z") -> str:
        target = quote(f"{sheet_name}!{cell_range}", safe="!:")
        return f"{self.base_url}/{self.spreadsheet_id}/values/{target}"

    async def read_sheet(self, sheet_name: str) -> list[dict[str, Any]]:
        """Fetch one sheet as header-keyed dicts.

        Raises:
            RemoteUnavailableError: If unconfigured or the fetch fails
        """
        url = self.sheet_url(sheet_name)
        if not self.is_configured:
            raise RemoteUnavailableError(url, "spreadsheet API key or id not configured")

        payload = await self._request_json("GET", url, params={"key": self.api_key})
        if not isinstance(payload, dict):
            raise RemoteUnavailableError(url, "response is not a JSON object")
        return rows_to_dicts(payload.get("values") or [])

    async def read(self, entity_type: EntityType) -> RemoteResult:
        """Read and normalize one table. Never raises."""
        action = _READ_ACTIONS[entity_type]
        try:
            rows = await self.read_sheet(SHEET_NAMES[entity_type])
        except RemoteUnavailableError as e:
            logger.warning(f"Direct sheet read of {entity_type.value} failed: {e.reason}")
            return RemoteResult.unavailable(action, e.reason, status=e.status)

        return RemoteResult(
            action=action,
            ok=True,
            payload={entity_type.value: rows},
            records=records_from_remote(entity_type, rows),
        )
