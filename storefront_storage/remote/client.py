"""
Remote mirror client.

Forwards writes (and some reads) to an external spreadsheet script
endpoint. Each call posts one JSON body:

    {"action": "addProduct", "product": {...}}

and expects ``{"success": true, ...}`` back. Anything else, including
network errors, timeouts and non-2xx statuses, is reported as the single
"remote unavailable" outcome. Calls are never retried or queued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import aiohttp

from ..config import is_configured_value
from ..exceptions import RemoteUnavailableError
from ..models import EntityType, Order, Product, Record, User
from .http import HttpClientBase
from .normalize import records_from_remote, to_remote

logger = logging.getLogger(__name__)


class RemoteAction(Enum):
    """Actions understood by the mirror endpoint."""

    ADD_USER = "addUser"
    ADD_PRODUCT = "addProduct"
    ADD_ORDER = "addOrder"
    GET_USERS = "getUsers"
    GET_ORDERS = "getOrders"
    GET_PRODUCTS = "getProducts"

    @property
    def entity_type(self) -> EntityType:
        return _ACTION_ENTITY[self]

    @property
    def is_read(self) -> bool:
        return self.value.startswith("get")

    @property
    def payload_key(self) -> str:
        """Body key for the record (writes) or the response list (reads)."""
        if self.is_read:
            return self.entity_type.value
        return self.entity_type.value[:-1]


_ACTION_ENTITY = {
    RemoteAction.ADD_USER: EntityType.USERS,
    RemoteAction.ADD_PRODUCT: EntityType.PRODUCTS,
    RemoteAction.ADD_ORDER: EntityType.ORDERS,
    RemoteAction.GET_USERS: EntityType.USERS,
    RemoteAction.GET_ORDERS: EntityType.ORDERS,
    RemoteAction.GET_PRODUCTS: EntityType.PRODUCTS,
}


@dataclass
class RemoteResult:
    """Outcome of one remote call.

    ``ok`` is False whenever the remote was unavailable for any reason;
    ``error`` then says why. For reads, ``records`` holds the normalized
    rows.
    """

    action: RemoteAction
    ok: bool
    payload: dict[str, Any] = field(default_factory=dict)
    records: list[Record] = field(default_factory=list)
    error: str | None = None
    status: int | None = None

    @classmethod
    def unavailable(
        cls, action: RemoteAction, error: str, status: int | None = None
    ) -> RemoteResult:
        return cls(action=action, ok=False, error=error, status=status)


class RemoteMirrorClient(HttpClientBase):
    """Best-effort client for the remote mirror endpoint.

    Example:
        >>> client = RemoteMirrorClient("https://script.google.com/macros/s/.../exec")
        >>> result = await client.add_product(product)
        >>> if not result.ok:
        ...     print(f"kept local only: {result.error}")
        >>> await client.close()
    """

    def __init__(
        self,
        endpoint: str | None,
        timeout: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the mirror client.

        Args:
            endpoint: Script URL; None or a placeholder means unconfigured
            timeout: Total seconds allowed per request
            session: Optional externally managed aiohttp session
        """
        super().__init__(timeout=timeout, session=session)
        self.endpoint = endpoint.strip() if endpoint else None

    @property
    def is_configured(self) -> bool:
        return is_configured_value(self.endpoint)

    # Writes

    async def add_user(self, user: User) -> RemoteResult:
        return await self._call(RemoteAction.ADD_USER, user)

    async def add_product(self, product: Product) -> RemoteResult:
        return await self._call(RemoteAction.ADD_PRODUCT, product)

    async def add_order(self, order: Order) -> RemoteResult:
        return await self._call(RemoteAction.ADD_ORDER, order)

    # Reads

    async def get_users(self) -> RemoteResult:
        return await self._call(RemoteAction.GET_USERS)

    async def get_orders(self) -> RemoteResult:
        return await self._call(RemoteAction.GET_ORDERS)

    async def get_products(self) -> RemoteResult:
        return await self._call(RemoteAction.GET_PRODUCTS)

    async def ping(self) -> RemoteResult:
        """Check the endpoint with a cheap read."""
        return await self.get_products()

    async def _call(self, action: RemoteAction, record: Record | None = None) -> RemoteResult:
        if not self.is_configured:
            return RemoteResult.unavailable(action, "remote endpoint not configured")

        body: dict[str, Any] = {"action": action.value}
        if record is not None:
            body[action.payload_key] = to_remote(record)

        try:
            payload = await self._post(body)
        except RemoteUnavailableError as e:
            logger.warning(f"Remote {action.value} failed: {e.reason}")
            return RemoteResult.unavailable(action, e.reason, status=e.status)

        result = RemoteResult(action=action, ok=True, payload=payload)
        if action.is_read:
            result.records = records_from_remote(
                action.entity_type, payload.get(action.payload_key)
            )
        logger.debug(f"Remote {action.value} succeeded")
        return result

    async def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured:
            raise RemoteUnavailableError(self.endpoint or "", "remote endpoint not configured")
        payload = await self._request_json("POST", self.endpoint, json=body)
        if not isinstance(payload, dict):
            raise RemoteUnavailableError(self.endpoint, "response is not a JSON object")
        if payload.get("success") is not True:
            reason = payload.get("error") or "remote reported failure"
            raise RemoteUnavailableError(self.endpoint, str(reason))
        return payload
