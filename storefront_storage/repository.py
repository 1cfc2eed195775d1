"""
Synchronizing repository.

Single entry point for storefront reads and writes. Combines the local
store (always written, the durability anchor) with the remote mirror
(best-effort copy).

Write flow:
1. Validate required fields (ValidationError on failure)
2. Write to the local store
3. Attempt the remote mirror write, if an endpoint is configured
4. Report which sinks accepted the write

Read flow:
1. Fetch from the remote mirror (failure reads as empty)
2. Fetch from the local store
3. Concatenate remote then local and keep the first record per key
   (email for users, id for products and orders)
4. For products only, an empty result becomes the fallback catalog

Remote unavailability never fails a call. There is no reconciliation
pass: records written while the remote was down stay local-only.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .catalog import DEFAULT_ADMIN_EMAIL, fallback_catalog
from .config import StoreConfig
from .exceptions import (
    AuthenticationError,
    DuplicateRecordError,
    RecordNotFoundError,
    ValidationError,
)
from .id_utils import new_record_id
from .local import LocalStore
from .logging_utils import write_outcome_fields
from .models import (
    ORDER_STATUS_PROCESSING,
    UNKNOWN_PRODUCT,
    UNKNOWN_USER,
    EntityType,
    Order,
    OrderDetails,
    Product,
    Record,
    User,
    UserRole,
    parse_timestamp,
    utc_now_iso,
)
from .remote import RemoteMirrorClient, RemoteResult, SheetsReader

logger = logging.getLogger(__name__)

ProductListener = Callable[[], Any]

_PRODUCT_FIELDS = frozenset({"name", "description", "price", "image"})


@dataclass
class WriteResult:
    """Outcome of a repository write.

    Attributes:
        success: The local write happened (always True when returned)
        record: The record as stored locally
        local: Stored locally without a remote copy
        sheets: The remote mirror accepted the write
        persisted: The local table file was rewritten (False: held in memory
            until the next successful flush)
        error: Why the remote mirror did not take the write, if it didn't
        message: Human-readable summary of where the record ended up
    """

    success: bool
    record: Record | None
    local: bool
    sheets: bool = False
    persisted: bool = True
    error: str | None = None
    message: str | None = None

    @property
    def degraded(self) -> bool:
        """Stored locally but not mirrored."""
        return self.success and self.local

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "local": self.local,
            "sheets": self.sheets,
            "persisted": self.persisted,
        }
        if isinstance(self.record, User):
            data["user"] = self.record.public_dict()
        elif self.record is not None:
            key = "product" if isinstance(self.record, Product) else "order"
            data[key] = self.record.to_dict()
        if self.error:
            data["error"] = self.error
        if self.message:
            data["message"] = self.message
        return data


def _require(field: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, "is required")


def merge_records(
    entity_type: EntityType,
    remote: Iterable[Record],
    local: Iterable[Record],
) -> list[Record]:
    """Concatenate remote then local, keeping the first record per dedup key."""
    key = entity_type.dedup_key
    seen: set[Any] = set()
    merged: list[Record] = []
    for record in [*remote, *local]:
        value = getattr(record, key)
        if value in seen:
            continue
        seen.add(value)
        merged.append(record)
    return merged


class SyncRepository:
    """Dual-write repository for users, products and orders.

    Construct one at startup and hand it to whatever needs storage:

        >>> async with await SyncRepository.create(StoreConfig.from_environment()) as repo:
        ...     result = await repo.add_order("42", "1", "1 Main St", 25.99)
        ...     if result.degraded:
        ...         print("order saved locally only")
    """

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteMirrorClient | None = None,
        sheets: SheetsReader | None = None,
        admin_email: str = DEFAULT_ADMIN_EMAIL,
    ) -> None:
        """Initialize the repository.

        Args:
            store: Initialized local store
            remote: Mirror client; None runs local-only
            sheets: Optional direct spreadsheet reader for product/order reads
            admin_email: Signups with this email get the admin role
        """
        self.store = store
        self.remote = remote
        self.sheets = sheets
        self.admin_email = admin_email
        self._listeners: list[ProductListener] = []

    @classmethod
    async def create(cls, config: StoreConfig | None = None) -> SyncRepository:
        """Build the local store and remote clients described by ``config``."""
        config = config or StoreConfig()
        store = await LocalStore.create(
            config.data_dir,
            admin_email=config.admin_email,
            admin_password=config.admin_password,
        )

        remote = None
        if config.remote_enabled:
            remote = RemoteMirrorClient(config.remote_url, timeout=config.request_timeout)

        sheets = None
        if config.sheets_enabled:
            sheets = SheetsReader(
                config.sheets_api_key,
                config.spreadsheet_id,
                base_url=config.sheets_base_url,
                timeout=config.request_timeout,
            )

        logger.info(
            f"Repository ready (remote={'on' if remote else 'off'}, "
            f"sheets={'on' if sheets else 'off'}, data_dir={config.data_dir})"
        )
        return cls(store, remote=remote, sheets=sheets, admin_email=config.admin_email)

    async def __aenter__(self) -> SyncRepository:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close remote HTTP sessions."""
        if self.remote:
            await self.remote.close()
        if self.sheets:
            await self.sheets.close()

    @property
    def remote_configured(self) -> bool:
        return self.remote is not None and self.remote.is_configured

    # =========================================================================
    # Product listeners
    # =========================================================================

    def add_listener(self, callback: ProductListener) -> None:
        """Call ``callback`` after every product add, update or delete."""
        self._listeners.append(callback)

    def remove_listener(self, callback: ProductListener) -> None:
        self._listeners = [cb for cb in self._listeners if cb is not callback]

    def _notify_listeners(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Product listener failed")

    # =========================================================================
    # Write helpers
    # =========================================================================

    async def _mirror(
        self,
        send: Callable[[RemoteMirrorClient], Awaitable[RemoteResult]],
    ) -> RemoteResult | None:
        if self.remote is None or not self.remote.is_configured:
            return None
        return await send(self.remote)

    async def _write(
        self,
        entity_type: EntityType,
        record: Record,
        send: Callable[[RemoteMirrorClient], Awaitable[RemoteResult]],
    ) -> WriteResult:
        local_ok = await self.store.put(entity_type, record)
        outcome = await self._mirror(send)
        label = entity_type.label

        if outcome is None:
            return WriteResult(
                success=True,
                record=record,
                local=True,
                persisted=local_ok,
                message=f"{label} saved locally; remote mirror not configured",
            )
        if outcome.ok:
            logger.info(
                f"{label} {record.id} saved locally and mirrored",
                extra=write_outcome_fields(
                    entity_type.value, record.id, mirrored=True, persisted=local_ok
                ),
            )
            return WriteResult(
                success=True,
                record=record,
                local=False,
                sheets=True,
                persisted=local_ok,
                message=f"{label} saved and mirrored",
            )

        logger.warning(
            f"{label} {record.id} saved locally only: {outcome.error}",
            extra=write_outcome_fields(
                entity_type.value,
                record.id,
                mirrored=False,
                persisted=local_ok,
                error=outcome.error,
            ),
        )
        return WriteResult(
            success=True,
            record=record,
            local=True,
            persisted=local_ok,
            error=outcome.error,
            message=f"{label} saved locally; remote mirror unavailable",
        )

    # =========================================================================
    # Read helpers
    # =========================================================================

    async def _fetch_remote(self, entity_type: EntityType) -> list[Record]:
        if self.remote is not None and self.remote.is_configured:
            if entity_type is EntityType.USERS:
                result = await self.remote.get_users()
            elif entity_type is EntityType.PRODUCTS:
                result = await self.remote.get_products()
            else:
                result = await self.remote.get_orders()
            if result.ok:
                return result.records

        if self.sheets is not None and entity_type is not EntityType.USERS:
            result = await self.sheets.read(entity_type)
            if result.ok:
                return result.records

        return []

    async def _merged(self, entity_type: EntityType) -> list[Record]:
        remote = await self._fetch_remote(entity_type)
        local = await self.store.list(entity_type)
        return merge_records(entity_type, remote, local)

    # =========================================================================
    # Users
    # =========================================================================

    async def add_user(
        self,
        email: str,
        password: str,
        role: UserRole | str | None = None,
        user_id: str | None = None,
    ) -> WriteResult:
        """Register a user.

        Raises:
            ValidationError: If email or password is missing
            DuplicateRecordError: If the email is already registered locally
        """
        _require("email", email)
        _require("password", password)
        email = email.strip()

        if await self.store.find(EntityType.USERS, "email", email) is not None:
            raise DuplicateRecordError(EntityType.USERS.label, "email", email)

        if role is None:
            role = UserRole.ADMIN if email == self.admin_email else UserRole.CUSTOMER

        user = User(
            id=user_id or new_record_id(self.store.ids(EntityType.USERS)),
            email=email,
            password=password,
            role=UserRole.parse(role),
        )
        return await self._write(EntityType.USERS, user, lambda r: r.add_user(user))

    async def get_user(self, email: str) -> User | None:
        user = await self.store.find(EntityType.USERS, "email", email.strip())
        return user if isinstance(user, User) else None

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials against the local user table.

        Passwords are compared as stored (plaintext).

        Raises:
            AuthenticationError: If no user matches
        """
        user = await self.get_user(email)
        if user is None or user.password != password:
            raise AuthenticationError(email)
        return user

    async def list_users(self) -> list[User]:
        """Remote and local users, deduplicated by email."""
        return [u for u in await self._merged(EntityType.USERS) if isinstance(u, User)]

    # =========================================================================
    # Products
    # =========================================================================

    async def add_product(
        self,
        name: str,
        price: float | str,
        description: str = "",
        image: str = "",
        product_id: str | None = None,
    ) -> WriteResult:
        """Add a product, or overwrite the one stored under ``product_id``.

        Raises:
            ValidationError: If name or price is missing
        """
        _require("name", name)
        _require("price", price)

        product = Product(
            id=product_id or new_record_id(self.store.ids(EntityType.PRODUCTS)),
            name=name,
            description=description,
            price=price,
            image=image,
        )
        result = await self._write(
            EntityType.PRODUCTS, product, lambda r: r.add_product(product)
        )
        self._notify_listeners()
        return result

    async def update_product(self, product_id: str, **changes: Any) -> WriteResult:
        """Change fields of an existing product. Local only.

        Raises:
            RecordNotFoundError: If the product does not exist
            ValidationError: If a change names an unknown field
        """
        unknown = set(changes) - _PRODUCT_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "is not an updatable product field")

        existing = await self.store.get(EntityType.PRODUCTS, product_id)
        if not isinstance(existing, Product):
            raise RecordNotFoundError(EntityType.PRODUCTS.label, product_id)

        updated = dataclasses.replace(existing, **changes, updated_at=utc_now_iso())
        local_ok = await self.store.put(EntityType.PRODUCTS, updated)
        self._notify_listeners()
        return WriteResult(
            success=True,
            record=updated,
            local=True,
            persisted=local_ok,
            message="Product updated locally; the remote mirror has no update action",
        )

    async def delete_product(self, product_id: str) -> WriteResult:
        """Remove a product if present. Local only."""
        existing = await self.store.get(EntityType.PRODUCTS, product_id)
        removed = await self.store.delete(EntityType.PRODUCTS, product_id)
        if removed:
            self._notify_listeners()
        return WriteResult(
            success=True,
            record=existing,
            local=removed,
            message="Product deleted locally" if removed else "Product not present",
        )

    async def list_products(self) -> list[Product]:
        """Remote and local products, deduplicated by id.

        Never empty: falls back to the fixed demo catalog.
        """
        products = [p for p in await self._merged(EntityType.PRODUCTS) if isinstance(p, Product)]
        if not products:
            logger.info("No products in any source; serving fallback catalog")
            return fallback_catalog()
        return products

    # =========================================================================
    # Orders
    # =========================================================================

    async def add_order(
        self,
        user_id: str,
        product_id: str,
        address: str,
        total: float | str,
    ) -> WriteResult:
        """Place an order under a freshly minted id with status ``processing``.

        Raises:
            ValidationError: If any field is missing
        """
        _require("userId", user_id)
        _require("productId", product_id)
        _require("address", address)
        _require("total", total)

        now = utc_now_iso()
        order = Order(
            id=new_record_id(self.store.ids(EntityType.ORDERS)),
            user_id=str(user_id),
            product_id=str(product_id),
            address=address,
            total=total,
            date=now,
            status=ORDER_STATUS_PROCESSING,
            created_at=now,
        )
        return await self._write(EntityType.ORDERS, order, lambda r: r.add_order(order))

    async def update_order_status(self, order_id: str, status: str) -> WriteResult:
        """Set the status of an existing order. Local only.

        Raises:
            ValidationError: If status is empty
            RecordNotFoundError: If the order does not exist
        """
        _require("status", status)
        existing = await self.store.get(EntityType.ORDERS, order_id)
        if not isinstance(existing, Order):
            raise RecordNotFoundError(EntityType.ORDERS.label, order_id)

        updated = dataclasses.replace(existing, status=status, updated_at=utc_now_iso())
        local_ok = await self.store.put(EntityType.ORDERS, updated)
        return WriteResult(success=True, record=updated, local=True, persisted=local_ok)

    async def list_orders(self) -> list[OrderDetails]:
        """All orders, enriched and newest first."""
        orders = [o for o in await self._merged(EntityType.ORDERS) if isinstance(o, Order)]
        return await self._enrich(orders)

    async def list_user_orders(self, user_id: str) -> list[OrderDetails]:
        """Orders placed by ``user_id``, enriched and newest first."""
        orders = [
            o
            for o in await self._merged(EntityType.ORDERS)
            if isinstance(o, Order) and o.user_id == user_id
        ]
        return await self._enrich(orders)

    async def _enrich(self, orders: list[Order]) -> list[OrderDetails]:
        if not orders:
            return []

        products: dict[str, Product] = {}
        for product in await self.list_products():
            products.setdefault(product.id, product)
        users: dict[str, User] = {}
        for user in await self.list_users():
            users.setdefault(user.id, user)

        details = []
        for order in orders:
            product = products.get(order.product_id)
            user = users.get(order.user_id)
            details.append(
                OrderDetails(
                    order=order,
                    product_name=product.name if product else UNKNOWN_PRODUCT,
                    product_image=product.image if product else None,
                    user_email=user.email if user else UNKNOWN_USER,
                )
            )

        details.sort(key=lambda d: parse_timestamp(d.date), reverse=True)
        return details

    # =========================================================================
    # Maintenance
    # =========================================================================

    def stats(self) -> dict[str, int]:
        """Local record count per table."""
        return self.store.stats()

    async def reset(self) -> None:
        """Wipe the local store. Call ``initialize()`` to re-seed."""
        await self.store.clear()

    async def initialize(self) -> None:
        """Rehydrate and re-seed the local store."""
        await self.store.initialize()
