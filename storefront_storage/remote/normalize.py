"""
Normalization between remote rows and canonical records.

Spreadsheet rows come back with header-derived keys whose casing depends
on who wrote the sheet (``userid``, ``userId``, ``UserID``, ``user_id``).
Everything that enters the repository from a remote source passes
through here, so the repository only ever sees canonical records.
"""

from __future__ import annotations

import logging
from typing import Any

from ..models import (
    ORDER_STATUS_PROCESSING,
    EntityType,
    Order,
    Product,
    Record,
    User,
    UserRole,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def fold_key(key: str) -> str:
    """Case- and separator-insensitive form of a field name."""
    return str(key).replace("_", "").replace("-", "").replace(" ", "").lower()


def fold_row(row: dict[str, Any]) -> dict[str, Any]:
    """Re-key ``row`` by folded field names. The first spelling wins."""
    folded: dict[str, Any] = {}
    for key, value in row.items():
        folded.setdefault(fold_key(key), value)
    return folded


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _first(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def user_from_remote(row: dict[str, Any]) -> User | None:
    """Build a User from a remote row. Rows without an email are dropped."""
    folded = fold_row(row)
    email = _text(folded.get("email"))
    if not email:
        logger.debug(f"Dropping remote user without email: {row}")
        return None
    return User(
        id=_text(folded.get("id")) or email,
        email=email,
        role=UserRole.parse(folded.get("role") or UserRole.CUSTOMER.value),
        created_at=_text(_first(folded, "createdat", "date")) or utc_now_iso(),
    )


def product_from_remote(row: dict[str, Any]) -> Product | None:
    """Build a Product from a remote row. Rows without an id are dropped."""
    folded = fold_row(row)
    product_id = _text(folded.get("id"))
    if not product_id:
        logger.debug(f"Dropping remote product without id: {row}")
        return None
    price = folded.get("price")
    return Product(
        id=product_id,
        name=_text(folded.get("name")),
        description=_text(folded.get("description")),
        price=price if isinstance(price, int | float) else _text(price),
        image=_text(folded.get("image")),
        created_at=_text(_first(folded, "createdat", "addedat")),
    )


def order_from_remote(row: dict[str, Any]) -> Order | None:
    """Build an Order from a remote row. Rows without an id are dropped."""
    folded = fold_row(row)
    order_id = _text(folded.get("id"))
    if not order_id:
        logger.debug(f"Dropping remote order without id: {row}")
        return None
    total = folded.get("total")
    date = _text(_first(folded, "date", "createdat"))
    return Order(
        id=order_id,
        user_id=_text(folded.get("userid")),
        product_id=_text(folded.get("productid")),
        address=_text(folded.get("address")),
        total=total if isinstance(total, int | float) else _text(total),
        date=date,
        status=_text(folded.get("status")) or ORDER_STATUS_PROCESSING,
        created_at=_text(folded.get("createdat")) or date,
    )


_FROM_REMOTE = {
    EntityType.USERS: user_from_remote,
    EntityType.PRODUCTS: product_from_remote,
    EntityType.ORDERS: order_from_remote,
}


def records_from_remote(entity_type: EntityType, rows: Any) -> list[Record]:
    """Normalize a remote list, skipping anything that is not a usable row."""
    if not isinstance(rows, list):
        return []
    convert = _FROM_REMOTE[entity_type]
    records: list[Record] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        record = convert(row)
        if record is not None:
            records.append(record)
    return records


def to_remote(record: Record) -> dict[str, Any]:
    """Wire payload for an outgoing write. Passwords are never sent."""
    if isinstance(record, User):
        return record.public_dict()
    data = record.to_dict()
    data.pop("updatedAt", None)
    return data
