"""
Record types for the storefront tables.

Each entity is a flat record. Attributes are snake_case in Python and
serialize to the canonical camelCase schema used both on disk and on
the wire.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

ORDER_STATUS_PROCESSING = "processing"
UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_USER = "Unknown User"

_OLDEST = datetime.min.replace(tzinfo=UTC)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(UTC).isoformat()


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp for sorting.

    Naive values are taken as UTC. Anything unparseable sorts oldest.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return _OLDEST
    else:
        return _OLDEST

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class UserRole(Enum):
    """Role of a storefront user."""

    ADMIN = "admin"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value: Any) -> UserRole:
        """Parse a role, falling back to CUSTOMER for unknown values."""
        if isinstance(value, UserRole):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CUSTOMER


class EntityType(Enum):
    """The three storefront tables."""

    USERS = "users"
    PRODUCTS = "products"
    ORDERS = "orders"

    @property
    def storage_key(self) -> str:
        """File name holding this table's full record set."""
        return f"{self.value}.json"

    @property
    def dedup_key(self) -> str:
        """Attribute that identifies a record when merging sources."""
        return "email" if self is EntityType.USERS else "id"

    @property
    def label(self) -> str:
        """Singular display name, e.g. 'User'."""
        return self.value[:-1].capitalize()


@dataclass
class User:
    """A storefront account.

    The password is stored verbatim.
    """

    id: str
    email: str
    password: str = ""
    role: UserRole = UserRole.CUSTOMER
    created_at: str = field(default_factory=utc_now_iso)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "role": self.role.value,
            "createdAt": self.created_at,
        }

    def public_dict(self) -> dict[str, Any]:
        """Serialize without the password."""
        data = self.to_dict()
        del data["password"]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=UserRole.parse(data.get("role", UserRole.CUSTOMER.value)),
            created_at=data.get("createdAt") or utc_now_iso(),
        )


@dataclass
class Product:
    """A catalog entry. Price keeps whatever was given (number or decimal string)."""

    id: str
    name: str
    description: str = ""
    price: float | str = 0
    image: str = ""
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "image": self.image,
            "createdAt": self.created_at,
        }
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            price=data.get("price", 0),
            image=data.get("image", ""),
            created_at=data.get("createdAt") or utc_now_iso(),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class Order:
    """A placed order.

    ``user_id`` and ``product_id`` are not checked against their tables.
    """

    id: str
    user_id: str
    product_id: str
    address: str
    total: float | str
    date: str = field(default_factory=utc_now_iso)
    status: str = ORDER_STATUS_PROCESSING
    created_at: str = ""
    updated_at: str | None = None

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = self.date

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "productId": self.product_id,
            "address": self.address,
            "total": self.total,
            "date": self.date,
            "status": self.status,
            "createdAt": self.created_at,
        }
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        date = data.get("date") or data.get("createdAt") or utc_now_iso()
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            product_id=str(data.get("productId", "")),
            address=data.get("address", ""),
            total=data.get("total", 0),
            date=date,
            status=data.get("status") or ORDER_STATUS_PROCESSING,
            created_at=data.get("createdAt") or date,
            updated_at=data.get("updatedAt"),
        )


@dataclass
class OrderDetails:
    """An order joined with display fields at read time."""

    order: Order
    product_name: str = UNKNOWN_PRODUCT
    product_image: str | None = None
    user_email: str = UNKNOWN_USER

    @property
    def id(self) -> str:
        return self.order.id

    @property
    def date(self) -> str:
        return self.order.date

    def to_dict(self) -> dict[str, Any]:
        data = self.order.to_dict()
        data["productName"] = self.product_name
        data["productImage"] = self.product_image
        data["userEmail"] = self.user_email
        return data


Record = User | Product | Order

RECORD_TYPES: dict[EntityType, type[User] | type[Product] | type[Order]] = {
    EntityType.USERS: User,
    EntityType.PRODUCTS: Product,
    EntityType.ORDERS: Order,
}


def record_from_dict(entity_type: EntityType, data: dict[str, Any]) -> Record:
    """Build the record class for ``entity_type`` from its canonical dict."""
    return RECORD_TYPES[entity_type].from_dict(data)
