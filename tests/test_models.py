"""Tests for record models."""

from __future__ import annotations

from datetime import UTC, datetime

from storefront_storage.models import (
    EntityType,
    Order,
    OrderDetails,
    Product,
    User,
    UserRole,
    parse_timestamp,
    record_from_dict,
)


class TestUser:
    """Tests for User serialization."""

    def test_to_dict_uses_camel_case(self) -> None:
        user = User(id="u1", email="a@example.com", password="pw", created_at="2024-01-01T00:00:00")

        data = user.to_dict()

        assert data == {
            "id": "u1",
            "email": "a@example.com",
            "password": "pw",
            "role": "customer",
            "createdAt": "2024-01-01T00:00:00",
        }

    def test_public_dict_drops_password(self) -> None:
        user = User(id="u1", email="a@example.com", password="secret")

        assert "password" not in user.public_dict()

    def test_from_dict_defaults_role(self) -> None:
        user = User.from_dict({"id": 5, "email": "b@example.com", "role": "superuser"})

        assert user.id == "5"
        assert user.role is UserRole.CUSTOMER
        assert user.created_at

    def test_admin_flag(self) -> None:
        assert User(id="a", email="x", role=UserRole.ADMIN).is_admin


class TestOrder:
    """Tests for Order serialization."""

    def test_created_at_follows_date(self) -> None:
        order = Order(
            id="1", user_id="u", product_id="p", address="addr", total=10, date="2024-05-01"
        )

        assert order.created_at == "2024-05-01"
        assert order.status == "processing"

    def test_round_trip_keeps_status(self) -> None:
        order = Order(
            id="1", user_id="u", product_id="p", address="addr", total="9.50", status="shipped"
        )

        restored = Order.from_dict(order.to_dict())

        assert restored == order

    def test_details_to_dict(self) -> None:
        order = Order(id="1", user_id="u", product_id="p", address="addr", total=3)
        details = OrderDetails(order=order, product_name="Serum", product_image="img.png")

        data = details.to_dict()

        assert data["productName"] == "Serum"
        assert data["productImage"] == "img.png"
        assert data["userEmail"] == "Unknown User"
        assert data["userId"] == "u"


class TestEntityType:
    """Tests for EntityType helpers."""

    def test_storage_keys_are_distinct(self) -> None:
        keys = {et.storage_key for et in EntityType}
        assert keys == {"users.json", "products.json", "orders.json"}

    def test_dedup_keys(self) -> None:
        assert EntityType.USERS.dedup_key == "email"
        assert EntityType.PRODUCTS.dedup_key == "id"
        assert EntityType.ORDERS.dedup_key == "id"

    def test_record_from_dict_dispatch(self) -> None:
        product = record_from_dict(EntityType.PRODUCTS, {"id": "7", "name": "X", "price": 1})
        assert isinstance(product, Product)
        assert product.name == "X"


class TestParseTimestamp:
    """Tests for timestamp parsing used in sorting."""

    def test_naive_is_utc(self) -> None:
        assert parse_timestamp("2024-01-01T10:00:00") == datetime(2024, 1, 1, 10, tzinfo=UTC)

    def test_zulu_suffix(self) -> None:
        assert parse_timestamp("2024-01-01T10:00:00.000Z") == datetime(2024, 1, 1, 10, tzinfo=UTC)

    def test_garbage_sorts_oldest(self) -> None:
        assert parse_timestamp("not a date") < parse_timestamp("1970-01-01")
        assert parse_timestamp("") == parse_timestamp(None)
