"""Tests for remote row normalization."""

from storefront_storage.models import EntityType, Order, Product, User, UserRole
from storefront_storage.remote.normalize import (
    fold_key,
    order_from_remote,
    product_from_remote,
    records_from_remote,
    to_remote,
    user_from_remote,
)


class TestFoldKey:
    """Field-name folding."""

    def test_variants_fold_together(self) -> None:
        variants = ["userid", "userId", "UserID", "user_id", "User Id", "user-id"]
        assert {fold_key(v) for v in variants} == {"userid"}


class TestOrderFromRemote:
    """Order rows in every header spelling."""

    def test_lowercase_headers(self) -> None:
        order = order_from_remote(
            {
                "id": "o1",
                "userid": "u1",
                "productid": "7",
                "address": "1 Main St",
                "total": "25.99",
                "date": "2024-02-01T10:00:00Z",
                "status": "shipped",
            }
        )

        assert order == Order(
            id="o1",
            user_id="u1",
            product_id="7",
            address="1 Main St",
            total="25.99",
            date="2024-02-01T10:00:00Z",
            status="shipped",
        )

    def test_camel_and_snake_headers(self) -> None:
        camel = order_from_remote({"id": "o1", "userId": "u1", "productId": "p1", "total": 5})
        snake = order_from_remote({"id": "o1", "user_id": "u1", "product_id": "p1", "total": 5})

        assert camel.user_id == snake.user_id == "u1"
        assert camel.product_id == snake.product_id == "p1"

    def test_numeric_cells_become_strings(self) -> None:
        order = order_from_remote({"id": 1718000000123.0, "userid": 42, "productid": 7.0})

        assert order.id == "1718000000123"
        assert order.user_id == "42"
        assert order.product_id == "7"

    def test_defaults(self) -> None:
        order = order_from_remote({"id": "o1", "createdAt": "2024-01-01"})

        assert order.status == "processing"
        assert order.date == "2024-01-01"
        assert order.created_at == "2024-01-01"

    def test_missing_id_dropped(self) -> None:
        assert order_from_remote({"userid": "u1"}) is None


class TestUserFromRemote:
    """User rows from the mirror."""

    def test_user_without_id_uses_email(self) -> None:
        user = user_from_remote({"Email": "a@example.com", "Role": "ADMIN"})

        assert user.id == "a@example.com"
        assert user.role is UserRole.ADMIN
        assert user.password == ""

    def test_user_without_email_dropped(self) -> None:
        assert user_from_remote({"id": "u1"}) is None


class TestProductFromRemote:
    """Product rows from the mirror."""

    def test_price_kept_as_given(self) -> None:
        assert product_from_remote({"id": "1", "price": 25.99}).price == 25.99
        assert product_from_remote({"id": "2", "price": " 9.50 "}).price == "9.50"

    def test_records_from_remote_skips_junk(self) -> None:
        rows = [{"id": "1", "name": "A"}, "not a row", {"name": "no id"}, None]

        records = records_from_remote(EntityType.PRODUCTS, rows)

        assert [r.id for r in records] == ["1"]

    def test_records_from_remote_non_list(self) -> None:
        assert records_from_remote(EntityType.ORDERS, {"id": "1"}) == []
        assert records_from_remote(EntityType.ORDERS, None) == []


class TestToRemote:
    """Outgoing payloads."""

    def test_user_payload_has_no_password(self) -> None:
        payload = to_remote(User(id="u1", email="a@example.com", password="secret"))

        assert "password" not in payload
        assert payload["email"] == "a@example.com"

    def test_product_payload_drops_updated_at(self) -> None:
        product = Product(id="1", name="A", price=1, updated_at="2024-01-02T00:00:00+00:00")

        payload = to_remote(product)

        assert "updatedAt" not in payload
        assert payload["createdAt"] == product.created_at
