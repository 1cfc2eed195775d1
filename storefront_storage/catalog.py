"""
Seed data for a fresh store.

``sample_products`` seeds an empty product table. ``fallback_catalog``
is what product listings return when neither source has any products.
"""

from __future__ import annotations

from .id_utils import admin_user_id
from .models import Product, User, UserRole, utc_now_iso

DEFAULT_ADMIN_EMAIL = "admin@oriflame.com"
DEFAULT_ADMIN_PASSWORD = "admin123"

_IMAGE = "https://images.unsplash.com/photo-{}?w=300&h=300&fit=crop"

_SAMPLE_PRODUCTS: list[tuple[str, str, str, float, str]] = [
    (
        "1",
        "Oriflame Royal Velvet Lipstick",
        "Long-lasting luxury lipstick with rich pigmentation and moisturizing formula.",
        25.99,
        "1586495777744-4413f21062fa",
    ),
    (
        "2",
        "Divine Anti-Aging Cream",
        "Premium anti-aging moisturizer with 24k gold and peptides for youthful skin.",
        89.99,
        "1620916566398-39f1143ab7be",
    ),
    (
        "3",
        "Eclat Beauty Serum",
        "Illuminating vitamin C serum for radiant and glowing complexion.",
        45.99,
        "1571781926291-c477ebfd024b",
    ),
    (
        "4",
        "Perfect Foundation",
        "Full coverage foundation with SPF protection for flawless skin.",
        35.99,
        "1522335789203-aabd1fc54bc9",
    ),
    (
        "5",
        "Wellness Multivitamin",
        "Complete daily multivitamin with essential nutrients for overall health.",
        19.99,
        "1584308666744-24d5c474f2ae",
    ),
    (
        "6",
        "Hydrating Face Mask",
        "Intensive hydrating mask for dry and tired skin with natural ingredients.",
        12.99,
        "1596755389378-c31d21fd1273",
    ),
]

# Prices are strings here, as the spreadsheet returns them.
_FALLBACK_PRODUCTS: list[tuple[str, str, str, str, str]] = [
    (
        "1",
        "Oriflame Royal Velvet Lipstick",
        "Long-lasting luxury lipstick with rich pigmentation and moisturizing formula.",
        "25.99",
        "1586495777744-4413f21062fa",
    ),
    (
        "2",
        "Divine Anti-Aging Cream",
        "Premium anti-aging moisturizer with 24k gold and peptides for youthful skin.",
        "89.99",
        "1620916566398-39f1143ab7be",
    ),
    (
        "3",
        "Eclat Beauty Serum",
        "Illuminating vitamin C serum for radiant and glowing complexion.",
        "45.99",
        "1571781926291-c477ebfd024b",
    ),
    (
        "4",
        "Perfect Foundation",
        "Full coverage foundation with SPF protection for flawless skin.",
        "35.99",
        "1522335789203-aabd1fc54bc9",
    ),
    (
        "5",
        "Oriflame Mascara Max",
        "Volumizing mascara for dramatic lashes with waterproof formula.",
        "19.99",
        "1631214540260-7234ca9821b7",
    ),
    (
        "6",
        "Perfume - Swedish Spa",
        "Fresh and invigorating fragrance inspired by Swedish nature.",
        "65.99",
        "1588405748880-12d1d2a59d32",
    ),
]


def sample_products() -> list[Product]:
    """Products seeded into an empty product table."""
    now = utc_now_iso()
    return [
        Product(
            id=pid,
            name=name,
            description=description,
            price=price,
            image=_IMAGE.format(photo),
            created_at=now,
        )
        for pid, name, description, price, photo in _SAMPLE_PRODUCTS
    ]


def fallback_catalog() -> list[Product]:
    """Fixed demo catalog for an environment with no products anywhere."""
    return [
        Product(
            id=pid,
            name=name,
            description=description,
            price=price,
            image=_IMAGE.format(photo),
            created_at="",
        )
        for pid, name, description, price, photo in _FALLBACK_PRODUCTS
    ]


def admin_user(email: str = DEFAULT_ADMIN_EMAIL, password: str = DEFAULT_ADMIN_PASSWORD) -> User:
    """The administrative account every store must contain."""
    return User(
        id=admin_user_id(),
        email=email,
        password=password,
        role=UserRole.ADMIN,
    )
