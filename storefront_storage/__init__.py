"""
Storefront Storage

Local-first persistence for a storefront's users, products and orders,
with a best-effort mirror to a spreadsheet-backed remote endpoint.

Provides:
- Durable local tables (one JSON file per table, rewritten on every change)
- A remote mirror client that never fails the caller
- A synchronizing repository that dual-writes and merges reads

Usage:

    >>> from storefront_storage import StoreConfig, SyncRepository
    >>> config = StoreConfig.from_environment()
    >>> async with await SyncRepository.create(config) as repo:
    ...     result = await repo.add_product("Lip Balm", "4.99")
    ...     print(result.local, result.sheets)
    ...
    ...     # Remote first, then local, deduplicated by id
    ...     products = await repo.list_products()

Without STOREFRONT_REMOTE_URL the repository runs local-only and every
write reports ``sheets=False``.
"""

from .config import StoreConfig

# Exceptions
from .exceptions import (
    AuthenticationError,
    DuplicateRecordError,
    RecordNotFoundError,
    RemoteUnavailableError,
    StorageIOError,
    StorefrontStorageError,
    ValidationError,
)
from .local import LocalStore
from .models import EntityType, Order, OrderDetails, Product, User, UserRole
from .remote import RemoteAction, RemoteMirrorClient, RemoteResult, SheetsReader
from .repository import SyncRepository, WriteResult, merge_records

__all__ = [
    # Core
    "StoreConfig",
    "SyncRepository",
    "WriteResult",
    "merge_records",
    "LocalStore",
    # Remote
    "RemoteMirrorClient",
    "RemoteResult",
    "RemoteAction",
    "SheetsReader",
    # Models
    "EntityType",
    "User",
    "UserRole",
    "Product",
    "Order",
    "OrderDetails",
    # Exceptions
    "StorefrontStorageError",
    "ValidationError",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "AuthenticationError",
    "StorageIOError",
    "RemoteUnavailableError",
]

__version__ = "0.1.0"
