"""
Local durable table store.

Keeps the users, products and orders tables in memory, keyed by record
id, and mirrors each table to one JSON file under the data directory.
Every mutation rewrites the whole table file.
"""

from __future__ import annotations

import logging
from collections.abc import KeysView
from pathlib import Path
from typing import Any

from ..catalog import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD, admin_user, sample_products
from ..exceptions import StorageIOError, ValidationError
from ..models import EntityType, Record, parse_timestamp, record_from_dict
from .file_ops import read_json_array, remove_file, write_json_atomic

logger = logging.getLogger(__name__)


class LocalStore:
    """In-process key-value tables backed by JSON files.

    Directory structure:
        {data_dir}/
            users.json     - full user table
            products.json  - full product table
            orders.json    - full order table

    Durable-storage failures never propagate. A failed read leaves the
    table empty; a failed flush keeps the in-memory change and is retried
    implicitly by the next successful flush of that table.

    Use ``await LocalStore.create(...)`` to get an initialized store.
    """

    def __init__(
        self,
        data_dir: Path,
        admin_email: str = DEFAULT_ADMIN_EMAIL,
        admin_password: str = DEFAULT_ADMIN_PASSWORD,
    ) -> None:
        """Initialize local store.

        Args:
            data_dir: Directory holding the table files
            admin_email: Email of the admin account seeded when missing
            admin_password: Password of that account
        """
        self.data_dir = Path(data_dir)
        self.admin_email = admin_email
        self.admin_password = admin_password
        self._tables: dict[EntityType, dict[str, Record]] = {et: {} for et in EntityType}

    @classmethod
    async def create(
        cls,
        data_dir: Path,
        admin_email: str = DEFAULT_ADMIN_EMAIL,
        admin_password: str = DEFAULT_ADMIN_PASSWORD,
    ) -> LocalStore:
        """Construct a store and rehydrate it from disk."""
        store = cls(data_dir, admin_email=admin_email, admin_password=admin_password)
        await store.initialize()
        return store

    def _table_path(self, entity_type: EntityType) -> Path:
        return self.data_dir / entity_type.storage_key

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Rehydrate every table, then seed the admin user and sample products."""
        for entity_type in EntityType:
            self._tables[entity_type] = await self._load_table(entity_type)

        if await self.find(EntityType.USERS, "email", self.admin_email) is None:
            admin = admin_user(self.admin_email, self.admin_password)
            await self.put(EntityType.USERS, admin)
            logger.info(f"Seeded admin user {admin.email}")

        if not self._tables[EntityType.PRODUCTS]:
            products = sample_products()
            for product in products:
                self._tables[EntityType.PRODUCTS][product.id] = product
            await self._flush_table(EntityType.PRODUCTS)
            logger.info(f"Seeded {len(products)} sample products")

        logger.debug(f"Local store initialized at {self.data_dir}: {self.stats()}")

    async def _load_table(self, entity_type: EntityType) -> dict[str, Record]:
        path = self._table_path(entity_type)
        try:
            rows = await read_json_array(path)
        except StorageIOError as e:
            logger.warning(f"Discarding unreadable {entity_type.value} table: {e}")
            return {}

        table: dict[str, Record] = {}
        for row in rows or []:
            try:
                record = record_from_dict(entity_type, row)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed {entity_type.value} row in {path}: {e}")
                continue
            table[record.id] = record
        return table

    async def clear(self) -> None:
        """Empty all tables and delete their files. Irreversible."""
        for entity_type in EntityType:
            self._tables[entity_type].clear()
            try:
                await remove_file(self._table_path(entity_type))
            except StorageIOError as e:
                logger.error(f"Failed to remove {entity_type.value} table file: {e}")
        logger.info("Local store cleared")

    async def flush(self) -> bool:
        """Rewrite every table file. Returns True if all writes succeeded."""
        results = [await self._flush_table(entity_type) for entity_type in EntityType]
        return all(results)

    async def _flush_table(self, entity_type: EntityType) -> bool:
        rows = [record.to_dict() for record in self._tables[entity_type].values()]
        try:
            await write_json_atomic(self._table_path(entity_type), rows)
        except StorageIOError as e:
            logger.error(f"Failed to persist {entity_type.value} table (kept in memory): {e}")
            return False
        return True

    # =========================================================================
    # Table operations
    # =========================================================================

    async def put(self, entity_type: EntityType, record: Record) -> bool:
        """Insert or overwrite ``record`` at ``record.id``.

        Returns:
            True if the table file was rewritten, False if only memory changed

        Raises:
            ValidationError: If the record has no id
        """
        if not record.id:
            raise ValidationError("id", "must not be empty")

        self._tables[entity_type][record.id] = record
        return await self._flush_table(entity_type)

    async def get(self, entity_type: EntityType, record_id: str) -> Record | None:
        """Return the record stored at ``record_id``, or None."""
        return self._tables[entity_type].get(record_id)

    async def list(self, entity_type: EntityType) -> list[Record]:
        """All records, newest ``created_at`` first.

        Records with equal timestamps keep insertion order.
        """
        return sorted(
            self._tables[entity_type].values(),
            key=lambda r: parse_timestamp(r.created_at),
            reverse=True,
        )

    async def delete(self, entity_type: EntityType, record_id: str) -> bool:
        """Remove ``record_id`` if present.

        Returns:
            True if a record was removed
        """
        if self._tables[entity_type].pop(record_id, None) is None:
            return False
        await self._flush_table(entity_type)
        return True

    async def find(self, entity_type: EntityType, attribute: str, value: Any) -> Record | None:
        """First record whose ``attribute`` equals ``value``."""
        for record in self._tables[entity_type].values():
            if getattr(record, attribute, None) == value:
                return record
        return None

    def ids(self, entity_type: EntityType) -> KeysView[str]:
        """Live view of the ids in a table."""
        return self._tables[entity_type].keys()

    def stats(self) -> dict[str, int]:
        """Record count per table."""
        return {entity_type.value: len(table) for entity_type, table in self._tables.items()}

