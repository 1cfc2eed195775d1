"""
Shared test configuration and fixtures.

Provides a temp data directory, initialized local stores, and an
in-memory remote mirror that speaks the real wire contract.
"""

from __future__ import annotations

import tempfile
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from storefront_storage.exceptions import RemoteUnavailableError
from storefront_storage.local import LocalStore
from storefront_storage.remote import RemoteMirrorClient
from storefront_storage.repository import SyncRepository


class FakeRemoteMirror(RemoteMirrorClient):
    """Remote mirror backed by in-memory sheets.

    Runs the real request building and response normalization; only the
    HTTP exchange is replaced. Set ``fail`` to simulate an outage.
    """

    def __init__(
        self,
        users: list[dict[str, Any]] | None = None,
        products: list[dict[str, Any]] | None = None,
        orders: list[dict[str, Any]] | None = None,
        fail: bool = False,
    ):
        super().__init__("https://remote.test/exec")
        self.sheets: dict[str, list[dict[str, Any]]] = {
            "users": list(users or []),
            "products": list(products or []),
            "orders": list(orders or []),
        }
        self.fail = fail
        self.calls: list[dict[str, Any]] = []

    async def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(body)
        if self.fail:
            raise RemoteUnavailableError(self.endpoint or "", "simulated outage")

        action = body["action"]
        if action.startswith("get"):
            key = action[3:].lower()
            return {"success": True, key: list(self.sheets[key])}

        key = action[3:].lower()
        self.sheets[f"{key}s"].append(body[key])
        return {"success": True, "message": "added", key: body[key]}

    def actions(self) -> list[str]:
        return [call["action"] for call in self.calls]


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
async def store(temp_dir: Path) -> LocalStore:
    """An initialized local store (admin + sample products seeded)."""
    return await LocalStore.create(temp_dir / "data")


@pytest.fixture
def fake_remote() -> Callable[..., FakeRemoteMirror]:
    """Factory for in-memory remote mirrors."""
    return FakeRemoteMirror


@pytest.fixture
async def local_repo(store: LocalStore) -> AsyncIterator[SyncRepository]:
    """Repository with no remote configured."""
    repo = SyncRepository(store)
    yield repo
    await repo.close()
