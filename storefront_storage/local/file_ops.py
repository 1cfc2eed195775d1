"""
JSON file operations for the local table files.

Each table is one JSON array rewritten in full on every mutation:
- Atomic writes using temp file + rename
- Missing files read as "no data"
- Every OS or parse failure surfaces as StorageIOError
"""

import json
import os
import tempfile
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from ..exceptions import StorageIOError


async def ensure_directory(path: Path) -> None:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure exists
    """
    try:
        await aiofiles.os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise StorageIOError("create_directory", str(path), e) from e


async def read_json_array(path: Path) -> list[dict[str, Any]] | None:
    """Read a JSON array of objects.

    Args:
        path: Path to JSON file

    Returns:
        Parsed list, or None if the file doesn't exist or is blank
    """
    try:
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
    except OSError as e:
        raise StorageIOError("read_json", str(path), e) from e
    except UnicodeDecodeError as e:
        raise StorageIOError("parse_json", str(path), e) from e

    if not content.strip():
        return None

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise StorageIOError("parse_json", str(path), e) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise StorageIOError(
            "parse_json", str(path), ValueError("expected a JSON array of objects")
        )
    return data


async def write_json_atomic(path: Path, data: list[dict[str, Any]]) -> None:
    """Write a JSON array atomically using temp file + rename.

    Args:
        path: Target path for JSON file
        data: Records to serialize
    """
    await ensure_directory(path.parent)

    # Write to temp file first
    try:
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".tmp_",
            suffix=".json",
        )
    except OSError as e:
        raise StorageIOError("write_json", str(path), e) from e

    try:
        os.close(fd)
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2, default=_json_serializer))
            await f.flush()
            os.fsync(f.fileno())

        # Atomic rename
        await aiofiles.os.replace(temp_path, path)
    except Exception as e:
        # Clean up temp file on error
        try:
            await aiofiles.os.remove(temp_path)
        except OSError:
            pass
        raise StorageIOError("write_json", str(path), e) from e


async def remove_file(path: Path) -> bool:
    """Remove a file if it exists.

    Args:
        path: Path to remove

    Returns:
        True if file was removed, False if it didn't exist
    """
    try:
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)
            return True
        return False
    except OSError as e:
        raise StorageIOError("remove", str(path), e) from e


def _json_serializer(obj: Any) -> Any:
    """Custom JSON serializer for types not handled by default."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
