"""ID generation utilities for storefront records.

Record IDs are millisecond timestamps rendered as strings: ``"1718000000123"``.
The admin account uses ``admin_{millis}``.
"""

from __future__ import annotations

import time
from collections.abc import Container


def _millis() -> int:
    return time.time_ns() // 1_000_000


def new_record_id(taken: Container[str] = ()) -> str:
    """Mint a timestamp ID not already present in ``taken``.

    Two writes in the same millisecond bump the value until it is free.
    """
    candidate = _millis()
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def admin_user_id() -> str:
    """Generate the ID of the seeded admin account."""
    return f"admin_{_millis()}"

