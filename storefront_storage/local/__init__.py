"""
Local durable storage.

One JSON file per table, rewritten atomically on every mutation.
"""

from .store import LocalStore

__all__ = ["LocalStore"]
