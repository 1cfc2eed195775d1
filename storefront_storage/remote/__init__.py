"""
Remote mirror access.

RemoteMirrorClient posts writes and reads to the spreadsheet script
endpoint. SheetsReader is the secondary read-only path through the
spreadsheet values API. Both report failures as results, never raise.
"""

from .client import RemoteAction, RemoteMirrorClient, RemoteResult
from .sheets import SheetsReader

__all__ = [
    "RemoteAction",
    "RemoteMirrorClient",
    "RemoteResult",
    "SheetsReader",
]
