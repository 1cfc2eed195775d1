"""
Store configuration.

Configuration can be provided directly, via environment variables, or
via a YAML settings file. Every remote setting is optional: with none
of them the store runs local-only.

Environment Variables:
    STOREFRONT_DATA_DIR: Directory holding the table files
    STOREFRONT_REMOTE_URL: Remote mirror (spreadsheet script) endpoint URL
    STOREFRONT_SHEETS_API_KEY: API key for direct spreadsheet reads
    STOREFRONT_SPREADSHEET_ID: Spreadsheet ID for direct spreadsheet reads
    STOREFRONT_ADMIN_EMAIL: Email of the seeded admin account
    STOREFRONT_ADMIN_PASSWORD: Password of the seeded admin account
    STOREFRONT_REQUEST_TIMEOUT: Remote request timeout in seconds

Settings file (``~/.storefront/settings.yaml``):

```yaml
storefront:
  data_dir: "/var/lib/storefront"
  remote_url: "https://script.google.com/macros/s/.../exec"
  sheets_api_key: "..."
  spreadsheet_id: "..."
  request_timeout: 15
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .catalog import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".storefront" / "data"
DEFAULT_SETTINGS_PATH = Path.home() / ".storefront" / "settings.yaml"
DEFAULT_SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

# Values shipped in example .env files; treated as "not configured".
PLACEHOLDER_VALUES = frozenset(
    {
        "YOUR_APPS_SCRIPT_URL_HERE",
        "your_google_sheets_api_key",
        "your_spreadsheet_id",
    }
)

SETTINGS_SECTION = "storefront"


def is_configured_value(value: str | None) -> bool:
    """True when ``value`` is set and is not a placeholder."""
    if not value or not value.strip():
        return False
    return value.strip() not in PLACEHOLDER_VALUES


@dataclass
class StoreConfig:
    """Configuration for the storefront repository.

    Attributes:
        data_dir: Directory for the durable table files
        remote_url: Remote mirror endpoint (None for local-only)
        sheets_api_key: API key for the direct spreadsheet read path
        spreadsheet_id: Spreadsheet ID for the direct spreadsheet read path
        sheets_base_url: Base URL of the spreadsheet values API
        admin_email: Email of the account seeded on first start
        admin_password: Password of that account (stored verbatim)
        request_timeout: Seconds before a remote call counts as unavailable
    """

    data_dir: Path = DEFAULT_DATA_DIR
    remote_url: str | None = None
    sheets_api_key: str | None = None
    spreadsheet_id: str | None = None
    sheets_base_url: str = DEFAULT_SHEETS_BASE_URL
    admin_email: str = DEFAULT_ADMIN_EMAIL
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    request_timeout: float = 15.0

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir).expanduser()
        self.request_timeout = float(self.request_timeout)

    @property
    def remote_enabled(self) -> bool:
        return is_configured_value(self.remote_url)

    @property
    def sheets_enabled(self) -> bool:
        return is_configured_value(self.sheets_api_key) and is_configured_value(
            self.spreadsheet_id
        )

    @classmethod
    def from_environment(cls) -> StoreConfig:
        """Create configuration from environment variables.

        Returns:
            StoreConfig populated from environment variables
        """
        timeout_str = os.environ.get("STOREFRONT_REQUEST_TIMEOUT")
        try:
            timeout = float(timeout_str) if timeout_str else 15.0
        except ValueError:
            logger.warning(f"Ignoring invalid STOREFRONT_REQUEST_TIMEOUT: {timeout_str!r}")
            timeout = 15.0

        return cls(
            data_dir=Path(os.environ.get("STOREFRONT_DATA_DIR", str(DEFAULT_DATA_DIR))),
            remote_url=os.environ.get("STOREFRONT_REMOTE_URL"),
            sheets_api_key=os.environ.get("STOREFRONT_SHEETS_API_KEY"),
            spreadsheet_id=os.environ.get("STOREFRONT_SPREADSHEET_ID"),
            admin_email=os.environ.get("STOREFRONT_ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
            admin_password=os.environ.get("STOREFRONT_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
            request_timeout=timeout,
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> StoreConfig:
        """Create configuration from a YAML settings file.

        A missing or unreadable file yields the defaults. Unknown keys
        are ignored.
        """
        section = _load_settings(path or DEFAULT_SETTINGS_PATH).get(SETTINGS_SECTION) or {}
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in section.items() if k in known and v is not None}
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_dir": str(self.data_dir),
            "remote_url": self.remote_url,
            "sheets_api_key": self.sheets_api_key,
            "spreadsheet_id": self.spreadsheet_id,
            "sheets_base_url": self.sheets_base_url,
            "admin_email": self.admin_email,
            "admin_password": self.admin_password,
            "request_timeout": self.request_timeout,
        }

    def save(self, path: Path | None = None) -> Path:
        """Write this configuration into the settings file.

        Other top-level sections of the file are preserved.
        """
        path = path or DEFAULT_SETTINGS_PATH
        settings = _load_settings(path)
        settings[SETTINGS_SECTION] = self.to_dict()

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(settings, default_flow_style=False))
        return path


def _load_settings(path: Path) -> dict[str, Any]:
    """Load the YAML settings file."""
    if not path.exists():
        return {}

    try:
        loaded = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read settings file {path}: {e}")
        return {}
    return loaded if isinstance(loaded, dict) else {}
