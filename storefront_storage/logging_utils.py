"""
JSON log lines for the storefront store.

Repository writes log where each record ended up (local table, remote
mirror, both) as extra fields; ``--json-logs`` on the CLI renders those
as one JSON object per line. Credential fields never reach the output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

REDACTED = "***"
_SECRET_KEYS = frozenset({"password", "admin_password", "adminPassword"})


def redact(value: Any) -> Any:
    """Copy of value with credential entries masked, at any depth."""
    if isinstance(value, dict):
        return {
            k: REDACTED if k in _SECRET_KEYS else redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


def write_outcome_fields(
    entity: str,
    record_id: str,
    *,
    mirrored: bool,
    persisted: bool,
    error: str | None = None,
) -> dict[str, Any]:
    """Extra fields describing one repository write, for ``logger.*(extra=...)``."""
    fields: dict[str, Any] = {
        "entity": entity,
        "record_id": record_id,
        "mirrored": mirrored,
        "persisted": persisted,
    }
    if error:
        fields["remote_error"] = error
    return fields


class StructuredJsonFormatter(logging.Formatter):
    """
    Render each record as a single-line JSON object.

    Fixed keys come first (``timestamp`` in UTC from the record's creation
    time, ``level``, ``logger``, ``message``), then any ``extra`` fields.
    Extras that do not serialize are stringified; credential keys are
    replaced by ``***``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key in _SECRET_KEYS:
                entry[key] = REDACTED
                continue
            value = redact(value)
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry, default=str)


def configure_structured_logging(
    level: int = logging.INFO,
    logger_name: str | None = "storefront_storage",
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Send a logger's output through StructuredJsonFormatter.

    Args:
        level: Minimum level emitted
        logger_name: Logger to take over (default: the package logger)
        stream: Output stream; stderr by default so stdout stays free for
            command output

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredJsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_storage_logger(name: str) -> logging.Logger:
    """Logger under the ``storefront_storage`` namespace (e.g. ``cli``)."""
    return logging.getLogger(f"storefront_storage.{name}")
