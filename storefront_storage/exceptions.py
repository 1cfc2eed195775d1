"""
Custom exceptions for storefront storage.

The local path raises these to callers. Remote failures are converted
to results at the remote client boundary and never reach callers as
exceptions.
"""


class StorefrontStorageError(Exception):
    """Base exception for all storefront storage errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StorefrontStorageError):
    """Raised when a record is missing a required field."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Validation failed for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value


class DuplicateRecordError(StorefrontStorageError):
    """Raised when a unique key (e.g. user email) is already taken."""

    def __init__(self, entity_type: str, key: str, value: str):
        super().__init__(
            f"{entity_type} already exists with {key} {value}",
            {"entity_type": entity_type, "key": key, "value": value},
        )
        self.entity_type = entity_type
        self.key = key
        self.value = value


class RecordNotFoundError(StorefrontStorageError):
    """Raised when an explicit update targets a record that does not exist."""

    def __init__(self, entity_type: str, record_id: str):
        super().__init__(
            f"{entity_type} not found: {record_id}",
            {"entity_type": entity_type, "record_id": record_id},
        )
        self.entity_type = entity_type
        self.record_id = record_id


class AuthenticationError(StorefrontStorageError):
    """Raised when an email/password pair does not match a stored user."""

    def __init__(self, email: str):
        super().__init__("Invalid email or password", {"email": email})
        self.email = email


class StorageIOError(StorefrontStorageError):
    """Raised when a durable storage I/O operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class RemoteUnavailableError(StorefrontStorageError):
    """Raised inside the remote client when the mirror endpoint cannot serve a call.

    Covers network failures, timeouts, non-2xx responses, unparseable bodies
    and ``success: false`` answers alike.
    """

    def __init__(self, endpoint: str, reason: str, status: int | None = None):
        details: dict = {"endpoint": endpoint, "reason": reason}
        if status is not None:
            details["status"] = status
        super().__init__(f"Remote mirror unavailable at {endpoint}: {reason}", details)
        self.endpoint = endpoint
        self.reason = reason
        self.status = status
