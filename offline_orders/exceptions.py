"""
Application errors.

Every error carries the HTTP status and the client-facing message used by the
exception handlers in main.py to build the {success: false, message} envelope.
"""

from typing import Optional


class OfflineOrderError(Exception):
    """Base class for errors converted to a JSON failure response"""

    status_code = 500
    public_message = "Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ConfigError(OfflineOrderError):
    """Required configuration missing at startup (fatal)"""


class UpstreamAuthError(OfflineOrderError):
    """The Cafe24 OAuth token exchange was rejected or unreachable"""

    status_code = 502
    public_message = "Upstream authorization failed"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class CatalogError(OfflineOrderError):
    """Non-auth Cafe24 API failure, or authorization still failing after refresh"""

    status_code = 500
    public_message = "Server Error"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class InvalidId(OfflineOrderError):
    status_code = 400
    public_message = "Invalid ID"


class InvalidFilter(OfflineOrderError):
    status_code = 400
    public_message = "Invalid filter"


class EmptyPayload(OfflineOrderError):
    status_code = 400
    public_message = "Empty payload - pass force=true to clear the collection"


class NotFound(OfflineOrderError):
    status_code = 404
    public_message = "Not found"


class InvalidTransition(OfflineOrderError):
    status_code = 409
    public_message = "Invalid state transition"


class AdminRequired(OfflineOrderError):
    status_code = 403
    public_message = "Admin access required"


class PersistenceError(OfflineOrderError):
    status_code = 500
    public_message = "DB Error"
