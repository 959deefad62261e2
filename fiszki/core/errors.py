from enum import Enum
from typing import Optional

import httpx

# Fragments the auth/table store puts in messages when it cannot be reached
NETWORK_FAILURE_MARKERS = (
    "fetch failed",
    "failed to fetch",
    "econnrefused",
    "enotfound",
    "etimedout",
    "network",
    "connection refused",
    "connection error",
    "name or service not known",
)


class ApiError(Exception):
    """Error rendered to the client as {"error": ..., "details": ...}"""

    status_code: int = 500

    def __init__(self, error: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401

    def __init__(self, error: str = "Unauthorized", details: Optional[str] = "Authentication token is required"):
        super().__init__(error, details)


class NotFoundError(ApiError):
    status_code = 404


class UpstreamUnavailableError(ApiError):
    status_code = 503


class AIServiceError(ApiError):
    status_code = 500

    def __init__(self, error: str, error_code: str, details: Optional[str] = None):
        super().__init__(error, details)
        self.error_code = error_code


class DatabaseError(ApiError):
    status_code = 500


class StoreErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class StoreError(Exception):
    """Failure raised by the persistence services, tagged with a stable kind"""

    def __init__(self, kind: StoreErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class OpenRouterError(Exception):
    pass


def is_upstream_unavailable(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    message = str(getattr(error, "message", None) or error).lower()
    return any(marker in message for marker in NETWORK_FAILURE_MARKERS)
