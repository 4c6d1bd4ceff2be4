"""
Service-level error taxonomy.

Kernel services raise these; ``fintech_index.main`` turns them into JSON
responses with the matching HTTP status.
"""

from typing import Any, Dict, List, Optional


class FintechIndexError(Exception):
    """Base class for errors that map to a client-visible HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}
        super().__init__(self.message)

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"detail": self.message}
        content.update(self.extra)
        return content


class Unauthenticated(FintechIndexError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid credentials"


class Forbidden(FintechIndexError):
    status_code = 403
    default_message = "Insufficient permissions"


class ValidationFailed(FintechIndexError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(FintechIndexError):
    status_code = 409
    default_message = "Resource already exists"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        conflicts: Optional[List[Dict[str, Any]]] = None,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        extra: Dict[str, Any] = {}
        if details:
            extra["details"] = details
        if conflicts is not None:
            extra["conflicts"] = conflicts
        self.conflicts = conflicts or []
        super().__init__(message, status_code=status_code, extra=extra)


class NotFound(FintechIndexError):
    status_code = 404
    default_message = "Not found"


class QueryTimeout(FintechIndexError):
    status_code = 408
    default_message = "Request timeout - please try again"


class StoreUnavailable(FintechIndexError):
    status_code = 500
    default_message = "Data store error"
