"""
API exception classes.
Each maps to one HTTP status; the handlers in app.main render them as
{"success": false, "message": ..., "errors": [...]}.
"""

from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(APIException):
    """Malformed or out-of-range input, with optional per-field messages."""

    def __init__(
        self,
        detail: str = "Validation errors",
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.field_errors = field_errors or []


class DuplicateResourceError(ValidationError):
    """A unique value (email, license number) is already taken."""

    def __init__(self, resource: str, field: str):
        super().__init__(
            f"{resource} with this {field} already exists",
            field_errors=[{"field": field, "message": f"{field} already in use"}],
        )


class UnauthorizedError(APIException):
    """Missing, invalid or expired credential."""

    def __init__(self, detail: str = "Access denied. Not authenticated."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(APIException):
    """Authenticated but not permitted (wrong owner or role)."""

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(APIException):
    def __init__(self, resource: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")


class UpstreamServiceError(APIException):
    """The media host (or another dependency) failed."""

    def __init__(self, detail: str = "Upstream service failure"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
