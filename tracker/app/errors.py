"""Error taxonomy rendered into the uniform ``{code, message, details?}`` envelope."""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError


class ApiError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    def __init__(self, details: list[dict[str, str]], message: str = "Validation failed") -> None:
        super().__init__("VALIDATION_ERROR", message, 400, details)


class AuthenticationError(ApiError):
    def __init__(
        self, code: str = "AUTHENTICATION_REQUIRED", message: str = "API key is required"
    ) -> None:
        super().__init__(code, message, 401)


class NotFoundError(ApiError):
    def __init__(self, message: str = "Feature request not found") -> None:
        super().__init__("RESOURCE_NOT_FOUND", message, 404)


class StorageError(ApiError):
    """A database failure.

    Constraint and data errors are the caller's fault (400); anything else
    coming out of the driver is reported as a server error (500).
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        status_code: int = 500,
        details: Any = None,
    ) -> None:
        super().__init__("DATABASE_ERROR", message, status_code, details)

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> StorageError:
        status_code = 400 if isinstance(exc, (IntegrityError, DataError)) else 500
        cause = getattr(exc, "orig", None) or exc
        return cls(status_code=status_code, details=[{"message": str(cause)}])
