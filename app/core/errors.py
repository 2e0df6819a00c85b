# app/core/errors.py
from fastapi import HTTPException, status


class AppError(HTTPException):
    """
    Base for structured API errors.

    Every error carries a machine-readable `kind` next to the
    human-readable `detail`; the handler in `app.main` renders both.
    """

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class NotFoundError(AppError):
    """Cart, product, line item or user is absent."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(AppError):
    """Missing identity, non-positive quantity, bad credentials, ..."""

    kind = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class PersistenceError(AppError):
    """
    Store read/write failure.

    The detail is deliberately generic; the underlying cause is logged
    by the repository that raised it and never sent to clients.
    """

    kind = "persistence_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Server error"):
        super().__init__(detail)
