"""Application exceptions and their HTTP translation.

Domain code raises subclasses of :class:`ApplicationError`; the handler
registered in ``server.core`` turns them into problem responses. Quota
rejections are raised as :class:`QuotaExceededException`, which already is a
Litestar HTTP exception and maps to ``429 Too Many Requests``.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

from advanced_alchemy.exceptions import IntegrityError, NotFoundError as RepositoryNotFoundError, RepositoryError
from litestar.enums import MediaType
from litestar.exceptions import (
    HTTPException,
    InternalServerException,
    NotFoundException,
    PermissionDeniedException,
    TooManyRequestsException,
)
from litestar.response import Response
from litestar.status_codes import HTTP_409_CONFLICT

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from litestar.connection import Request

__all__ = (
    "ApplicationClientError",
    "ApplicationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "QuotaExceededException",
    "QuotaScope",
    "exception_to_http_response",
)


class ApplicationError(Exception):
    """Base exception type for the app's custom exception types."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``ApplicationError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ApplicationClientError(ApplicationError):
    """Base exception type for client errors."""


class AuthorizationError(ApplicationClientError):
    """A user tried to do something they shouldn't have."""


class ConflictError(ApplicationClientError):
    """The request conflicts with the current state of a resource."""


class NotFoundError(ApplicationClientError):
    """A requested resource does not exist."""


class QuotaScope(str, enum.Enum):
    """Dimension a monthly cap applies to."""

    GROUP = "group"
    USER = "user"


_QUOTA_MESSAGES = {
    QuotaScope.GROUP: "Monthly token limit exceeded for user group.",
    QuotaScope.USER: "Monthly token limit exceeded for user.",
}


class QuotaExceededException(TooManyRequestsException):
    """Raised when a monthly token cap has been reached."""

    def __init__(
        self,
        scope: QuotaScope,
        user_id: UUID,
        current_usage: int,
        monthly_limit: int,
        reset_date: datetime,
    ) -> None:
        self.scope = scope
        self.user_id = user_id
        self.current_usage = current_usage
        self.monthly_limit = monthly_limit
        self.reset_date = reset_date
        super().__init__(
            detail=_QUOTA_MESSAGES[scope],
            extra={
                "scope": scope.value,
                "currentUsage": current_usage,
                "monthlyLimit": monthly_limit,
                "resetDate": reset_date.isoformat(),
            },
        )


class _HTTPConflictException(HTTPException):
    """Request conflict with the current state of the target resource."""

    status_code = HTTP_409_CONFLICT


def exception_to_http_response(
    request: Request[Any, Any, Any],
    exc: ApplicationError | RepositoryError,
) -> Response[Any]:
    """Transform repository exceptions to HTTP exceptions.

    Args:
        request: The request that experienced the exception.
        exc: Exception raised during handling of the request.

    Returns:
        Exception response appropriate to the type of original exception.
    """
    http_exc: type[HTTPException]
    if isinstance(exc, NotFoundError | RepositoryNotFoundError):
        http_exc = NotFoundException
    elif isinstance(exc, ConflictError | RepositoryError | IntegrityError):
        http_exc = _HTTPConflictException
    elif isinstance(exc, AuthorizationError):
        http_exc = PermissionDeniedException
    else:
        http_exc = InternalServerException
    detail = exc.detail if isinstance(exc, ApplicationError) else str(exc)
    if http_exc is InternalServerException and not request.app.debug:
        detail = "Internal Server Error"
    return Response(
        content={"status_code": http_exc.status_code, "detail": detail},
        status_code=http_exc.status_code,
        media_type=MediaType.JSON,
    )
