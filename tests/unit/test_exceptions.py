from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from advanced_alchemy.exceptions import NotFoundError as RepositoryNotFoundError
from litestar import get
from litestar.testing import create_test_client

from company_chat.lib.exceptions import (
    ApplicationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    QuotaExceededException,
    QuotaScope,
    exception_to_http_response,
)


def test_quota_exceeded_carries_details() -> None:
    error = QuotaExceededException(
        scope=QuotaScope.USER,
        user_id=uuid4(),
        current_usage=51,
        monthly_limit=50,
        reset_date=datetime(2026, 4, 1, tzinfo=UTC),
    )

    assert error.status_code == 429
    assert error.detail == "Monthly token limit exceeded for user."
    assert error.extra == {
        "scope": "user",
        "currentUsage": 51,
        "monthlyLimit": 50,
        "resetDate": "2026-04-01T00:00:00+00:00",
    }


def test_application_error_detail() -> None:
    assert ConflictError("already there").detail == "already there"
    assert str(NotFoundError(detail="missing")) == "missing"


def _status_for(exc: Exception, *, debug: bool = False) -> tuple[int, str]:
    @get("/boom", sync_to_thread=False)
    def boom() -> None:
        raise exc

    with create_test_client(
        route_handlers=[boom],
        debug=debug,
        exception_handlers={
            ApplicationError: exception_to_http_response,
            RepositoryNotFoundError: exception_to_http_response,
        },
    ) as client:
        response = client.get("/boom")
    return response.status_code, response.json()["detail"]


def test_exception_to_http_response() -> None:
    assert _status_for(NotFoundError("no such user")) == (404, "no such user")
    assert _status_for(RepositoryNotFoundError("no row"))[0] == 404
    assert _status_for(ConflictError("taken")) == (409, "taken")
    assert _status_for(AuthorizationError("nope")) == (403, "nope")
    assert _status_for(ApplicationError("secret")) == (500, "Internal Server Error")


def test_internal_error_detail_shown_in_debug() -> None:
    assert _status_for(ApplicationError("secret"), debug=True) == (500, "secret")
