"""API key authentication and authorization guards."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar.exceptions import NotAuthorizedException, PermissionDeniedException
from litestar.middleware import AbstractAuthenticationMiddleware, AuthenticationResult
from litestar.middleware.base import DefineMiddleware
from sqlalchemy.orm import joinedload, selectinload

from company_chat.config import app as plugin_configs
from company_chat.db import models as m
from company_chat.domain.accounts.services import UserService

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection
    from litestar.handlers.base import BaseRouteHandler

__all__ = (
    "ApiKeyAuthenticationMiddleware",
    "auth",
    "requires_admin",
)

AUTH_EXCLUDE = ["^/schema"]


class ApiKeyAuthenticationMiddleware(AbstractAuthenticationMiddleware):
    """Authenticates ``Authorization: Bearer <api key>`` requests."""

    async def authenticate_request(self, connection: ASGIConnection[Any, Any, Any, Any]) -> AuthenticationResult:
        scheme, _, api_key = connection.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not api_key:
            msg = "Missing API key."
            raise NotAuthorizedException(msg)

        async with plugin_configs.alchemy.get_session() as db_session:
            users_service = UserService(
                session=db_session,
                load=[
                    selectinload(m.User.memberships).options(
                        joinedload(m.UserGroupMembership.user_group, innerjoin=True),
                    ),
                ],
            )
            user = await users_service.get_by_api_key(api_key.strip())
        if user is None:
            msg = "Invalid API key."
            raise NotAuthorizedException(msg)
        return AuthenticationResult(user=user, auth=api_key)


def requires_admin(connection: ASGIConnection[Any, m.User, Any, Any], _: BaseRouteHandler) -> None:
    """Request requires a member of an admin user group.

    Raises:
        PermissionDeniedException: Not authorized
    """
    if connection.user.is_admin:
        return
    msg = "Insufficient privileges"
    raise PermissionDeniedException(msg)


auth = DefineMiddleware(ApiKeyAuthenticationMiddleware, exclude=AUTH_EXCLUDE)
