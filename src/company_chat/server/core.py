# pylint: disable=[invalid-name,import-outside-toplevel]
from __future__ import annotations

from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.openapi.config import OpenAPIConfig
from litestar.openapi.plugins import ScalarRenderPlugin
from litestar.plugins import CLIPluginProtocol, InitPluginProtocol

if TYPE_CHECKING:
    from click import Group
    from litestar.config.app import AppConfig


class ApplicationCore(InitPluginProtocol, CLIPluginProtocol):
    """Application core configuration plugin.

    This class is responsible for configuring the main Litestar application with our routes, guards, and various plugins

    """

    __slots__ = "app_slug"
    app_slug: str

    def on_cli_init(self, cli: Group) -> None:
        from company_chat.cli.commands import user_group_management_group
        from company_chat.config import get_settings

        settings = get_settings()
        self.app_slug = settings.app.slug
        cli.add_command(user_group_management_group)

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Configure application for use with SQLAlchemy.

        Args:
            app_config: The :class:`AppConfig <litestar.config.app.AppConfig>` instance.
        """

        from uuid import UUID

        from advanced_alchemy.exceptions import RepositoryError
        from advanced_alchemy.filters import FilterTypes
        from advanced_alchemy.service import OffsetPagination

        from company_chat.__about__ import __version__ as current_version
        from company_chat.config import app as config
        from company_chat.config import get_settings
        from company_chat.db import models as m
        from company_chat.db.utils import bootstrap_user_groups
        from company_chat.domain.accounts.controllers import UserController, UserGroupController
        from company_chat.domain.accounts.deps import provide_user
        from company_chat.domain.accounts.guards import auth
        from company_chat.domain.accounts.services import UserGroupService, UserService
        from company_chat.domain.chat.controllers import ChatController
        from company_chat.domain.chat.pipeline import ChatMiddleware
        from company_chat.domain.chat.quota import QuotaPolicyResolver
        from company_chat.domain.chat.services import ChatService
        from company_chat.domain.usage.controllers import UsageController
        from company_chat.domain.usage.services import UsageService
        from company_chat.lib.exceptions import ApplicationError, exception_to_http_response
        from company_chat.server import plugins

        settings = get_settings()
        self.app_slug = settings.app.slug
        app_config.debug = settings.app.DEBUG
        # openapi
        app_config.openapi_config = OpenAPIConfig(
            title=settings.app.NAME,
            version=current_version,
            use_handler_docstrings=True,
            render_plugins=[ScalarRenderPlugin(version="latest")],
        )
        # api key auth
        app_config.middleware.insert(0, auth)
        # security
        app_config.cors_config = config.cors
        # plugins
        app_config.plugins.extend(
            [
                plugins.structlog,
                plugins.alchemy,
            ],
        )

        # routes
        app_config.route_handlers.extend(
            [
                UserController,
                UserGroupController,
                UsageController,
                ChatController,
            ],
        )
        # signatures
        app_config.signature_namespace.update(
            {
                "m": m,
                "UUID": UUID,
                "FilterTypes": FilterTypes,
                "OffsetPagination": OffsetPagination,
                "UserService": UserService,
                "UserGroupService": UserGroupService,
                "UsageService": UsageService,
                "QuotaPolicyResolver": QuotaPolicyResolver,
                "ChatMiddleware": ChatMiddleware,
                "ChatService": ChatService,
            },
        )
        # exception handling
        app_config.exception_handlers = {
            ApplicationError: exception_to_http_response,
            RepositoryError: exception_to_http_response,
        }
        # dependencies
        dependencies = {"current_user": Provide(provide_user)}
        app_config.dependencies.update(dependencies)

        # startup
        async def on_startup() -> None:
            await bootstrap_user_groups(config.alchemy)

        app_config.on_startup.append(on_startup)
        return app_config
