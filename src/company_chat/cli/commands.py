from __future__ import annotations

import click

__all__ = ("user_group_management_group",)


@click.group(name="user-groups", invoke_without_command=False, help="Manage user groups and admin users.")
@click.pass_context
def user_group_management_group(_: dict[str, object]) -> None:
    """Manage user groups and admin users."""


@user_group_management_group.command(name="bootstrap", help="Create the built-in admin and default user groups.")
def bootstrap() -> None:
    """Create the built-in user groups when they are missing."""
    import anyio

    from company_chat.config.app import alchemy
    from company_chat.db.utils import bootstrap_user_groups

    groups = anyio.run(bootstrap_user_groups, alchemy)
    for group in groups:
        click.echo(f"{group.name}: {group.id}")


@user_group_management_group.command(name="create-admin", help="Create a user in the built-in admin group.")
@click.option("--email", "-e", help="Email of the new user", type=click.STRING, required=True)
@click.option("--name", "-n", help="Full name of the new user", type=click.STRING, required=True)
def create_admin(email: str, name: str) -> None:
    """Create an admin user and print its API key."""
    import anyio

    from company_chat.config.app import alchemy
    from company_chat.db import models as m
    from company_chat.db.utils import bootstrap_user_groups
    from company_chat.domain.accounts.services import UserService

    async def _create_admin() -> None:
        await bootstrap_user_groups(alchemy)
        async with alchemy.get_session() as db_session:
            user, api_key = await UserService(session=db_session).create_user(
                {
                    "name": name,
                    "email": email,
                    "user_group_ids": [m.BUILTIN_USER_GROUP_ADMIN],
                    "generate_api_key": True,
                },
            )
            await db_session.commit()
        click.echo(f"Created admin {user.email} ({user.id})")
        click.echo(f"API key: {api_key}")

    anyio.run(_create_admin)
