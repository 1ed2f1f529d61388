from __future__ import annotations

import os
import sys
from typing import NoReturn


def setup_environment() -> None:
    """Point the Litestar CLI at the application factory."""
    os.environ.setdefault("LITESTAR_APP", "company_chat.asgi:create_app")


def run_cli() -> NoReturn:
    """Application entrypoint."""
    setup_environment()

    from litestar.cli.main import litestar_group

    sys.exit(litestar_group())  # pyright: ignore[reportUnknownMemberType]


if __name__ == "__main__":
    run_cli()
