from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Final

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

TRUE_VALUES: Final = {"True", "true", "1", "yes", "Y", "T"}


def get_env(key: str, default: Any) -> Any:
    """Read an environment variable, coercing it to the type of ``default``."""
    value = os.getenv(key)
    if value is None:
        return default
    if isinstance(default, bool):
        return value in TRUE_VALUES
    if isinstance(default, int):
        return int(value)
    if isinstance(default, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


@dataclass
class DatabaseSettings:
    URL: str = field(default_factory=lambda: get_env("DATABASE_URL", "sqlite+aiosqlite:///company_chat.sqlite3"))
    """SQLAlchemy database URL."""
    ECHO: bool = field(default_factory=lambda: get_env("DATABASE_ECHO", False))
    """Log emitted SQL statements."""
    POOL_DISABLED: bool = field(default_factory=lambda: get_env("DATABASE_POOL_DISABLED", False))
    POOL_SIZE: int = field(default_factory=lambda: get_env("DATABASE_POOL_SIZE", 5))
    POOL_MAX_OVERFLOW: int = field(default_factory=lambda: get_env("DATABASE_MAX_POOL_OVERFLOW", 10))

    _engine_instance: AsyncEngine | None = None

    def get_engine(self) -> AsyncEngine:
        if self._engine_instance is not None:
            return self._engine_instance
        if self.URL.startswith("sqlite") or self.POOL_DISABLED:
            engine = create_async_engine(url=self.URL, future=True, echo=self.ECHO, poolclass=NullPool)
        else:
            engine = create_async_engine(
                url=self.URL,
                future=True,
                echo=self.ECHO,
                max_overflow=self.POOL_MAX_OVERFLOW,
                pool_size=self.POOL_SIZE,
                pool_pre_ping=True,
            )
        self._engine_instance = engine
        return self._engine_instance


@dataclass
class AppSettings:
    NAME: str = field(default_factory=lambda: get_env("APP_NAME", "Company Chat"))
    DEBUG: bool = field(default_factory=lambda: get_env("LITESTAR_DEBUG", False))
    ALLOWED_CORS_ORIGINS: list[str] = field(default_factory=lambda: get_env("ALLOWED_CORS_ORIGINS", ["*"]))

    @property
    def slug(self) -> str:
        return "-".join(self.NAME.lower().split())


@dataclass
class AISettings:
    MODEL: str = field(default_factory=lambda: get_env("AI_MODEL", "gpt-4o-mini"))
    """Model used when a chat request does not name one."""
    INSTRUCTIONS: str = field(
        default_factory=lambda: get_env("AI_INSTRUCTIONS", "You are a helpful assistant for company employees.")
    )
    AGENT_NAME: str = field(default_factory=lambda: get_env("AI_AGENT_NAME", "CompanyChat"))
    MAX_TURNS: int = field(default_factory=lambda: get_env("AI_MAX_TURNS", 10))


@dataclass
class QuotaSettings:
    ZERO_LIMIT_BLOCKS: bool = field(default_factory=lambda: get_env("QUOTA_ZERO_LIMIT_BLOCKS", False))
    """When true a monthly limit of ``0`` rejects every request instead of disabling the cap."""
    USAGE_COUNTER: str = field(default_factory=lambda: get_env("QUOTA_USAGE_COUNTER", "token_count"))
    """Counter name under which chat token consumption is recorded."""


@dataclass
class LogSettings:
    LEVEL: int = field(default_factory=lambda: get_env("LOG_LEVEL", 20))
    """Stdlib log level for the root logger."""
    SQLALCHEMY_LEVEL: int = field(default_factory=lambda: get_env("SQLALCHEMY_LOG_LEVEL", 30))
    REQUEST_FIELDS: list[str] = field(
        default_factory=lambda: get_env("LOG_REQUEST_FIELDS", ["path", "method", "query", "path_params"])
    )
    RESPONSE_FIELDS: list[str] = field(default_factory=lambda: get_env("LOG_RESPONSE_FIELDS", ["status_code"]))


@dataclass
class Settings:
    app: AppSettings = field(default_factory=AppSettings)
    db: DatabaseSettings = field(default_factory=DatabaseSettings)
    ai: AISettings = field(default_factory=AISettings)
    quota: QuotaSettings = field(default_factory=QuotaSettings)
    log: LogSettings = field(default_factory=LogSettings)

    @classmethod
    def from_env(cls, dotenv_filename: str = ".env") -> Settings:
        env_file = os.path.join(os.getcwd(), dotenv_filename)  # noqa: PTH118,PTH109
        if os.path.isfile(env_file):  # noqa: PTH113
            load_dotenv(env_file, override=True)
        return Settings()


@lru_cache(maxsize=1, typed=True)
def get_settings() -> Settings:
    return Settings.from_env()
