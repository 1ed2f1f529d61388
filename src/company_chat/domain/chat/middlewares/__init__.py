from .check_usage import CheckUsageMiddleware
from .log_chat import LogChatMiddleware

__all__ = ("CheckUsageMiddleware", "LogChatMiddleware")
