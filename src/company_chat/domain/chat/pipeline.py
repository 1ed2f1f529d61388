"""Ordered middleware chain every chat request passes through.

Stages are sorted once, ascending by ``order`` (lower runs earlier, ties keep
registration order), and folded right to left into a single continuation, so
stage ``i`` receives as ``next_`` exactly "run stage ``i + 1``" or the terminal
handler when it is last. A stage may return without calling ``next_``, call it
and post-process the result, or simply pass through. Exceptions are not caught
here and reach the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import partial
from operator import attrgetter
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

__all__ = (
    "ChatContext",
    "ChatMiddleware",
    "ChatNextDelegate",
    "ChatPipeline",
    "ChatRequest",
    "ChatResult",
    "ChatUser",
)


@dataclass(frozen=True, slots=True)
class ChatUser:
    """The authenticated user as seen by the pipeline."""

    id: UUID
    user_group_ids: tuple[UUID, ...] = ()


@dataclass(slots=True)
class ChatRequest:
    messages: list[dict[str, Any]]
    model: str | None = None
    conversation_id: str | None = None


@dataclass(slots=True)
class ChatResult:
    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(slots=True)
class ChatContext:
    """State shared by all stages of one chat request."""

    user: ChatUser
    request: ChatRequest
    extras: dict[str, Any] = field(default_factory=dict)


ChatNextDelegate = Callable[[ChatContext], Awaitable[ChatResult]]


@runtime_checkable
class ChatMiddleware(Protocol):
    """A pipeline stage."""

    order: int

    async def invoke(self, context: ChatContext, next_: ChatNextDelegate) -> ChatResult: ...


class ChatPipeline:
    """Composes middlewares and a terminal handler into one callable."""

    __slots__ = ("_entrypoint", "middlewares", "terminal")

    def __init__(self, middlewares: Iterable[ChatMiddleware], terminal: ChatNextDelegate) -> None:
        # sorted() is stable, equal orders keep their registration order
        self.middlewares: Sequence[ChatMiddleware] = tuple(sorted(middlewares, key=attrgetter("order")))
        self.terminal = terminal
        self._entrypoint = self._compose()

    def _compose(self) -> ChatNextDelegate:
        continuation: ChatNextDelegate = self.terminal
        for middleware in reversed(self.middlewares):
            continuation = partial(_invoke_stage, middleware, continuation)
        return continuation

    async def __call__(self, context: ChatContext) -> ChatResult:
        return await self._entrypoint(context)


async def _invoke_stage(middleware: ChatMiddleware, next_: ChatNextDelegate, context: ChatContext) -> ChatResult:
    return await middleware.invoke(context, next_)
