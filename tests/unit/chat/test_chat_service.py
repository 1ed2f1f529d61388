from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

import pytest

from company_chat.domain.chat import services as chat_services
from company_chat.domain.chat.middlewares import CheckUsageMiddleware, LogChatMiddleware
from company_chat.domain.chat.pipeline import ChatRequest
from company_chat.domain.chat.quota import QuotaPolicyResolver
from company_chat.domain.chat.services import ChatService
from company_chat.lib.exceptions import QuotaExceededException, QuotaScope
from company_chat.lib.usage_window import current_month_window

if TYPE_CHECKING:
    from company_chat.domain.accounts.services import UserGroupService, UserService
    from company_chat.domain.usage.services import UsageService

pytestmark = pytest.mark.anyio


class FakeRunner:
    """Stands in for ``Runner.run`` and reports fixed token usage."""

    def __init__(self, input_tokens: int, output_tokens: int) -> None:
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.calls: list[dict[str, Any]] = []

    async def run(self, agent: Any, messages: Any, **kwargs: Any) -> SimpleNamespace:
        self.calls.append({"agent": agent, "messages": messages, **kwargs})
        usage = SimpleNamespace(input_tokens=self.input_tokens, output_tokens=self.output_tokens)
        return SimpleNamespace(final_output="Hello there", context_wrapper=SimpleNamespace(usage=usage))


@pytest.fixture()
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner(input_tokens=30, output_tokens=20)
    monkeypatch.setattr(chat_services.Runner, "run", runner.run)
    return runner


def _service(user_groups_service: UserGroupService, usage_service: UsageService) -> ChatService:
    return ChatService(
        usage_service,
        [
            LogChatMiddleware(),
            CheckUsageMiddleware(QuotaPolicyResolver(user_groups_service), usage_service, counter="token_count"),
        ],
        model="test-model",
        instructions="Be brief.",
        max_turns=3,
    )


async def test_chat_records_input_and_output_tokens(
    fake_runner: FakeRunner,
    user_groups_service: UserGroupService,
    users_service: UserService,
    usage_service: UsageService,
) -> None:
    user, _ = await users_service.create_user({"name": "Ada", "email": "ada@example.com"})
    service = _service(user_groups_service, usage_service)

    result = await service.chat(user, ChatRequest(messages=[{"role": "user", "content": "Hi"}]))

    assert result.content == "Hello there"
    assert result.model == "test-model"
    assert result.total_tokens == 50
    assert fake_runner.calls[0]["max_turns"] == 3
    assert fake_runner.calls[0]["agent"].model == "test-model"

    records = await usage_service.list(user_id=user.id)
    assert sorted((record.key, record.sub_key, record.count) for record in records) == [
        ("test-model", "input", 30),
        ("test-model", "output", 20),
    ]
    assert {record.counter for record in records} == {"token_count"}


async def test_chat_uses_requested_model(
    fake_runner: FakeRunner,
    user_groups_service: UserGroupService,
    users_service: UserService,
    usage_service: UsageService,
) -> None:
    user, _ = await users_service.create_user({"name": "Bo", "email": "bo@example.com"})

    result = await _service(user_groups_service, usage_service).chat(
        user,
        ChatRequest(messages=[{"role": "user", "content": "Hi"}], model="other-model"),
    )

    assert result.model == "other-model"
    assert {record.key for record in await usage_service.list(user_id=user.id)} == {"other-model"}


async def test_recorded_usage_blocks_follow_up_request(
    fake_runner: FakeRunner,
    user_groups_service: UserGroupService,
    users_service: UserService,
    usage_service: UsageService,
) -> None:
    group = await user_groups_service.create({"name": "trial", "monthly_user_tokens": 50})
    user, _ = await users_service.create_user({"name": "Cy", "email": "cy@example.com", "user_group_ids": [group.id]})
    service = _service(user_groups_service, usage_service)
    request = ChatRequest(messages=[{"role": "user", "content": "Hi"}])

    await service.chat(user, request)
    with pytest.raises(QuotaExceededException) as exc_info:
        await service.chat(user, request)

    assert exc_info.value.scope is QuotaScope.USER
    assert exc_info.value.current_usage == 50
    assert exc_info.value.reset_date == current_month_window().reset_date
    assert len(fake_runner.calls) == 1


async def test_zero_token_counts_are_not_recorded(
    monkeypatch: pytest.MonkeyPatch,
    user_groups_service: UserGroupService,
    users_service: UserService,
    usage_service: UsageService,
) -> None:
    runner = FakeRunner(input_tokens=12, output_tokens=0)
    monkeypatch.setattr(chat_services.Runner, "run", runner.run)
    user, _ = await users_service.create_user({"name": "Di", "email": "di@example.com"})

    await _service(user_groups_service, usage_service).chat(user, ChatRequest(messages=[{"role": "user", "content": "Hi"}]))

    records = await usage_service.list(user_id=user.id)
    assert [(record.sub_key, record.count) for record in records] == [("input", 12)]
