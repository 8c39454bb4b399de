"""Shared pytest fixtures for the Tipup client tests."""

from __future__ import annotations

from typing import AsyncGenerator, Generator

import pytest

from tipup.client import TipupClient
from tipup.domain.chat import ChatUser
from tipup.env import Settings
from tests.fixtures import FakeTipupApi, InMemoryChatConnection, RecordingSleep
from tests.fixtures.constants import API_KEY, BOT_USER_ID, TIPUP_BOT_ID


@pytest.fixture
def bot_user() -> ChatUser:
    return ChatUser(id=BOT_USER_ID, username="my-bot", bot=True)


@pytest.fixture
def tipup_bot_user() -> ChatUser:
    return ChatUser(id=TIPUP_BOT_ID, username="Tipup", bot=True)


@pytest.fixture
def connection(
    bot_user: ChatUser, tipup_bot_user: ChatUser
) -> Generator[InMemoryChatConnection, None, None]:
    """A logged-in connection in a server where the Tipup bot is installed."""
    conn = InMemoryChatConnection(user=bot_user)
    conn.add_user(tipup_bot_user)
    yield conn
    conn.clear()


@pytest.fixture
def not_ready_connection(tipup_bot_user: ChatUser) -> InMemoryChatConnection:
    conn = InMemoryChatConnection(user=None)
    conn.add_user(tipup_bot_user)
    return conn


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_tipup_api() -> FakeTipupApi:
    return FakeTipupApi()


@pytest.fixture
def settings(fake_tipup_api: FakeTipupApi) -> Settings:
    return Settings(api_url=fake_tipup_api.base_url, api_key=API_KEY)


@pytest.fixture
async def tipup_client(
    connection: InMemoryChatConnection,
    settings: Settings,
    recording_sleep: RecordingSleep,
    fake_tipup_api: FakeTipupApi,
) -> AsyncGenerator[TipupClient, None]:
    async with TipupClient(
        connection,
        settings,
        sleep=recording_sleep,
        transport=fake_tipup_api.transport(),
    ) as client:
        yield client
