"""Story: a bot fetches its API key in a channel, then charges a user."""

from __future__ import annotations

import pytest

from tipup.application.dtos import GiftPaymentIntent, TokenPaymentIntent
from tipup.client import TipupClient, create_tipup_client
from tipup.domain.chat import ChatMessage
from tipup.domain.errors import (
    ClientNotReadyError,
    CredentialNotConfiguredError,
    RemoteServiceError,
)
from tipup.env import Settings
from tests.fixtures import FakeTipupApi, InMemoryChatConnection, RecordingSleep
from tests.fixtures.constants import BOT_USER_ID, OWNER_USER_ID, TIPUP_BOT_ID


def _issue_key(message: ChatMessage) -> str:
    subject = message.content.rsplit(":", 1)[-1]
    return f"tipup-api-key:{subject}:sk_live_issued"


@pytest.mark.asyncio
async def test_fetch_key_then_request_payments(
    connection: InMemoryChatConnection,
    recording_sleep: RecordingSleep,
    fake_tipup_api: FakeTipupApi,
) -> None:
    """
    The key returned by the handshake is bound into a new settings copy and
    used as the bearer credential for every payment.
    """
    channel = connection.add_channel(
        "setup", responder=_issue_key, responder_user_id=TIPUP_BOT_ID
    )
    base = Settings(api_url=fake_tipup_api.base_url, require_reply_echo=True)

    # Step 1: handshake without a key
    async with TipupClient(connection, base, sleep=recording_sleep) as bootstrap:
        api_key = await bootstrap.fetch_api_key("setup", OWNER_USER_ID)

    assert api_key == f"tipup-api-key:{OWNER_USER_ID}:sk_live_issued"
    assert [m.author_id for m in channel.messages] == [TIPUP_BOT_ID]

    # Step 2: payments with the obtained key
    fake_tipup_api.respond(200, {"requestId": 42, "status": "PAID"})
    async with TipupClient(
        connection,
        base.with_api_key(api_key),
        transport=fake_tipup_api.transport(),
    ) as client:
        paid = await client.request_payment(TokenPaymentIntent(user_id="u1", tokens=10))

        fake_tipup_api.respond(200, {"requestId": 43, "status": "DECLINED"})
        declined = await client.request_payment(
            GiftPaymentIntent(user_id="u2", gift="golden-star")
        )

    assert paid.to_payload() == {"requestId": 42, "status": "PAID"}
    assert declined.status == "DECLINED"
    assert [r["body"] for r in fake_tipup_api.requests] == [
        {"botId": BOT_USER_ID, "userId": "u1", "tokens": 10},
        {"botId": BOT_USER_ID, "userId": "u2", "gift": "golden-star"},
    ]
    assert all(
        r["headers"]["authorization"] == f"Bearer {api_key}"
        for r in fake_tipup_api.requests
    )


@pytest.mark.asyncio
async def test_generate_api_key_leaves_no_debris(
    tipup_client: TipupClient,
    connection: InMemoryChatConnection,
    recording_sleep: RecordingSleep,
) -> None:
    channel = connection.add_channel("setup")

    await tipup_client.generate_api_key("setup", OWNER_USER_ID)

    assert channel.messages == []
    assert recording_sleep.calls == [5.0]


@pytest.mark.asyncio
async def test_service_error_message_reaches_caller(
    tipup_client: TipupClient, fake_tipup_api: FakeTipupApi
) -> None:
    fake_tipup_api.respond(400, {"error": "insufficient balance"})

    with pytest.raises(RemoteServiceError, match="insufficient balance"):
        await tipup_client.request_payment(TokenPaymentIntent(user_id="u1", tokens=5))


@pytest.mark.asyncio
async def test_payment_without_key_is_rejected_before_network(
    connection: InMemoryChatConnection, fake_tipup_api: FakeTipupApi
) -> None:
    async with create_tipup_client(
        connection,
        api_url=fake_tipup_api.base_url,
        transport=fake_tipup_api.transport(),
    ) as client:
        with pytest.raises(CredentialNotConfiguredError):
            await client.request_payment(TokenPaymentIntent(user_id="u1", tokens=5))

    assert fake_tipup_api.requests == []


@pytest.mark.asyncio
async def test_not_ready_client_rejects_both_operations(
    not_ready_connection: InMemoryChatConnection,
    fake_tipup_api: FakeTipupApi,
    recording_sleep: RecordingSleep,
) -> None:
    async with create_tipup_client(
        not_ready_connection,
        api_key="secret",
        api_url=fake_tipup_api.base_url,
        sleep=recording_sleep,
        transport=fake_tipup_api.transport(),
    ) as client:
        with pytest.raises(ClientNotReadyError):
            await client.fetch_api_key("setup", OWNER_USER_ID)
        with pytest.raises(ClientNotReadyError):
            await client.request_payment(GiftPaymentIntent(user_id="u1", gift="rose"))

    assert not_ready_connection.calls == []
    assert fake_tipup_api.requests == []
    assert recording_sleep.calls == []


def test_create_tipup_client_applies_overrides(
    connection: InMemoryChatConnection,
) -> None:
    client = create_tipup_client(
        connection,
        api_key="secret",
        api_url="http://localhost:3000",
        bot_user_id="555",
    )

    assert client.settings.api_url == "http://localhost:3000"
    assert client.settings.bot_user_id == "555"
    assert client.settings.api_key == "secret"
    assert client.connection is connection
