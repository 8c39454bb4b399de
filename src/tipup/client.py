"""Public entry point: one Tipup client per bot connection."""

from __future__ import annotations

import asyncio
from typing import Optional, Type, Union
from types import TracebackType

import httpx

from .application.dtos import GiftPaymentIntent, PaymentResultDTO, TokenPaymentIntent
from .application.use_cases.handshake import (
    CleanupErrorHook,
    HandshakeService,
    SleepFunc,
)
from .application.use_cases.payment import PaymentService
from .domain.shared import ChatConnectionProtocol
from .env import Settings
from .infrastructure.tipup.api_client import TipupApiClient


class TipupClient:
    """Obtains the Tipup API key and requests payments for a chat bot.

    The chat connection must already be logged in; the client never opens or
    closes it. The HTTP session to the Tipup API is owned by the client and is
    released by :meth:`aclose` or ``async with``.
    """

    def __init__(
        self,
        connection: ChatConnectionProtocol,
        settings: Optional[Settings] = None,
        *,
        sleep: SleepFunc = asyncio.sleep,
        on_cleanup_error: Optional[CleanupErrorHook] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or Settings()
        self._connection = connection
        self._api = TipupApiClient(
            self._settings.api_url,
            timeout=self._settings.http_timeout_seconds,
            transport=transport,
        )
        self._handshake = HandshakeService(
            connection,
            counterpart_user_id=self._settings.bot_user_id,
            settle_interval_seconds=self._settings.settle_interval_seconds,
            reply_scan_limit=self._settings.reply_scan_limit,
            require_reply_echo=self._settings.require_reply_echo,
            sleep=sleep,
            on_cleanup_error=on_cleanup_error,
        )
        self._payments = PaymentService(connection, self._api, self._settings.api_key)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connection(self) -> ChatConnectionProtocol:
        return self._connection

    async def generate_api_key(self, channel_id: str, user_id: str) -> None:
        """Ask the Tipup bot to issue an API key for ``user_id``.

        The key is delivered by the Tipup bot out of band.
        """
        await self._handshake.send_setup_signal(channel_id, user_id)

    async def fetch_api_key(
        self, channel_id: str, user_id: Optional[str] = None
    ) -> str:
        """Run the handshake in ``channel_id`` and return the API key."""
        return await self._handshake.obtain_credential(channel_id, user_id)

    async def request_payment(
        self, intent: Union[TokenPaymentIntent, GiftPaymentIntent]
    ) -> PaymentResultDTO:
        """Request a token or gift payment from ``intent.user_id``."""
        return await self._payments.request_payment(intent)

    async def aclose(self) -> None:
        await self._api.aclose()

    async def __aenter__(self) -> "TipupClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def create_tipup_client(
    connection: ChatConnectionProtocol,
    *,
    api_key: Optional[str] = None,
    api_url: Optional[str] = None,
    bot_user_id: Optional[str] = None,
    settings: Optional[Settings] = None,
    **kwargs,
) -> TipupClient:
    """Build a :class:`TipupClient`, applying optional endpoint overrides."""
    overrides = {
        key: value
        for key, value in (
            ("api_key", api_key),
            ("api_url", api_url),
            ("bot_user_id", bot_user_id),
        )
        if value is not None
    }
    base = settings or Settings()
    if overrides:
        base = Settings.model_validate({**base.model_dump(), **overrides})
    return TipupClient(connection, base, **kwargs)
