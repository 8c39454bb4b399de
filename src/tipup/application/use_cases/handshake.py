"""API key handshake over a chat channel.

The Tipup API has no relationship with the bot's server, so the bot proves it
controls a channel by posting a tagged probe there. The Tipup bot, which sits
in the same server, reacts to the probe. There is no callback: the handshake
waits a fixed settle interval and then either stops (setup signal) or scans
recent history for the Tipup bot's reply. The probe is always deleted.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ...domain.chat import ChatMessage
from ...domain.errors import (
    ChannelNotFoundError,
    ChannelNotTextBasedError,
    ClientNotReadyError,
    CounterpartNotInstalledError,
    CredentialExtractionError,
)
from ...domain.shared import ChatChannelProtocol, ChatConnectionProtocol
from ...env import DEFAULT_BOT_USER_ID, INSTALL_URL
from ...middleware.timing import log_timing
from ..wire import (
    CorrelationTag,
    api_key_tag,
    decode_reply,
    encode_probe,
    is_reply,
    reply_echoes_subject,
)

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
CleanupErrorHook = Callable[[ChatMessage, Exception], None]


class HandshakeService:
    """Runs the probe/settle/read/cleanup exchange against one connection.

    The service holds no per-call state, so concurrent handshakes on
    different channels are independent.
    """

    def __init__(
        self,
        connection: ChatConnectionProtocol,
        *,
        counterpart_user_id: str = DEFAULT_BOT_USER_ID,
        settle_interval_seconds: float = 5.0,
        reply_scan_limit: int = 10,
        require_reply_echo: bool = False,
        install_url: str = INSTALL_URL,
        sleep: SleepFunc = asyncio.sleep,
        on_cleanup_error: Optional[CleanupErrorHook] = None,
    ):
        self.connection = connection
        self.counterpart_user_id = counterpart_user_id
        self.settle_interval_seconds = settle_interval_seconds
        self.reply_scan_limit = reply_scan_limit
        self.require_reply_echo = require_reply_echo
        self.install_url = install_url
        self._sleep = sleep
        self._on_cleanup_error = on_cleanup_error

    @log_timing("handshake_send_setup_signal")
    async def send_setup_signal(self, channel_id: str, user_id: str) -> None:
        """Post ``tipup-api-key:<user_id>``, wait, and remove it.

        The Tipup bot picks the probe up on its own; nothing is read back.
        """
        operation = "generate_api_key"
        channel = await self._prepare(operation, channel_id)
        await self._exchange(operation, channel, api_key_tag(user_id), expect_reply=False)

    @log_timing("handshake_obtain_credential")
    async def obtain_credential(
        self, channel_id: str, user_id: Optional[str] = None
    ) -> str:
        """Run the full exchange and return the Tipup bot's reply.

        Raises:
            ClientNotReadyError: The connection has no bot identity yet.
            CounterpartNotInstalledError: The Tipup bot cannot be resolved.
            ChannelNotFoundError: ``channel_id`` does not resolve.
            ChannelNotTextBasedError: The channel cannot carry text.
            CredentialExtractionError: No reply was found; run it again.
        """
        operation = "fetch_api_key"
        channel = await self._prepare(operation, channel_id)
        credential = await self._exchange(
            operation, channel, api_key_tag(user_id), expect_reply=True
        )
        assert credential is not None
        return credential

    async def _prepare(self, operation: str, channel_id: str) -> ChatChannelProtocol:
        if self.connection.user is None:
            raise ClientNotReadyError(operation)

        counterpart = await self.connection.fetch_user(self.counterpart_user_id)
        if counterpart is None:
            raise CounterpartNotInstalledError(operation, self.install_url)

        channel = await self.connection.fetch_channel(channel_id)
        if channel is None:
            raise ChannelNotFoundError(operation, channel_id)
        if not channel.is_text_based():
            raise ChannelNotTextBasedError(operation, channel_id)
        return channel

    async def _exchange(
        self,
        operation: str,
        channel: ChatChannelProtocol,
        tag: CorrelationTag,
        *,
        expect_reply: bool,
    ) -> Optional[str]:
        probe = await channel.send(encode_probe(tag))
        logger.debug("Posted handshake probe %s in channel %s", probe.id, channel.id)
        try:
            await self._sleep(self.settle_interval_seconds)
            if not expect_reply:
                return None
            reply = await self._find_reply(channel, tag)
            if reply is None:
                raise CredentialExtractionError(operation, channel.id)
            return decode_reply(reply.content, tag)
        finally:
            await self._cleanup(channel, probe)

    async def _find_reply(
        self, channel: ChatChannelProtocol, tag: CorrelationTag
    ) -> Optional[ChatMessage]:
        messages = await channel.history(self.reply_scan_limit)
        for message in messages:
            if message.author_id != self.counterpart_user_id:
                continue
            if not is_reply(message.content, tag, require_echo=self.require_reply_echo):
                continue
            if tag.subject_id is not None and not reply_echoes_subject(
                message.content, tag
            ):
                # Authorship and prefix are all that tie this reply to our
                # probe; a concurrent probe in the same channel could own it.
                logger.warning(
                    "Tipup reply %s in channel %s does not echo the probe subject",
                    message.id,
                    channel.id,
                )
            return message
        return None

    async def _cleanup(self, channel: ChatChannelProtocol, probe: ChatMessage) -> None:
        try:
            await channel.delete_message(probe.id)
        except Exception as e:
            logger.warning(
                "Failed to delete handshake probe %s in channel %s",
                probe.id,
                channel.id,
                exc_info=True,
            )
            if self._on_cleanup_error is not None:
                try:
                    self._on_cleanup_error(probe, e)
                except Exception:
                    logger.exception(
                        "Cleanup error hook failed for handshake probe %s", probe.id
                    )
