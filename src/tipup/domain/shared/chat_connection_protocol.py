"""Protocol interfaces for the chat platform collaborator.

The Tipup client never owns the chat connection. It only needs the handful of
capabilities below, which lets services accept a Discord REST adapter, a
wrapped library client, or an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..chat import ChatMessage, ChatUser


class ChatChannelProtocol(Protocol):
    """A resolved channel the bot can post into."""

    @property
    def id(self) -> str: ...

    def is_text_based(self) -> bool:
        """Return True when the channel supports sending and reading text."""
        ...

    async def send(self, content: str) -> "ChatMessage":
        """Post ``content`` as the connected bot and return the created message."""
        ...

    async def history(self, limit: int) -> list["ChatMessage"]:
        """Return up to ``limit`` of the most recent messages, newest first."""
        ...

    async def delete_message(self, message_id: str) -> None:
        """Delete a message from this channel."""
        ...


class ChatConnectionProtocol(Protocol):
    """An already connected and authorized chat client."""

    @property
    def user(self) -> Optional["ChatUser"]:
        """The authenticated bot identity, or None before login completes.

        Must not perform any network call.
        """
        ...

    async def fetch_user(self, user_id: str) -> Optional["ChatUser"]:
        """Resolve a user by id. Returns None when the user is unknown."""
        ...

    async def fetch_channel(self, channel_id: str) -> Optional[ChatChannelProtocol]:
        """Resolve a channel by id. Returns None when the channel is unknown."""
        ...
