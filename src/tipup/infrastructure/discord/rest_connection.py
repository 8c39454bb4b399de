"""Chat connection backed by the Discord REST API.

Only the calls the Tipup handshake needs are implemented; no gateway session
is opened.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Type
from types import TracebackType

import httpx

from ...domain.chat import ChatMessage, ChatUser
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"

# GUILD_TEXT, DM, GUILD_VOICE, GROUP_DM, GUILD_ANNOUNCEMENT, the three thread
# types and GUILD_STAGE_VOICE all carry a message list.
TEXT_BASED_CHANNEL_TYPES = frozenset({0, 1, 2, 3, 5, 10, 11, 12, 13})

MAX_RATE_LIMIT_ATTEMPTS = 3


def _retry_after(resp: httpx.Response) -> float:
    """Seconds to wait before retrying a 429, from the body or the header."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("retry_after") is not None:
        return float(body["retry_after"])
    try:
        return float(resp.headers.get("Retry-After", 1.0))
    except ValueError:
        return 1.0


def _user_from_payload(data: Dict[str, Any]) -> ChatUser:
    return ChatUser(
        id=str(data["id"]),
        username=data.get("username"),
        bot=bool(data.get("bot", False)),
    )


def _message_from_payload(data: Dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        id=str(data["id"]),
        channel_id=str(data["channel_id"]),
        author_id=str(data["author"]["id"]),
        content=data.get("content") or "",
    )


class DiscordChannel:
    """A Discord channel resolved through :class:`DiscordRestConnection`."""

    def __init__(self, connection: "DiscordRestConnection", data: Dict[str, Any]):
        self._connection = connection
        self._id = str(data["id"])
        self.type: int = int(data.get("type", -1))
        self.name: Optional[str] = data.get("name")

    @property
    def id(self) -> str:
        return self._id

    def is_text_based(self) -> bool:
        return self.type in TEXT_BASED_CHANNEL_TYPES

    async def send(self, content: str) -> ChatMessage:
        resp = await self._connection._request(
            "POST",
            f"/channels/{self._id}/messages",
            json={"content": content, "allowed_mentions": {"parse": []}},
        )
        return _message_from_payload(resp.json())

    async def history(self, limit: int) -> list[ChatMessage]:
        resp = await self._connection._request(
            "GET", f"/channels/{self._id}/messages", params={"limit": limit}
        )
        # Discord returns the newest message first.
        return [_message_from_payload(item) for item in resp.json()]

    async def delete_message(self, message_id: str) -> None:
        await self._connection._request(
            "DELETE", f"/channels/{self._id}/messages/{message_id}"
        )


class DiscordRestConnection:
    """Minimal Discord bot connection.

    Call :meth:`login` once before use; until then :attr:`user` is None and the
    Tipup client treats the connection as not ready.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base: str = DISCORD_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not token:
            raise ValueError("Discord bot token cannot be empty")
        self._http = AsyncHttpClient(
            api_base,
            timeout=timeout,
            headers={"Authorization": f"Bot {token}"},
            transport=transport,
        )
        self._user: Optional[ChatUser] = None

    @property
    def user(self) -> Optional[ChatUser]:
        return self._user

    async def login(self) -> ChatUser:
        """Resolve the bot identity behind the token."""
        resp = await self._request("GET", "/users/@me")
        self._user = _user_from_payload(resp.json())
        logger.info("Discord connection ready as %s", self._user.id)
        return self._user

    async def fetch_user(self, user_id: str) -> Optional[ChatUser]:
        resp = await self._request("GET", f"/users/{user_id}", allow_not_found=True)
        if resp.status_code == 404:
            return None
        return _user_from_payload(resp.json())

    async def fetch_channel(self, channel_id: str) -> Optional[DiscordChannel]:
        resp = await self._request(
            "GET", f"/channels/{channel_id}", allow_not_found=True
        )
        if resp.status_code == 404:
            return None
        return DiscordChannel(self, resp.json())

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        for attempt in range(MAX_RATE_LIMIT_ATTEMPTS):
            resp = await self._http.request(
                method, path, raise_for_status=False, **kwargs
            )
            if resp.status_code == 429 and attempt < MAX_RATE_LIMIT_ATTEMPTS - 1:
                retry_after = _retry_after(resp)
                logger.warning("Discord rate limited, retrying in %ss", retry_after)
                await asyncio.sleep(retry_after)
                continue
            break
        if allow_not_found and resp.status_code == 404:
            return resp
        resp.raise_for_status()
        return resp

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "DiscordRestConnection":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
