"""Chat platform entities shared by the handshake and the payment flow."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ChatUser(BaseModel):
    """A user or bot account as seen by the chat connection."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: Optional[str] = None
    bot: bool = False


class ChatMessage(BaseModel):
    """A message posted in a channel."""

    model_config = ConfigDict(frozen=True)

    id: str
    channel_id: str
    author_id: str
    content: str
