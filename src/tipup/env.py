from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://api.tipup.app"
DEFAULT_BOT_USER_ID = "1211252667553419325"
INSTALL_URL = "https://tipup.app/add-to-discord"

# Discord caps a single history page at 100 messages.
MAX_REPLY_SCAN_LIMIT = 100


class Settings(BaseModel):
    """Typed, immutable client settings.

    The defaults target production; ``api_url`` and ``bot_user_id`` are the
    overrides used against non-production environments.
    """

    model_config = ConfigDict(frozen=True)

    api_url: str = DEFAULT_API_URL
    bot_user_id: str = DEFAULT_BOT_USER_ID
    api_key: Optional[str] = Field(default=None, repr=False)

    # Handshake settings
    settle_interval_seconds: float = 5.0
    reply_scan_limit: int = 10
    require_reply_echo: bool = False

    # HTTP settings
    http_timeout_seconds: float = 10.0

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Tipup API URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Tipup API URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Tipup API URL must include a host")
        return v.rstrip("/")

    @field_validator("bot_user_id")
    @classmethod
    def validate_bot_user_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tipup bot user id cannot be empty")
        return v.strip()

    @field_validator("settle_interval_seconds", "http_timeout_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Intervals must not be negative")
        return v

    @field_validator("reply_scan_limit")
    @classmethod
    def validate_reply_scan_limit(cls, v: int) -> int:
        if not 1 <= v <= MAX_REPLY_SCAN_LIMIT:
            raise ValueError(
                f"reply_scan_limit must be between 1 and {MAX_REPLY_SCAN_LIMIT}"
            )
        return v

    def with_api_key(self, api_key: str) -> "Settings":
        """Return a copy of these settings bound to ``api_key``."""
        return self.model_copy(update={"api_key": api_key})


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    return Settings(
        api_url=os.environ.get("TIPUP_API_URL", DEFAULT_API_URL),
        bot_user_id=os.environ.get("TIPUP_BOT_USER_ID", DEFAULT_BOT_USER_ID),
        api_key=os.environ.get("TIPUP_API_KEY") or None,
        settle_interval_seconds=float(
            os.environ.get("TIPUP_SETTLE_INTERVAL_SECONDS", "5.0")
        ),
        reply_scan_limit=int(os.environ.get("TIPUP_REPLY_SCAN_LIMIT", "10")),
        require_reply_echo=os.environ.get("TIPUP_REQUIRE_REPLY_ECHO", "false").lower()
        == "true",
        http_timeout_seconds=float(os.environ.get("TIPUP_HTTP_TIMEOUT_SECONDS", "10.0")),
    )
