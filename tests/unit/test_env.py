"""Unit tests for client settings."""

import pytest
from pydantic import ValidationError

from tipup.env import DEFAULT_API_URL, DEFAULT_BOT_USER_ID, Settings, get_settings


class TestSettings:
    def test_defaults_target_production(self) -> None:
        settings = Settings()
        assert settings.api_url == DEFAULT_API_URL == "https://api.tipup.app"
        assert settings.bot_user_id == DEFAULT_BOT_USER_ID
        assert settings.api_key is None
        assert settings.settle_interval_seconds == 5.0
        assert settings.reply_scan_limit == 10

    def test_settings_are_immutable(self) -> None:
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.api_url = "https://example.com"  # type: ignore[misc]

    def test_with_api_key_returns_new_copy(self) -> None:
        settings = Settings()
        bound = settings.with_api_key("secret")
        assert bound.api_key == "secret"
        assert settings.api_key is None

    def test_api_key_hidden_from_repr(self) -> None:
        assert "secret" not in repr(Settings(api_key="secret"))

    def test_trailing_slash_is_stripped(self) -> None:
        assert Settings(api_url="http://localhost:3000/").api_url == (
            "http://localhost:3000"
        )

    @pytest.mark.parametrize("url", ["", "ftp://tipup.app", "https://"])
    def test_invalid_api_url_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError):
            Settings(api_url=url)

    def test_blank_bot_user_id_rejected(self) -> None:
        with pytest.raises(ValidationError, match="cannot be empty"):
            Settings(bot_user_id="  ")

    @pytest.mark.parametrize("limit", [0, 101])
    def test_reply_scan_limit_bounds(self, limit: int) -> None:
        with pytest.raises(ValidationError, match="reply_scan_limit"):
            Settings(reply_scan_limit=limit)

    def test_negative_settle_interval_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must not be negative"):
            Settings(settle_interval_seconds=-1)


class TestGetSettings:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIPUP_API_URL", "http://localhost:8080")
        monkeypatch.setenv("TIPUP_BOT_USER_ID", "42")
        monkeypatch.setenv("TIPUP_API_KEY", "secret")
        monkeypatch.setenv("TIPUP_SETTLE_INTERVAL_SECONDS", "0.5")
        monkeypatch.setenv("TIPUP_REQUIRE_REPLY_ECHO", "true")

        settings = get_settings()

        assert settings.api_url == "http://localhost:8080"
        assert settings.bot_user_id == "42"
        assert settings.api_key == "secret"
        assert settings.settle_interval_seconds == 0.5
        assert settings.require_reply_echo is True

    def test_defaults_without_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in (
            "TIPUP_API_URL",
            "TIPUP_BOT_USER_ID",
            "TIPUP_API_KEY",
            "TIPUP_SETTLE_INTERVAL_SECONDS",
            "TIPUP_REPLY_SCAN_LIMIT",
            "TIPUP_REQUIRE_REPLY_ECHO",
            "TIPUP_HTTP_TIMEOUT_SECONDS",
        ):
            monkeypatch.delenv(name, raising=False)
        assert get_settings() == Settings()
