"""Domain-specific exceptions.

Every failure surfaced by the client is terminal for the operation that
raised it; nothing here is retried internally.
"""

from __future__ import annotations

from typing import Optional


class TipupError(Exception):
    """Base class for all errors raised by the Tipup client."""


# Preconditions


class PreconditionError(TipupError):
    """Raised before any network effect when the client cannot proceed."""


class ClientNotReadyError(PreconditionError):
    """Raised when the chat connection has no authenticated bot identity."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation}(): client is not ready")
        self.operation = operation


class CredentialNotConfiguredError(PreconditionError):
    """Raised when a payment is requested without an API key."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation}(): api_key is not defined")
        self.operation = operation


# Setup


class SetupError(TipupError):
    """Raised when a required installation step has not been done."""


class CounterpartNotInstalledError(SetupError):
    """Raised when the Tipup bot cannot be resolved by the chat connection."""

    def __init__(self, operation: str, install_url: str) -> None:
        super().__init__(
            f"{operation}(): You need to add Tipup bot to your server: {install_url}"
        )
        self.operation = operation
        self.install_url = install_url


# Resolution


class NotFoundError(TipupError):
    """Raised when a chat resource cannot be resolved."""


class ChannelNotFoundError(NotFoundError):
    def __init__(self, operation: str, channel_id: str) -> None:
        super().__init__(
            f"{operation}(): Couldn't find a channel by channel_id {channel_id}"
        )
        self.operation = operation
        self.channel_id = channel_id


class ChannelNotTextBasedError(NotFoundError):
    def __init__(self, operation: str, channel_id: str) -> None:
        super().__init__(f"{operation}(): Channel {channel_id} is not a text channel")
        self.operation = operation
        self.channel_id = channel_id


# Handshake


class ProtocolTimeoutError(TipupError):
    """Raised when the counterpart did not answer within the settle interval."""


class CredentialExtractionError(ProtocolTimeoutError):
    """Raised when no reply carrying the API key was found.

    The probe message has already been removed, so the whole handshake can be
    run again.
    """

    def __init__(self, operation: str, channel_id: str) -> None:
        super().__init__(
            f"{operation}(): Couldn't read the API key from channel {channel_id}, "
            "try again"
        )
        self.operation = operation
        self.channel_id = channel_id


# Remote service


UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class RemoteServiceError(TipupError):
    """Raised when the Tipup API answers with a non-successful status."""

    def __init__(
        self,
        operation: str,
        message: Optional[str],
        *,
        status_code: Optional[int] = None,
    ) -> None:
        self.operation = operation
        self.message = message or UNKNOWN_ERROR_MESSAGE
        self.status_code = status_code
        super().__init__(f"{operation}(): {self.message}")


class TransportError(TipupError):
    """Raised when the Tipup API could not be reached at all."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}(): {message}")
        self.operation = operation
