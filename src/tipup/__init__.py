"""Tipup client: API key handshake over Discord and payment requests."""

from .application.dtos import (
    DECLINED,
    PAID,
    GiftPaymentIntent,
    PaymentIntent,
    PaymentResultDTO,
    TokenPaymentIntent,
    build_payment_intent,
)
from .client import TipupClient, create_tipup_client
from .domain.errors import (
    ChannelNotFoundError,
    ChannelNotTextBasedError,
    ClientNotReadyError,
    CounterpartNotInstalledError,
    CredentialExtractionError,
    CredentialNotConfiguredError,
    NotFoundError,
    PreconditionError,
    ProtocolTimeoutError,
    RemoteServiceError,
    SetupError,
    TipupError,
    TransportError,
)
from .env import Settings, get_settings

__all__ = [
    "DECLINED",
    "PAID",
    "ChannelNotFoundError",
    "ChannelNotTextBasedError",
    "ClientNotReadyError",
    "CounterpartNotInstalledError",
    "CredentialExtractionError",
    "CredentialNotConfiguredError",
    "GiftPaymentIntent",
    "NotFoundError",
    "PaymentIntent",
    "PaymentResultDTO",
    "PreconditionError",
    "ProtocolTimeoutError",
    "RemoteServiceError",
    "Settings",
    "SetupError",
    "TipupClient",
    "TipupError",
    "TokenPaymentIntent",
    "TransportError",
    "build_payment_intent",
    "create_tipup_client",
    "get_settings",
]
