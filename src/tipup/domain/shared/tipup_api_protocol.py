"""Protocol interface for Tipup API client implementations."""

from __future__ import annotations

from typing import Optional, Protocol, Type, TYPE_CHECKING
from types import TracebackType

if TYPE_CHECKING:
    from ...application.dtos import PaymentRequestDTO, PaymentResultDTO


class TipupApiClientProtocol(Protocol):
    """Contract the payment service relies on to reach the Tipup API."""

    async def request_payment(
        self, dto: "PaymentRequestDTO", *, api_key: str
    ) -> "PaymentResultDTO":
        """Submit a payment request signed with ``api_key``.

        Raises:
            RemoteServiceError: The API answered with a non-2xx status.
            TransportError: The API could not be reached.
        """
        ...

    async def aclose(self) -> None: ...

    async def __aenter__(self: "TipupApiClientProtocol") -> "TipupApiClientProtocol": ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None: ...
