from __future__ import annotations

import logging
from typing import Any, Optional, Type
from types import TracebackType

import httpx
from pydantic import ValidationError

from ...application.dtos import PaymentRequestDTO, PaymentResultDTO
from ...domain.errors import RemoteServiceError, TransportError
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)

REQUEST_PAYMENT_PATH = "/request-payment"


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        error = body.get("error")
        if error not in (None, ""):
            return str(error)
    return None


class TipupApiClient:
    """Asynchronous client for talking to the Tipup HTTP API.

    The API key is passed per call and only ever placed in the
    ``Authorization`` header.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = AsyncHttpClient(base_url, timeout=timeout, transport=transport)

    async def request_payment(
        self, dto: PaymentRequestDTO, *, api_key: str
    ) -> PaymentResultDTO:
        """POST the payment request and map the response.

        The body is read whatever the status code, so the service's ``error``
        field can be surfaced on failure.
        """
        try:
            resp = await self._http.post(
                REQUEST_PAYMENT_PATH,
                json=dto.to_payload(),
                headers={"Authorization": f"Bearer {api_key}"},
                raise_for_status=False,
            )
        except httpx.TransportError as e:
            raise TransportError("request_payment", str(e) or type(e).__name__) from e

        body = _json_or_none(resp)
        if not resp.is_success:
            logger.info(
                "Tipup API rejected payment request for user %s with status %s",
                dto.user_id,
                resp.status_code,
            )
            raise RemoteServiceError(
                "request_payment", _error_message(body), status_code=resp.status_code
            )

        try:
            return PaymentResultDTO.model_validate(body)
        except ValidationError as e:
            raise RemoteServiceError(
                "request_payment",
                "Malformed payment response",
                status_code=resp.status_code,
            ) from e

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TipupApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
