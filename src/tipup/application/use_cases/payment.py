"""Use case for submitting payment requests to the Tipup API."""

from __future__ import annotations

import logging
from typing import Optional, Union

from ...domain.errors import ClientNotReadyError, CredentialNotConfiguredError
from ...domain.shared import ChatConnectionProtocol, TipupApiClientProtocol
from ...middleware.timing import log_timing
from ..dtos import (
    GiftPaymentIntent,
    PaymentRequestDTO,
    PaymentResultDTO,
    TokenPaymentIntent,
)

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for requesting token or gift payments on behalf of the bot.

    Each call is one charge attempt. Nothing is retried, since the API offers
    no deduplication key.
    """

    def __init__(
        self,
        connection: ChatConnectionProtocol,
        api_client: TipupApiClientProtocol,
        api_key: Optional[str] = None,
    ):
        self.connection = connection
        self.api_client = api_client
        self._api_key = api_key

    @log_timing("request_payment")
    async def request_payment(
        self, intent: Union[TokenPaymentIntent, GiftPaymentIntent]
    ) -> PaymentResultDTO:
        bot = self.connection.user
        if bot is None:
            raise ClientNotReadyError("request_payment")
        if not self._api_key:
            raise CredentialNotConfiguredError("request_payment")

        dto = PaymentRequestDTO.from_intent(bot.id, intent)
        result = await self.api_client.request_payment(dto, api_key=self._api_key)
        logger.info(
            "Payment request %s for user %s finished with status %s",
            result.request_id,
            dto.user_id,
            result.status,
        )
        return result
