"""Data Transfer Objects for the payment flow."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    model_validator,
)

PAID = "PAID"
DECLINED = "DECLINED"


class TokenPaymentIntent(BaseModel):
    """Charge ``tokens`` from the recipient."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["tokens"] = "tokens"
    user_id: str = Field(..., min_length=1, description="Recipient user id")
    tokens: StrictInt = Field(..., gt=0, description="Token amount to charge")


class GiftPaymentIntent(BaseModel):
    """Ask the recipient for a named gift."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["gift"] = "gift"
    user_id: str = Field(..., min_length=1, description="Recipient user id")
    gift: str = Field(..., min_length=1, description="Gift slug from the catalog")


PaymentIntent = Annotated[
    Union[TokenPaymentIntent, GiftPaymentIntent], Field(discriminator="kind")
]

_payment_intent_adapter: TypeAdapter[PaymentIntent] = TypeAdapter(PaymentIntent)


def build_payment_intent(
    user_id: str,
    *,
    tokens: Optional[int] = None,
    gift: Optional[str] = None,
) -> Union[TokenPaymentIntent, GiftPaymentIntent]:
    """Build the intent variant matching whichever of tokens/gift is given."""
    if (tokens is None) == (gift is None):
        raise ValueError("Exactly one of tokens or gift must be provided")
    if tokens is not None:
        return TokenPaymentIntent(user_id=user_id, tokens=tokens)
    return GiftPaymentIntent(user_id=user_id, gift=gift)


def parse_payment_intent(data: Dict[str, Any]) -> Union[TokenPaymentIntent, GiftPaymentIntent]:
    """Validate a tagged mapping such as ``{"kind": "gift", ...}`` into an intent."""
    return _payment_intent_adapter.validate_python(data)


class PaymentRequestDTO(BaseModel):
    """Wire body of ``POST /request-payment``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bot_id: str = Field(..., alias="botId")
    user_id: str = Field(..., alias="userId")
    tokens: Optional[int] = None
    gift: Optional[str] = None

    @model_validator(mode="after")
    def check_single_amount_kind(self) -> "PaymentRequestDTO":
        if (self.tokens is None) == (self.gift is None):
            raise ValueError("Exactly one of tokens or gift must be set")
        return self

    @classmethod
    def from_intent(
        cls,
        bot_id: str,
        intent: Union[TokenPaymentIntent, GiftPaymentIntent],
    ) -> "PaymentRequestDTO":
        if isinstance(intent, TokenPaymentIntent):
            return cls(bot_id=bot_id, user_id=intent.user_id, tokens=intent.tokens)
        return cls(bot_id=bot_id, user_id=intent.user_id, gift=intent.gift)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with camelCase keys; the inactive amount key is omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PaymentResultDTO(BaseModel):
    """Payment decision returned by the Tipup API.

    Accepted as returned: ``status`` is not checked against the known values
    and unknown fields are kept.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    request_id: StrictInt = Field(..., alias="requestId")
    status: str

    @property
    def is_paid(self) -> bool:
        return self.status == PAID

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
