from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# teto do valor: acima disso o quantize de 2 casas estoura a precisão do Decimal
MAX_AMOUNT = Decimal("10000000000000")

Amount = Optional[Decimal]


def _blank_is_missing(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ChargeIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    amount: Amount = Field(default=None, gt=0, lt=MAX_AMOUNT)
    txid: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount_is_missing(cls, value: Any) -> Any:
        return _blank_is_missing(value)


class PayoutIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    pix_key: Optional[str] = None
    amount: Amount = Field(default=None, gt=0, lt=MAX_AMOUNT)

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount_is_missing(cls, value: Any) -> Any:
        return _blank_is_missing(value)


class WebhookIn(BaseModel):
    webhook_url: Optional[str] = None


def format_amount(value: Decimal) -> str:
    """Valor no formato da Efí: string com 2 casas ("10.50")."""
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
