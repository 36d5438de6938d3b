"""Request and response models for the storefront proxy routes.

Field names are camelCase on the wire to match the storefront widget.
Decimal amounts are serialized as strings.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ConvertRequest(_CamelModel):
    """Body of ``POST /convert``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    code: str | None = None
    cart_total: Decimal | None = None

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, value: Any) -> str | None:
        """Accept numeric codes; anything else non-string is treated as missing."""
        if value is None:
            return None
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, str)):
            return str(value)
        return None

    @field_validator("cart_total", mode="before")
    @classmethod
    def coerce_cart_total(cls, value: Any) -> Decimal | None:
        """Treat missing, blank or unparseable totals as "no cap"."""
        if value is None or isinstance(value, bool):
            return None
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        if not amount.is_finite():
            return None
        return amount


class LookupResponse(_CamelModel):
    """Body returned by ``GET /lookup``."""

    valid: bool
    balance: Decimal | None = None
    currency: str | None = None
    message: str | None = None


class ConvertResponse(_CamelModel):
    """Body returned by ``POST /convert``."""

    ok: bool
    discount_code: str | None = None
    discount_amount: Decimal | None = None
    message: str
