#app/schemas/quotations.py
from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def coerce_number(value: Any, default: Optional[float]) -> Optional[float]:
    """
    Lenient numeric coercion: numbers and numeric strings pass through,
    anything else (missing, blank, bool, garbage, NaN/inf) falls back to default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(num) or math.isinf(num):
        return default
    return num


class QuotationItem(BaseModel):
    """One priced line of a quotation. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    serviceName: str = Field(..., min_length=1)
    description: Optional[str] = None
    quantity: float = 1
    unitPrice: float = 0
    totalPrice: Optional[float] = None

    @field_validator("serviceName")
    @classmethod
    def _service_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("serviceName must not be blank")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v):
        return coerce_number(v, 1)

    @field_validator("unitPrice", mode="before")
    @classmethod
    def _unit_price(cls, v):
        return coerce_number(v, 0)

    @field_validator("totalPrice", mode="before")
    @classmethod
    def _total_price(cls, v):
        return coerce_number(v, None)

    @model_validator(mode="after")
    def _default_total(self):
        if self.totalPrice is None:
            self.totalPrice = self.quantity * self.unitPrice
        return self


class HourlyRate(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Optional[str] = None
    rate: Optional[float] = None

    @field_validator("rate", mode="before")
    @classmethod
    def _rate(cls, v):
        return coerce_number(v, None)
