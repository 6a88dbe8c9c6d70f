"""Exchange-rate DTOs.

Immutable pydantic models exchanged between the CNB client, the rate
cache and the order summary.  Rates follow the CNB convention: the value
for ``EUR`` is how many CZK one euro costs, so ``czk / rate`` yields the
foreign amount.

- ``RateTable``: parsed rates of one successful fetch.
- ``FetchRatesResult``: tagged outcome of a fetch (rates or error text).
- ``CurrencyConversion``: one converted amount, ``None`` when unavailable.
- ``ConversionResult``: conversions for every supported currency.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from modules.exchange.constants import SUPPORTED_CURRENCIES


class RateTable(BaseModel):
    """CZK per one unit of each supported currency (``None`` = not quoted)."""

    model_config = ConfigDict(frozen=True)

    rates: Dict[str, Optional[Decimal]]
    fetched_at: datetime

    @model_validator(mode="after")
    def only_supported_currencies(self):
        unknown = set(self.rates) - set(SUPPORTED_CURRENCIES)
        if unknown:
            raise ValueError(f"Unsupported currencies: {sorted(unknown)}")
        return self

    def get(self, code: str) -> Optional[Decimal]:
        return self.rates.get(code)

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.rates.values())


class FetchRatesResult(BaseModel):
    """Outcome of one rate acquisition attempt."""

    model_config = ConfigDict(frozen=True)

    success: bool
    rates: Optional[RateTable] = None
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def fetched_at(self) -> Optional[datetime]:
        return self.rates.fetched_at if self.rates else None

    @classmethod
    def failure(cls, error: str) -> FetchRatesResult:
        return cls(success=False, rates=None, error=error)


class CurrencyConversion(BaseModel):
    """A CZK amount expressed in one foreign currency.

    ``amount`` is ``None`` when no usable rate exists; that is distinct
    from a converted amount of zero.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    amount: Optional[Decimal] = None
    rate: Optional[Decimal] = None

    @property
    def available(self) -> bool:
        return self.amount is not None


class ConversionResult(BaseModel):
    """Conversions of a CZK amount into every supported currency."""

    model_config = ConfigDict(frozen=True)

    original_czk: Decimal
    any_available: bool
    conversions: List[CurrencyConversion]

    def for_currency(self, code: str) -> Optional[CurrencyConversion]:
        return next((c for c in self.conversions if c.code == code), None)
