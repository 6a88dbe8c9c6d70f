"""Rate cache and CZK conversions.

``RateCache`` sits in front of ``CnbRatesClient``:

- A successful fetch is stored in the Django cache backend (Redis in
  production) as a single entry, stamped with the time it was stored.
- Reads within the freshness window (``CNB_RATES_CACHE_TTL``, 1 hour)
  are served from that entry without touching the network.
- On a miss, one refresh runs under a per-process lock; callers that
  queued behind it re-check the cache first.  Refreshes racing across
  processes are tolerated, the latest successful fetch wins.
- Failed fetches are never cached, so the next read retries.

``convert`` is pure and total: a missing table, a missing rate or a
non-positive rate all yield an "unavailable" conversion, never an error.
So does a rate so small that the converted amount cannot be rounded.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Union

import structlog
from django.apps import apps
from django.conf import settings
from django.core.cache import BaseCache, cache as default_cache
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from pydantic import ValidationError

from modules.exchange.client import CnbRatesClient
from modules.exchange.constants import RATES_CACHE_KEY, SUPPORTED_CURRENCIES
from modules.exchange.dtos import (
    ConversionResult,
    CurrencyConversion,
    FetchRatesResult,
    RateTable,
)
from shared.domain.vat import round2, sanitize_price, to_decimal

logger = structlog.get_logger(__name__)

RatesInput = Union[RateTable, Mapping[str, Any], None]


class RateCache:
    """Best-effort cached access to CNB rates.

    Collaborators are injected so tests can swap the client, the cache
    backend and the clock.
    """

    def __init__(
        self,
        client: Optional[CnbRatesClient] = None,
        cache: Optional[BaseCache] = None,
        ttl: Optional[int] = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._client = client or CnbRatesClient()
        self._cache = cache if cache is not None else default_cache
        ttl_seconds = ttl if ttl is not None else settings.CNB_RATES_CACHE_TTL
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._refresh_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def fetch_rates(self) -> FetchRatesResult:
        """Return fresh cached rates, refreshing from the CNB on a miss."""
        table = self._read_fresh()
        if table is not None:
            return FetchRatesResult(success=True, rates=table, from_cache=True)

        with self._refresh_lock:
            table = self._read_fresh()
            if table is not None:
                return FetchRatesResult(success=True, rates=table, from_cache=True)

            result = self._client.fetch_rates()
            if result.success and result.rates is not None:
                self._store(result.rates)
            return result

    def peek(self) -> Optional[RateTable]:
        """Fresh cached table, if any, without ever going to the network."""
        return self._read_fresh()

    def invalidate(self) -> None:
        """Drop the cached table; the next read goes to the network."""
        try:
            self._cache.delete(RATES_CACHE_KEY)
        except Exception:
            logger.warning("exchange.cache_unavailable", operation="delete")

    def _read_fresh(self) -> Optional[RateTable]:
        try:
            entry = self._cache.get(RATES_CACHE_KEY)
        except Exception:
            logger.warning("exchange.cache_unavailable", operation="get")
            return None
        if not isinstance(entry, dict):
            return None

        stored_at = parse_datetime(entry.get("stored_at") or "")
        if stored_at is None or self._clock() - stored_at >= self._ttl:
            logger.info("exchange.cache_expired")
            return None

        try:
            return RateTable.model_validate(entry["table"])
        except (KeyError, ValidationError):
            logger.warning("exchange.cache_entry_corrupt")
            return None

    def _store(self, table: RateTable) -> None:
        entry = {
            "stored_at": self._clock().isoformat(),
            "table": table.model_dump(mode="json"),
        }
        try:
            self._cache.set(
                RATES_CACHE_KEY, entry, timeout=int(self._ttl.total_seconds())
            )
        except Exception:
            logger.warning("exchange.cache_unavailable", operation="set")
            return
        logger.info("exchange.cache_refreshed", fetched_at=table.fetched_at.isoformat())

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def convert(amount_czk: Any, rates: RatesInput) -> ConversionResult:
        """Convert a CZK amount into every supported currency.

        ``foreign = round2(czk / rate)`` where a rate is present and
        positive; otherwise that currency's amount is ``None``.
        """
        amount = sanitize_price(amount_czk)
        try:
            original = round2(amount)
        except ArithmeticError:
            amount = original = Decimal("0.00")
        conversions = []

        for code in SUPPORTED_CURRENCIES:
            rate = _lookup_rate(rates, code)
            converted = _divide(amount, rate) if rate is not None and rate > 0 else None
            if converted is not None:
                conversions.append(
                    CurrencyConversion(code=code, amount=converted, rate=rate)
                )
            else:
                conversions.append(CurrencyConversion(code=code))

        return ConversionResult(
            original_czk=original,
            any_available=any(c.available for c in conversions),
            conversions=conversions,
        )

    def fetch_and_convert(self, amount_czk: Any) -> ConversionResult:
        """Fetch (or reuse) rates and convert ``amount_czk`` in one call."""
        return self.convert(amount_czk, self.fetch_rates().rates)


def _lookup_rate(rates: RatesInput, code: str) -> Optional[Decimal]:
    if rates is None:
        return None
    raw = rates.get(code)
    if raw is None:
        return None
    value = to_decimal(raw)
    if value is None or not value.is_finite():
        return None
    return value


def _divide(amount: Decimal, rate: Decimal) -> Optional[Decimal]:
    try:
        return round2(amount / rate)
    except ArithmeticError:
        logger.warning("exchange.conversion_out_of_range", rate=str(rate))
        return None


def get_rate_cache() -> RateCache:
    """Process-wide ``RateCache`` built by ``ExchangeConfig.ready``."""
    return apps.get_app_config("exchange").rate_cache
