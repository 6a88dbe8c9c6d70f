"""Czech National Bank daily rates client.

The CNB publishes a pipe-delimited text file once per business day
(around 14:30 CET)::

    17.10.2025 #201
    země|měna|množství|kód|kurz
    EMU|euro|1|EUR|24,725
    Polsko|zlotý|1|PLN|5,812
    ...

``množství`` is the number of foreign units the ``kurz`` (CZK, comma as
decimal separator) refers to, e.g. ``100`` for HUF.  Rates are
normalised to "CZK per one foreign unit" on parse.

``fetch_rates`` never raises: every failure (HTTP status, timeout,
connection error, unusable payload) is returned as a failed
``FetchRatesResult`` carrying a human-readable cause.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

import requests
import structlog
from django.conf import settings
from django.utils import timezone

from modules.exchange.constants import (
    FIELD_SEPARATOR,
    HEADER_LINES,
    SUPPORTED_CURRENCIES,
)
from modules.exchange.dtos import FetchRatesResult, RateTable
from modules.exchange.exceptions import RateFetchError, RateParseError

logger = structlog.get_logger(__name__)


def parse_rates_text(text: str) -> Dict[str, Optional[Decimal]]:
    """Parse the CNB daily file into ``{code: CZK per unit}``.

    Supported currencies missing from the file map to ``None``.  Rows
    that are too short, quote an unsupported currency, or carry a
    non-numeric / zero amount or a non-numeric rate are skipped.
    """
    rates: Dict[str, Optional[Decimal]] = {code: None for code in SUPPORTED_CURRENCIES}

    lines = text.strip().splitlines()
    for line in lines[HEADER_LINES:]:
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < 5:
            continue

        code = parts[3].strip()
        if code not in rates:
            continue

        try:
            amount = int(parts[2].strip())
            rate = Decimal(parts[4].strip().replace(",", "."))
        except (ValueError, InvalidOperation):
            continue

        if amount == 0 or not rate.is_finite():
            continue

        rates[code] = rate / amount

    return rates


class CnbRatesClient:
    """HTTP client for the CNB daily exchange-rate file."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._url = url or settings.CNB_RATES_URL
        self._timeout = timeout if timeout is not None else settings.CNB_RATES_TIMEOUT

    @property
    def url(self) -> str:
        return self._url

    def fetch_rates(self) -> FetchRatesResult:
        """Download and parse today's rates (one request, bounded by timeout)."""
        log = logger.bind(url=self._url, timeout=self._timeout)
        log.info("exchange.fetch_started")

        try:
            text = self._download()
            rates = parse_rates_text(text)
            if all(value is None for value in rates.values()):
                raise RateParseError("payload contains no supported currency rates")
        except RateParseError as exc:
            log.warning("exchange.parse_failed", error=str(exc))
            return FetchRatesResult.failure(f"Failed to parse rates: {exc}")
        except RateFetchError as exc:
            log.warning("exchange.fetch_failed", error=str(exc))
            return FetchRatesResult.failure(str(exc))
        except Exception as exc:
            log.exception("exchange.fetch_crashed")
            return FetchRatesResult.failure(f"Failed to fetch rates: {exc}")

        table = RateTable(rates=rates, fetched_at=timezone.now())
        log.info(
            "exchange.fetch_succeeded",
            currencies=[code for code, value in rates.items() if value is not None],
        )
        return FetchRatesResult(success=True, rates=table)

    def _download(self) -> str:
        try:
            response = requests.get(self._url, timeout=self._timeout)
        except requests.exceptions.Timeout as exc:
            raise RateFetchError(
                f"Failed to fetch rates: timed out after {self._timeout}s"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise RateFetchError(f"Failed to fetch rates: {exc}") from exc

        if not response.ok:
            raise RateFetchError(f"CNB API returned status {response.status_code}")

        if not response.encoding:
            response.encoding = "utf-8"
        return response.text
