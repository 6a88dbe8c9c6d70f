"""Exchange-rate constants.

The CNB publishes rates as "CZK per N units of foreign currency"; the
application only displays conversions for the currencies listed here.
"""

SUPPORTED_CURRENCIES: tuple[str, ...] = ("EUR", "USD", "PLN")

# The daily file starts with "<date> #<sequence>" and a column header.
HEADER_LINES = 2

FIELD_SEPARATOR = "|"

RATES_CACHE_KEY = "exchange:cnb_rates"
