"""Exchange-rate exceptions.

These never leave ``modules.exchange``: the client converts them into a
failed ``FetchRatesResult`` so callers only ever see an "unavailable"
conversion, never an error.
"""

from __future__ import annotations


class RateFetchError(Exception):
    """The rate source could not be reached or answered with an error."""


class RateParseError(RateFetchError):
    """The rate source answered, but the payload holds no usable rates."""
