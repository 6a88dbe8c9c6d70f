"""VAT arithmetic for CZK amounts.

Pure functions, no Django imports: the same rules back order creation
and any price preview the API exposes.

Rounding contract: every intermediate value (subtotal, VAT amount,
total) is rounded to 2 decimal places, half-up, *before* it feeds the
next step.  Rounding once at the end produces different cents for
fractional prices, e.g. ``333.33 x 3`` must give a VAT of ``210.00``,
not ``209.9979`` carried into the total.

Inputs are sanitized instead of validated: non-finite or negative
prices and quantities collapse to zero, and so does any result too large
to round to cents (see ``MAX_PRECISION``).  These helpers never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

Number = Union[Decimal, int, float, str]

DEFAULT_VAT_RATE = Decimal("0.21")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Digits allowed when rounding; larger magnitudes are not prices.
MAX_PRECISION = 1000


@dataclass(frozen=True)
class VatBreakdown:
    """Price breakdown of an order line, all amounts in CZK."""

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    tax_rate: Decimal


def round2(value: Decimal) -> Decimal:
    """Round to the currency minor unit (2 places, half-up).

    Precision grows with the magnitude so large amounts keep their
    cents; beyond ``MAX_PRECISION`` digits ``InvalidOperation`` is raised.
    """
    with localcontext() as ctx:
        ctx.prec = min(max(ctx.prec, value.adjusted() + 3), MAX_PRECISION)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Number) -> Decimal | None:
    """Best-effort conversion to ``Decimal``; ``None`` when not numeric."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    try:
        # str() keeps floats at their shortest repr (0.1 -> "0.1")
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None


def sanitize_price(price: Number) -> Decimal:
    """Clamp non-finite or negative prices to zero."""
    value = to_decimal(price)
    if value is None or not value.is_finite() or value < 0:
        return Decimal(0)
    return value


def sanitize_quantity(quantity: Number) -> int:
    """Clamp non-finite or negative quantities to zero, round to nearest unit."""
    value = to_decimal(quantity)
    if value is None or not value.is_finite() or value < 0:
        return 0
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _rate(tax_rate: Number | None) -> Decimal:
    if tax_rate is None:
        return DEFAULT_VAT_RATE
    value = to_decimal(tax_rate)
    if value is None or not value.is_finite():
        return DEFAULT_VAT_RATE
    return value


def compute_breakdown(
    unit_price: Number,
    quantity: Number,
    tax_rate: Number | None = None,
) -> VatBreakdown:
    """Compute subtotal, VAT and total for ``quantity`` units.

    >>> compute_breakdown(1990, 2, "0.21")
    VatBreakdown(subtotal=Decimal('3980.00'), tax_amount=Decimal('835.80'), total=Decimal('4815.80'), tax_rate=Decimal('0.21'))
    """
    price = sanitize_price(unit_price)
    units = sanitize_quantity(quantity)
    rate = _rate(tax_rate)

    try:
        subtotal = round2(price * units)
        tax_amount = round2(subtotal * rate)
        total = round2(subtotal + tax_amount)
    except ArithmeticError:
        subtotal = tax_amount = total = ZERO

    return VatBreakdown(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=total,
        tax_rate=rate,
    )


def vat_amount(price_before_tax: Number, tax_rate: Number | None = None) -> Decimal:
    """VAT due on a tax-exclusive price."""
    try:
        return round2(sanitize_price(price_before_tax) * _rate(tax_rate))
    except ArithmeticError:
        return ZERO


def total_with_vat(price_before_tax: Number, tax_rate: Number | None = None) -> Decimal:
    """Tax-inclusive price: sanitized price plus its rounded VAT."""
    price = sanitize_price(price_before_tax)
    try:
        return round2(price + vat_amount(price, tax_rate))
    except ArithmeticError:
        return ZERO


def price_before_tax(price_with_tax: Number, tax_rate: Number | None = None) -> Decimal:
    """Inverse of :func:`total_with_vat`, exact to one rounding unit."""
    price = sanitize_price(price_with_tax)
    divisor = 1 + _rate(tax_rate)
    if divisor == 0:
        return ZERO
    try:
        return round2(price / divisor)
    except ArithmeticError:
        return ZERO
