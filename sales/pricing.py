# sales/pricing.py
"""
Money arithmetic shared by quotations and invoices.

Service lines are plain dicts (stored as JSON):

    {"name": "Backend", "description": "", "quantity": "1", "unit_price": "57.44"}

Amounts are Decimal, rounded to 2 places half-up at each step.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value, field: str) -> Decimal:
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(
            _("%(field)s must be a number, got %(value)r.") % {"field": field, "value": value}
        ) from None
    if not result.is_finite():
        raise ValidationError(_("%(field)s must be a finite number.") % {"field": field})
    return result


def _percent(value, field: str) -> Decimal:
    result = _to_decimal(value if value not in (None, "") else 0, field)
    if result < 0 or result > HUNDRED:
        raise ValidationError(_("%(field)s must be between 0 and 100.") % {"field": field})
    return result


@dataclass(frozen=True)
class Totals:
    lines: List[dict]
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def normalize_lines(lines: Iterable[Mapping[str, Any]]) -> List[dict]:
    """
    Validate service lines and return JSON-safe copies with an ``amount``.
    Raises ValidationError for an empty list, a missing name or a negative
    quantity/price.
    """
    normalized = []
    for index, line in enumerate(lines, start=1):
        name = str(line.get("name") or "").strip()
        if not name:
            raise ValidationError(_("Line %(n)d: a service name is required.") % {"n": index})

        quantity = _to_decimal(line.get("quantity", 1), "Quantity")
        unit_price = _to_decimal(line.get("unit_price", 0), "Unit price")
        if quantity < 0 or unit_price < 0:
            raise ValidationError(
                _("Line %(n)d: quantity and unit price cannot be negative.") % {"n": index}
            )

        normalized.append(
            {
                "name": name,
                "description": str(line.get("description") or "").strip(),
                "quantity": str(quantity),
                "unit_price": str(money(unit_price)),
                "amount": str(money(quantity * unit_price)),
            }
        )

    if not normalized:
        raise ValidationError(_("At least one service line is required."))
    return normalized


def compute_totals(lines, discount_percent=0, tax_percent=0) -> Totals:
    """
    subtotal = sum(quantity * unit_price)
    discount = subtotal * discount%
    tax      = (subtotal - discount) * tax%
    total    = subtotal - discount + tax
    """
    normalized = normalize_lines(lines)
    discount_rate = _percent(discount_percent, "Discount")
    tax_rate = _percent(tax_percent, "Tax")

    subtotal = money(sum((Decimal(line["amount"]) for line in normalized), ZERO))
    discount = money(subtotal * discount_rate / HUNDRED)
    taxable = subtotal - discount
    tax = money(taxable * tax_rate / HUNDRED)

    return Totals(
        lines=normalized,
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        total=money(taxable + tax),
    )
