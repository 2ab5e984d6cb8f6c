"""Money arithmetic for cart and order pricing.

Prices arrive as floats (Protean ``Float`` fields, JSON payloads). All sums are
done in ``Decimal`` and rounded to centavos once, so a subtotal always equals
the sum of its line totals exactly.
"""

import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a float/str/int amount to a Decimal rounded to centavos."""
    if value is None:
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError({"amount": [f"Invalid amount: {value!r}"]}) from exc


def to_exact_money(value, field_name="amount") -> Decimal:
    """Convert an amount that must already be whole centavos.

    Rejects fractions of a centavo instead of rounding them away.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError({field_name: [f"Invalid amount: {value!r}"]}) from exc
    if not amount.is_finite() or amount != amount.quantize(CENT):
        raise ValidationError({field_name: [f"{value} is not a whole number of centavos"]})
    return amount.quantize(CENT)


def as_float(amount: Decimal) -> float:
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def parse_add_ons(raw) -> list[dict]:
    """Parse and validate add-ons given as a JSON string or a list.

    Each add-on must be ``{"name": str, "price": number >= 0}``.
    """
    if raw is None or raw == "":
        return []

    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidationError({"add_ons": ["Add-ons must be a JSON list"]}) from exc
    else:
        data = raw

    if not isinstance(data, list):
        raise ValidationError({"add_ons": ["Add-ons must be a list"]})

    add_ons = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ValidationError({"add_ons": ["Each add-on needs a name"]})
        price = to_money(entry.get("price", 0))
        if price < 0:
            raise ValidationError({"add_ons": [f"Add-on {entry['name']} has a negative price"]})
        add_ons.append({"name": str(entry["name"]), "price": as_float(price)})
    return add_ons


def line_total(unit_price, add_ons, quantity) -> Decimal:
    """(unit price + sum of add-on prices) x quantity."""
    per_unit = to_money(unit_price) + sum((to_money(a.get("price")) for a in add_ons), Decimal("0.00"))
    return (per_unit * int(quantity)).quantize(CENT, rounding=ROUND_HALF_UP)
