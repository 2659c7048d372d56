"""Cart pricing rules.

Totals are derived from the line items on every read and never stored. All
arithmetic runs on ``Decimal`` built from the string form of each price so
``items_price`` is exactly the sum of ``unit_price * quantity``.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

FREE_SHIPPING_THRESHOLD = Decimal("100.00")
FLAT_SHIPPING_FEE = Decimal("15.99")
TAX_RATE = Decimal("0.08")

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CartPricing:
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal

    def to_dict(self) -> dict:
        return {
            "items_price": float(self.items_price),
            "shipping_price": float(self.shipping_price),
            "tax_price": float(self.tax_price),
            "total_price": float(self.total_price),
        }


def to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def shipping_for(items_price: Decimal) -> Decimal:
    """Free shipping strictly above the threshold, flat fee otherwise."""
    return Decimal("0.00") if items_price > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def tax_for(items_price: Decimal) -> Decimal:
    # Half-up, not banker's rounding: 0.125 -> 0.13
    return (items_price * TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_pricing(lines: Iterable) -> CartPricing:
    """Price a collection of lines.

    Each line needs ``unit_price`` and ``quantity`` attributes (cart items,
    order items) or keys (plain dicts from a snapshot).
    """
    items_price = Decimal("0")
    for line in lines:
        if isinstance(line, dict):
            unit_price, quantity = line["unit_price"], line["quantity"]
        else:
            unit_price, quantity = line.unit_price, line.quantity
        items_price += to_decimal(unit_price) * int(quantity)

    shipping_price = shipping_for(items_price)
    tax_price = tax_for(items_price)
    return CartPricing(
        items_price=items_price,
        shipping_price=shipping_price,
        tax_price=tax_price,
        total_price=items_price + shipping_price + tax_price,
    )
