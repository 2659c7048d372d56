"""Immutable order request handed from checkout to order persistence.

Built once, at placement time, from the cart. Nothing downstream can change the
lines, address, payment method or prices it carries.
"""

from dataclasses import dataclass, field

from ordering.cart.pricing import CartPricing, compute_pricing
from shared.stock import StockLine


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    name: str
    image: str | None
    unit_price: float
    quantity: int


@dataclass(frozen=True)
class AddressSnapshot:
    address: str
    city: str
    postal_code: str
    country: str

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": self.country,
        }


@dataclass(frozen=True)
class OrderSnapshot:
    customer_id: str
    lines: tuple[OrderLine, ...]
    shipping_address: AddressSnapshot
    payment_method: str
    pricing: CartPricing = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "pricing", compute_pricing(self.lines))

    @classmethod
    def from_cart(cls, cart, customer_id):
        address = cart.shipping_address
        return cls(
            customer_id=str(customer_id),
            lines=tuple(
                OrderLine(
                    product_id=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for item in cart.items
            ),
            shipping_address=AddressSnapshot(
                address=address.address,
                city=address.city,
                postal_code=address.postal_code,
                country=address.country,
            ),
            payment_method=cart.payment_method,
        )

    def stock_lines(self) -> list[StockLine]:
        return [StockLine(product_id=line.product_id, quantity=line.quantity) for line in self.lines]
