"""Shopping Cart aggregate (CQRS).

The cart holds one line per product. Adding a product that is already in the
cart replaces that line wholesale (the last write wins), keeping its position in
the list. Totals are never stored: ``recompute_totals()`` derives them from the
lines on every call.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved
from ordering.cart.pricing import CartPricing, compute_pricing
from ordering.domain import ordering
from shared.errors import InvalidQuantity


class PaymentMethod(Enum):
    CREDIT_CARD = "CreditCard"
    PAYPAL = "PayPal"
    STRIPE = "Stripe"

    @classmethod
    def parse(cls, value):
        """Resolve a member from its value or a storefront alias, ignoring case.

        ``creditCard``, ``paypal`` and ``stripe`` are the identifiers the web
        client submits; ``CreditCard``, ``PayPal`` and ``Stripe`` are ours.
        """
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace("_", "")
        for member in cls:
            if key in (member.value.lower(), member.name.lower().replace("_", "")):
                return member
        raise ValidationError(
            {"payment_method": [f"Unsupported payment method {value!r}. Choose CreditCard, PayPal or Stripe"]}
        )


@ordering.value_object(part_of="ShoppingCart")
class CartShippingAddress:
    """Delivery address as captured on the cart.

    Completeness is checked by the checkout flow, not here, so a half-filled
    form restored from the browser survives a reload.
    """

    address = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    unit_price = Float(required=True, min_value=0.0)
    available_stock = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)  # For guest cart identification
    items = HasMany(CartItem)
    shipping_address = ValueObject(CartShippingAddress)
    payment_method = String(choices=PaymentMethod)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    @invariant.post
    def quantities_must_fit_available_stock(self):
        for item in self.items:
            if item.quantity > item.available_stock:
                raise ValidationError(
                    {"quantity": [f"Only {item.available_stock} of {item.name} available"]}
                )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def add_or_replace_item(self, product_id, name, image, unit_price, available_stock, quantity):
        """Put a product line in the cart, replacing any line for the same product."""
        if quantity is None or quantity < 1 or quantity > available_stock:
            raise InvalidQuantity(quantity, available_stock)

        existing = self.find_item(product_id)
        if existing:
            with atomic_change(self):
                existing.name = name
                existing.image = image
                existing.unit_price = unit_price
                existing.available_stock = available_stock
                existing.quantity = quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    name=name,
                    image=image,
                    unit_price=unit_price,
                    available_stock=available_stock,
                    quantity=quantity,
                )
            )

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                unit_price=unit_price,
                quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove the line for ``product_id``. Removing an absent product does nothing."""
        item = self.find_item(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        """Drop every line. The shipping address and payment method stay."""
        removed = list(self.items)
        for item in removed:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=len(removed)))

    # -------------------------------------------------------------------
    # Checkout details
    # -------------------------------------------------------------------
    def set_shipping_address(self, address):
        if isinstance(address, dict):
            address = CartShippingAddress(**address)
        self.shipping_address = address
        self.updated_at = datetime.now(UTC)

    def set_payment_method(self, method):
        self.payment_method = PaymentMethod.parse(method).value
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def recompute_totals(self) -> CartPricing:
        return compute_pricing(self.items)
