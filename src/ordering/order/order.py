"""Order aggregate (CQRS): the durable record of a placed order.

An order is created exactly once per successful placement from an
``OrderSnapshot``. Its lines, shipping address, payment method and prices are
frozen from then on; only the payment and delivery flags move, and each of
them moves once.
"""

from datetime import UTC, datetime
from decimal import Decimal

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, ValueObject

from ordering.cart.cart import PaymentMethod
from ordering.cart.pricing import CartPricing, to_decimal
from ordering.domain import ordering
from ordering.order.events import OrderDelivered, OrderPaid, OrderPlaced


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as captured at checkout.

    Later edits to the cart or the customer's profile never reach a placed order.
    """

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@ordering.value_object(part_of="Order")
class PaymentResult:
    """Opaque confirmation token returned by whatever took the payment."""

    payment_id = String(max_length=255)
    status = String(max_length=50)
    update_time = String(max_length=50)
    email_address = String(max_length=254)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    unit_price = String(required=True, max_length=20)  # Decimal text
    quantity = Integer(required=True, min_value=1)

    def price(self) -> Decimal:
        return Decimal(self.unit_price)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_result = ValueObject(PaymentResult)
    # Prices are kept as Decimal text so the recorded amounts stay exact
    items_price = String(required=True, max_length=20)
    shipping_price = String(required=True, max_length=20)
    tax_price = String(required=True, max_length=20)
    total_price = String(required=True, max_length=20)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    created_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, snapshot):
        """Create the order for a checked-out cart.

        Args:
            snapshot: An ``OrderSnapshot``. Prices are taken from its pricing,
                which was derived from the same lines.
        """
        now = datetime.now(UTC)
        pricing = snapshot.pricing

        order = cls(
            customer_id=snapshot.customer_id,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    image=line.image,
                    unit_price=str(to_decimal(line.unit_price)),
                    quantity=line.quantity,
                )
                for line in snapshot.lines
            ],
            shipping_address=ShippingAddress(**snapshot.shipping_address.to_dict()),
            payment_method=snapshot.payment_method,
            items_price=str(pricing.items_price),
            shipping_price=str(pricing.shipping_price),
            tax_price=str(pricing.tax_price),
            total_price=str(pricing.total_price),
            is_paid=False,
            is_delivered=False,
            created_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(snapshot.customer_id),
                item_count=len(snapshot.lines),
                payment_method=snapshot.payment_method,
                total_price=str(pricing.total_price),
                placed_at=now,
            )
        )
        return order

    def pricing(self) -> CartPricing:
        """The recorded prices as ``Decimal``."""
        return CartPricing(
            items_price=Decimal(self.items_price),
            shipping_price=Decimal(self.shipping_price),
            tax_price=Decimal(self.tax_price),
            total_price=Decimal(self.total_price),
        )

    # -------------------------------------------------------------------
    # Payment and delivery
    # -------------------------------------------------------------------
    def mark_paid(self, payment_result=None):
        """Record payment. A second call keeps the first timestamp and token."""
        if self.is_paid:
            return

        if isinstance(payment_result, dict):
            payment_result = PaymentResult(**payment_result)

        now = datetime.now(UTC)
        self.is_paid = True
        self.paid_at = now
        self.payment_result = payment_result

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_id=payment_result.payment_id if payment_result else None,
                payment_status=payment_result.status if payment_result else None,
                paid_at=now,
            )
        )

    def mark_delivered(self):
        """Record delivery. Only paid orders can be delivered; repeats are no-ops."""
        if self.is_delivered:
            return
        if not self.is_paid:
            raise ValidationError({"is_paid": ["Order must be paid before it can be marked delivered"]})

        now = datetime.now(UTC)
        self.is_delivered = True
        self.delivered_at = now

        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))
