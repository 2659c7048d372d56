"""Domain events for the Order aggregate.

Events are immutable facts recorded alongside the order.
"""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was recorded from a checked-out cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    item_count = Integer(required=True)
    payment_method = String(required=True)
    total_price = String(required=True, max_length=20)  # Decimal text
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for an order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = String()
    payment_status = String()
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """An order was handed over to the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
