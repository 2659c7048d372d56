"""Configurable in-memory order store for development and testing.

It can be told to fail the next writes, either as a storage outage
(``PersistenceFailure``) or as a stock shortage (``StockExhausted``), so the
checkout's failure paths can be exercised without breaking a real database.
"""

from protean.exceptions import ObjectNotFoundError

from ordering.order.order import Order
from ordering.order.store.port import OrderStore
from shared.errors import PersistenceFailure, StockExhausted, StockShortage


class FakeOrderStore(OrderStore):
    """In-memory order store."""

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.failure: str | None = None
        self.calls: list[dict] = []

    def configure(self, failure: str | None = None) -> None:
        """Make ``create_order`` fail with ``"persistence"`` or ``"stock"``; ``None`` to succeed."""
        self.failure = failure

    def create_order(self, snapshot):
        self.calls.append({"method": "create_order", "snapshot": snapshot})

        if self.failure == "persistence":
            raise PersistenceFailure("Simulated order write failure")
        if self.failure == "stock":
            raise StockExhausted(
                [StockShortage(line.product_id, line.quantity, 0) for line in snapshot.lines]
            )

        order = Order.place(snapshot)
        self.orders[str(order.id)] = order
        return order

    def get_order(self, order_id):
        try:
            return self.orders[str(order_id)]
        except KeyError:
            raise ObjectNotFoundError({"_entity": f"Order with id {order_id} does not exist"}) from None

    def list_orders_for_user(self, customer_id):
        orders = [o for o in self.orders.values() if str(o.customer_id) == str(customer_id)]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def list_orders(self):
        return sorted(self.orders.values(), key=lambda o: o.created_at, reverse=True)

    def mark_paid(self, order_id, payment_result=None):
        order = self.get_order(order_id)
        order.mark_paid(payment_result)
        return order

    def mark_delivered(self, order_id):
        order = self.get_order(order_id)
        order.mark_delivered()
        return order
