"""Order persistence port (abstract interface).

Checkout hands an ``OrderSnapshot`` to whichever store is active and waits for
it to come back with a recorded ``Order``. This is the single blocking step of
placement: there is no timeout and no automatic retry, so a caller that gives
up and retries may end up with a duplicate order.
"""

from abc import ABC, abstractmethod


class OrderStore(ABC):
    """Abstract order persistence interface."""

    @abstractmethod
    def create_order(self, snapshot):
        """Record a new order. Raises ``PersistenceFailure`` or ``StockExhausted``."""
        ...

    @abstractmethod
    def get_order(self, order_id):
        """Fetch one order. Raises ``ObjectNotFoundError`` when it does not exist."""
        ...

    @abstractmethod
    def list_orders_for_user(self, customer_id):
        """Orders placed by one customer, newest first."""
        ...

    @abstractmethod
    def list_orders(self):
        """Every order, newest first."""
        ...

    @abstractmethod
    def mark_paid(self, order_id, payment_result=None):
        ...

    @abstractmethod
    def mark_delivered(self, order_id):
        ...
