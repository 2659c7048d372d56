"""Order store backed by the ordering domain's Protean repository.

When it runs inside a command handler the write joins that handler's unit of
work, so the order, the emptied cart and the checkout step are committed
together. Stock has already been reserved by then; see
``ordering.checkout.placement.place_order``.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.order.store.port import OrderStore
from shared.errors import PersistenceFailure

logger = structlog.get_logger(__name__)


class RepositoryOrderStore(OrderStore):
    def create_order(self, snapshot):
        order = Order.place(snapshot)

        try:
            current_domain.repository_for(Order).add(order)
        except Exception as exc:
            logger.warning(
                "Order write failed",
                customer_id=snapshot.customer_id,
                line_count=len(snapshot.lines),
                error=str(exc),
            )
            raise PersistenceFailure("The order could not be saved") from exc

        return order

    def get_order(self, order_id):
        return current_domain.repository_for(Order).get(order_id)

    def list_orders_for_user(self, customer_id):
        return (
            current_domain.repository_for(Order)
            ._dao.query.filter(customer_id=str(customer_id))
            .order_by("-created_at")
            .all()
            .items
        )

    def list_orders(self):
        return current_domain.repository_for(Order)._dao.query.order_by("-created_at").all().items

    def mark_paid(self, order_id, payment_result=None):
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        order.mark_paid(payment_result)
        repo.add(order)
        return order

    def mark_delivered(self, order_id):
        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        order.mark_delivered()
        repo.add(order)
        return order
