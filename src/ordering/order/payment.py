"""Order payment: command and handler.

The payment itself happens elsewhere; the order only records the opaque
confirmation token it is given.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.store import get_order_store

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkOrderPaid:
    order_id = Identifier(required=True)
    payment_id = String(max_length=255)
    status = String(max_length=50)
    update_time = String(max_length=50)
    email_address = String(max_length=254)


@ordering.command_handler(part_of=Order)
class MarkOrderPaidHandler:
    @handle(MarkOrderPaid)
    def mark_order_paid(self, command):
        order = get_order_store().mark_paid(
            command.order_id,
            {
                "payment_id": command.payment_id,
                "status": command.status,
                "update_time": command.update_time,
                "email_address": command.email_address,
            },
        )
        logger.info("Order paid", order_id=str(order.id), payment_id=command.payment_id)
        return order
