"""Order delivery: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.store import get_order_store

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class MarkOrderDelivered:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class MarkOrderDeliveredHandler:
    @handle(MarkOrderDelivered)
    def mark_order_delivered(self, command):
        order = get_order_store().mark_delivered(command.order_id)
        logger.info("Order delivered", order_id=str(order.id))
        return order
