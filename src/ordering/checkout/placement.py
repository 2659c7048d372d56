"""Order placement, the last checkout step.

Placement runs in two stages. ``place_order`` first reserves stock through the
active ``StockLedger``, in the catalogue's own unit of work and before any
ordering unit of work is open. It then processes ``PlaceOrder``, whose handler
records the order, empties the cart and marks the session Placed in a single
ordering unit of work. If that second stage raises, the reservation is given
back and the error propagates untouched: the session stays at Review with the
cart as it was, so the customer can retry.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.checkout.checkout import CheckoutSession
from ordering.domain import ordering
from ordering.order.store import get_order_store
from shared.errors import PersistenceFailure, StockExhausted
from shared.stock import get_stock_ledger

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CheckoutSession")
class PlaceOrder:
    checkout_id = Identifier(required=True)
    customer_id = Identifier()


@ordering.command_handler(part_of=CheckoutSession)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        session_repo = current_domain.repository_for(CheckoutSession)
        cart_repo = current_domain.repository_for(ShoppingCart)

        session = session_repo.get(command.checkout_id)
        cart = cart_repo.get(session.cart_id)

        snapshot = session.prepare_order(cart, command.customer_id)

        try:
            order = get_order_store().create_order(snapshot)
        except StockExhausted as exc:
            logger.warning(
                "Order placement rejected, stock exhausted",
                checkout_id=str(session.id),
                shortages=[s.product_id for s in exc.shortages],
            )
            raise
        except PersistenceFailure as exc:
            logger.warning("Order placement failed", checkout_id=str(session.id), error=exc.message)
            raise

        cart.clear()
        session.mark_placed(order.id)
        cart_repo.add(cart)
        session_repo.add(session)

        logger.info(
            "Order placed",
            checkout_id=str(session.id),
            order_id=str(order.id),
            customer_id=str(session.customer_id),
            total_price=order.total_price,
        )
        return str(order.id)


def place_order(checkout_id, customer_id):
    """Reserve stock for the checkout's cart, then place the order.

    Must be called outside any unit of work. Returns the new order's id.
    """
    session = current_domain.repository_for(CheckoutSession).get(checkout_id)
    cart = current_domain.repository_for(ShoppingCart).get(session.cart_id)
    lines = session.prepare_order(cart, customer_id).stock_lines()

    ledger = get_stock_ledger()
    if ledger is not None:
        try:
            ledger.reserve(lines)
        except StockExhausted as exc:
            logger.warning(
                "Order placement rejected, stock exhausted",
                checkout_id=str(checkout_id),
                shortages=[s.product_id for s in exc.shortages],
            )
            raise

    try:
        return current_domain.process(
            PlaceOrder(checkout_id=checkout_id, customer_id=customer_id),
            asynchronous=False,
        )
    except Exception:
        if ledger is not None:
            ledger.release(lines)
            logger.info("Stock reservation released", checkout_id=str(checkout_id), line_count=len(lines))
        raise
