"""Ordering bounded context: Shopping Cart, Checkout and Orders.

Handles the cart (CQRS), the checkout state machine that walks a signed-in
customer from cart to order, and the order record with its payment and
delivery flags.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
