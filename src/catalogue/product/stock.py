"""Stock control: commands, handler and the ledger Ordering uses at checkout.

Reservation is all-or-nothing: every product is checked before any is
decremented, and a single shortage rejects the whole request with the full
list of shortages.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.errors import StockExhausted, StockShortage
from shared.stock import StockLedger

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class ReserveStock:
    lines: Text(required=True)  # JSON: list of {product_id, quantity}


@catalogue.command(part_of="Product")
class ReleaseStock:
    lines: Text(required=True)  # JSON: list of {product_id, quantity}


def _lines(raw):
    """Quantities per product, merging repeated products."""
    totals = {}
    for line in json.loads(raw) if isinstance(raw, str) else raw:
        product_id = str(line["product_id"])
        totals[product_id] = totals.get(product_id, 0) + int(line["quantity"])
    return list(totals.items())


@catalogue.command_handler(part_of=Product)
class StockControlHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        repo = current_domain.repository_for(Product)
        lines = _lines(command.lines)

        products = {}
        shortages = []
        for product_id, quantity in lines:
            try:
                product = repo.get(product_id)
            except ObjectNotFoundError:
                shortages.append(StockShortage(product_id, quantity, 0))
                continue
            products[product_id] = product
            if not product.has_stock_for(quantity):
                shortages.append(StockShortage(product_id, quantity, product.count_in_stock or 0))

        if shortages:
            logger.warning(
                "Stock reservation rejected",
                shortages=[{"product_id": s.product_id, "requested": s.requested, "available": s.available} for s in shortages],
            )
            raise StockExhausted(shortages)

        for product_id, quantity in lines:
            products[product_id].take_stock(quantity)
        for product in products.values():
            repo.add(product)

        logger.info("Stock reserved", line_count=len(lines))

    @handle(ReleaseStock)
    def release_stock(self, command):
        repo = current_domain.repository_for(Product)
        lines = _lines(command.lines)
        for product_id, quantity in lines:
            try:
                product = repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning("Released stock for a missing product", product_id=product_id, quantity=quantity)
                continue
            product.return_stock(quantity)
            repo.add(product)

        logger.info("Stock released", line_count=len(lines))


class CatalogueStockLedger(StockLedger):
    """``StockLedger`` backed by the catalogue's products.

    Callable from another bounded context: each call runs inside the catalogue
    domain's own context.
    """

    def reserve(self, lines):
        with catalogue.domain_context():
            current_domain.process(ReserveStock(lines=self._encode(lines)), asynchronous=False)

    def release(self, lines):
        with catalogue.domain_context():
            current_domain.process(ReleaseStock(lines=self._encode(lines)), asynchronous=False)

    @staticmethod
    def _encode(lines):
        return json.dumps([{"product_id": line.product_id, "quantity": line.quantity} for line in lines])
