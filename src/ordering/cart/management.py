"""Cart management: commands and handler.

Handles cart creation, restoring a cart from client-local state, and capturing
the shipping address and payment method outside of a checkout session.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.snapshot import (
    CART_ITEMS_KEY,
    PAYMENT_METHOD_KEY,
    SHIPPING_ADDRESS_KEY,
    address_from_snapshot,
    line_from_snapshot,
    load_snapshot,
)
from ordering.domain import ordering
from shared.products import get_product_directory

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Create a new shopping cart for a registered customer or guest session."""

    customer_id = Identifier()  # Optional for guest carts
    session_id = String(max_length=255)


@ordering.command(part_of="ShoppingCart")
class RestoreCart:
    """Rebuild a cart from the state the web client kept in browser storage."""

    customer_id = Identifier()
    session_id = String(max_length=255)
    snapshot = Text(required=True)  # JSON: {cartItems, shippingAddress, paymentMethod}


@ordering.command(part_of="ShoppingCart")
class SetShippingAddress:
    cart_id = Identifier(required=True)
    address = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


@ordering.command(part_of="ShoppingCart")
class SetPaymentMethod:
    cart_id = Identifier(required=True)
    payment_method = String(required=True, max_length=50)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = ShoppingCart.create(
            customer_id=command.customer_id,
            session_id=command.session_id,
        )
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(RestoreCart)
    def restore_cart(self, command):
        snapshot = load_snapshot(command.snapshot)

        cart = ShoppingCart.create(
            customer_id=command.customer_id,
            session_id=command.session_id,
        )
        for entry in snapshot[CART_ITEMS_KEY]:
            cart.add_or_replace_item(**line_from_snapshot(entry))

        address = address_from_snapshot(snapshot[SHIPPING_ADDRESS_KEY])
        if address:
            cart.set_shipping_address(address)
        if snapshot[PAYMENT_METHOD_KEY]:
            cart.set_payment_method(snapshot[PAYMENT_METHOD_KEY])

        current_domain.repository_for(ShoppingCart).add(cart)

        logger.debug("Cart restored", cart_id=str(cart.id), line_count=len(cart.items))
        return str(cart.id)

    @handle(SetShippingAddress)
    def set_shipping_address(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.set_shipping_address(
            {
                "address": command.address,
                "city": command.city,
                "postal_code": command.postal_code,
                "country": command.country,
            }
        )
        repo.add(cart)

    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.set_payment_method(command.payment_method)
        repo.add(cart)


def restore_cart(snapshot, customer_id=None, session_id=None):
    """Restore a cart from browser storage, repricing every line from the catalogue.

    Stored names, images, prices and stock levels are ignored. Lines for
    products that no longer exist or are sold out are dropped, and quantities
    are capped at what is left in stock. Must be called outside any unit of
    work. Returns the new cart's id.
    """
    snapshot = load_snapshot(snapshot)
    directory = get_product_directory()

    lines = []
    for entry in snapshot[CART_ITEMS_KEY]:
        try:
            listing = directory.find(entry.get("product"))
        except ObjectNotFoundError:
            logger.info("Dropped restored line for a missing product", product_id=entry.get("product"))
            continue
        if listing.count_in_stock < 1:
            logger.info("Dropped restored line for a sold out product", product_id=listing.product_id)
            continue
        lines.append(
            {
                "product": listing.product_id,
                "name": listing.name,
                "image": listing.image,
                "price": listing.price,
                "countInStock": listing.count_in_stock,
                "quantity": min(int(entry.get("quantity") or 1), listing.count_in_stock),
            }
        )
    snapshot[CART_ITEMS_KEY] = lines

    return current_domain.process(
        RestoreCart(customer_id=customer_id, session_id=session_id, snapshot=json.dumps(snapshot)),
        asynchronous=False,
    )
