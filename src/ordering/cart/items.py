"""Cart item management: commands, handler and catalogue-priced line entry."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from shared.products import get_product_directory

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    unit_price = Float(required=True, min_value=0.0)
    available_stock = Integer(required=True, min_value=0)
    quantity = Integer(required=True)  # Range is checked against stock by the cart


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.add_or_replace_item(
            product_id=command.product_id,
            name=command.name,
            image=command.image,
            unit_price=command.unit_price,
            available_stock=command.available_stock,
            quantity=command.quantity,
        )
        repo.add(cart)

        logger.debug(
            "Cart line set",
            cart_id=str(cart.id),
            product_id=str(command.product_id),
            quantity=command.quantity,
        )

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

        logger.debug("Cart line removed", cart_id=str(cart.id), product_id=str(command.product_id))

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)

        logger.debug("Cart cleared", cart_id=str(cart.id))


def add_product_to_cart(cart_id, product_id, quantity):
    """Set a cart line from the product's current catalogue listing.

    Name, image, price and stock always come from the ``ProductDirectory``;
    the caller only chooses the product and the quantity. Must be called
    outside any unit of work.
    """
    listing = get_product_directory().find(product_id)
    current_domain.process(
        AddToCart(
            cart_id=cart_id,
            product_id=listing.product_id,
            name=listing.name,
            image=listing.image,
            unit_price=listing.price,
            available_stock=listing.count_in_stock,
            quantity=quantity,
        ),
        asynchronous=False,
    )
    return listing.product_id
