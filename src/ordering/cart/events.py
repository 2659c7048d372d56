"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product line was added to the cart, or replaced an existing line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    unit_price = Float(required=True)
    quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A product line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """All product lines were removed, usually right after an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)
