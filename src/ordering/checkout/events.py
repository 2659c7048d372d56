"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="CheckoutSession")
class CheckoutStarted:
    """A signed-in customer started checking out a non-empty cart."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@ordering.event(part_of="CheckoutSession")
class CheckoutStepChanged:
    """The checkout moved between steps, forward or back to the start."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    from_step = String(required=True)
    to_step = String(required=True)


@ordering.event(part_of="CheckoutSession")
class CheckoutCompleted:
    """The order was recorded and the checkout reached its terminal step."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    order_id = Identifier(required=True)
