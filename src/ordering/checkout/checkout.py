"""Checkout session aggregate: the step-by-step path from cart to order.

State Machine:
    ShippingInput → PaymentInput → Review → Placed
    PaymentInput, Review → ShippingInput (restart)

The session references its cart by id; the cart itself is shared with the
storefront and is loaded alongside the session by the command handlers. No
transition skips a step, and a rejected transition leaves the step unchanged.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from ordering.cart.cart import PaymentMethod
from ordering.checkout.events import CheckoutCompleted, CheckoutStarted, CheckoutStepChanged
from ordering.domain import ordering
from ordering.order.snapshot import OrderSnapshot
from shared.errors import EmptyCartError, UnauthenticatedError


class CheckoutStep(Enum):
    SHIPPING_INPUT = "ShippingInput"
    PAYMENT_INPUT = "PaymentInput"
    REVIEW = "Review"
    PLACED = "Placed"


_VALID_TRANSITIONS = {
    CheckoutStep.SHIPPING_INPUT: {CheckoutStep.PAYMENT_INPUT},
    CheckoutStep.PAYMENT_INPUT: {CheckoutStep.REVIEW, CheckoutStep.SHIPPING_INPUT},
    CheckoutStep.REVIEW: {CheckoutStep.PLACED, CheckoutStep.SHIPPING_INPUT},
    CheckoutStep.PLACED: set(),  # Terminal
}

ADDRESS_FIELDS = {
    "address": "Address",
    "city": "City",
    "postal_code": "Postal code",
    "country": "Country",
}


def _field(source, name):
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


@ordering.aggregate
class CheckoutSession:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    step = String(choices=CheckoutStep, default=CheckoutStep.SHIPPING_INPUT.value)
    order_id = Identifier()
    started_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def begin(cls, cart, customer_id):
        """Open a checkout for ``cart``. Only signed-in customers with items get in."""
        if not customer_id:
            raise UnauthenticatedError("Sign in to check out")
        if cart.customer_id and str(cart.customer_id) != str(customer_id):
            raise UnauthenticatedError("This cart belongs to another customer")
        if not cart.items:
            raise EmptyCartError("Cannot check out an empty cart")

        now = datetime.now(UTC)
        session = cls(
            cart_id=str(cart.id),
            customer_id=str(customer_id),
            step=CheckoutStep.SHIPPING_INPUT.value,
            started_at=now,
            updated_at=now,
        )
        session.raise_(
            CheckoutStarted(
                checkout_id=str(session.id),
                cart_id=str(cart.id),
                customer_id=str(customer_id),
            )
        )
        return session

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target):
        current = CheckoutStep(self.step)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"step": [f"Cannot move from {current.value} to {target.value}"]})

    def _move_to(self, target):
        previous = self.step
        self.step = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CheckoutStepChanged(
                checkout_id=str(self.id),
                from_step=previous,
                to_step=target.value,
            )
        )

    def _assert_same_cart(self, cart):
        if str(cart.id) != str(self.cart_id):
            raise ValidationError({"cart_id": ["Cart does not belong to this checkout"]})

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def submit_shipping(self, cart, address):
        """ShippingInput → PaymentInput. Every blank field is reported at once."""
        self._assert_can_transition(CheckoutStep.PAYMENT_INPUT)
        self._assert_same_cart(cart)

        trimmed = {name: (_field(address, name) or "").strip() for name in ADDRESS_FIELDS}
        errors = {name: [f"{label} is required"] for name, label in ADDRESS_FIELDS.items() if not trimmed[name]}
        if errors:
            raise ValidationError(errors)

        cart.set_shipping_address(trimmed)
        self._move_to(CheckoutStep.PAYMENT_INPUT)

    def submit_payment(self, cart, method):
        """PaymentInput → Review."""
        self._assert_can_transition(CheckoutStep.REVIEW)
        self._assert_same_cart(cart)

        cart.set_payment_method(PaymentMethod.parse(method))
        self._move_to(CheckoutStep.REVIEW)

    def prepare_order(self, cart, customer_id):
        """Build the immutable order request. Only valid at Review; the step does not move."""
        current = CheckoutStep(self.step)
        if current != CheckoutStep.REVIEW:
            raise ValidationError({"step": [f"Cannot place an order from {current.value}"]})
        self._assert_same_cart(cart)

        if not customer_id or str(customer_id) != str(self.customer_id):
            raise UnauthenticatedError("Sign in as the customer who started this checkout")
        if not cart.items:
            raise EmptyCartError("Cannot place an order for an empty cart")

        address = cart.shipping_address
        missing = {
            name: [f"{label} is required"]
            for name, label in ADDRESS_FIELDS.items()
            if not (address and (_field(address, name) or "").strip())
        }
        if missing:
            raise ValidationError(missing)
        if not cart.payment_method:
            raise ValidationError({"payment_method": ["Choose a payment method"]})

        return OrderSnapshot.from_cart(cart, customer_id)

    def mark_placed(self, order_id):
        """Review → Placed, remembering the order that was recorded."""
        self._assert_can_transition(CheckoutStep.PLACED)

        self.order_id = str(order_id)
        self._move_to(CheckoutStep.PLACED)
        self.raise_(CheckoutCompleted(checkout_id=str(self.id), order_id=str(order_id)))

    def restart(self):
        """Go back to ShippingInput keeping whatever was already captured on the cart."""
        current = CheckoutStep(self.step)
        if current == CheckoutStep.SHIPPING_INPUT:
            return
        self._assert_can_transition(CheckoutStep.SHIPPING_INPUT)
        self._move_to(CheckoutStep.SHIPPING_INPUT)
