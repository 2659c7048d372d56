"""Checkout steps: commands and handler.

Each handler loads the session together with the cart it points at, applies one
transition, and saves both.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.checkout.checkout import CheckoutSession
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CheckoutSession")
class BeginCheckout:
    cart_id = Identifier(required=True)
    customer_id = Identifier()  # Missing for anonymous callers; rejected by the session


@ordering.command(part_of="CheckoutSession")
class SubmitShippingAddress:
    # Address fields are optional here so that every blank one is reported together
    checkout_id = Identifier(required=True)
    address = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


@ordering.command(part_of="CheckoutSession")
class SubmitPaymentMethod:
    checkout_id = Identifier(required=True)
    payment_method = String(max_length=50)


@ordering.command(part_of="CheckoutSession")
class RestartCheckout:
    checkout_id = Identifier(required=True)


def _load(checkout_id):
    session = current_domain.repository_for(CheckoutSession).get(checkout_id)
    cart = current_domain.repository_for(ShoppingCart).get(session.cart_id)
    return session, cart


def _save(session, cart):
    current_domain.repository_for(ShoppingCart).add(cart)
    current_domain.repository_for(CheckoutSession).add(session)


@ordering.command_handler(part_of=CheckoutSession)
class CheckoutFlowHandler:
    @handle(BeginCheckout)
    def begin_checkout(self, command):
        cart = current_domain.repository_for(ShoppingCart).get(command.cart_id)
        session = CheckoutSession.begin(cart, command.customer_id)
        current_domain.repository_for(CheckoutSession).add(session)

        logger.info(
            "Checkout started",
            checkout_id=str(session.id),
            cart_id=str(cart.id),
            customer_id=str(command.customer_id),
        )
        return str(session.id)

    @handle(SubmitShippingAddress)
    def submit_shipping_address(self, command):
        session, cart = _load(command.checkout_id)
        session.submit_shipping(
            cart,
            {
                "address": command.address,
                "city": command.city,
                "postal_code": command.postal_code,
                "country": command.country,
            },
        )
        _save(session, cart)

        logger.info("Checkout shipping captured", checkout_id=str(session.id), step=session.step)

    @handle(SubmitPaymentMethod)
    def submit_payment_method(self, command):
        session, cart = _load(command.checkout_id)
        session.submit_payment(cart, command.payment_method)
        _save(session, cart)

        logger.info(
            "Checkout payment method captured",
            checkout_id=str(session.id),
            payment_method=cart.payment_method,
            step=session.step,
        )

    @handle(RestartCheckout)
    def restart_checkout(self, command):
        session = current_domain.repository_for(CheckoutSession).get(command.checkout_id)
        session.restart()
        current_domain.repository_for(CheckoutSession).add(session)

        logger.info("Checkout restarted", checkout_id=str(session.id))
