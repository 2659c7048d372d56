"""Tests for the checkout state machine."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.checkout.checkout import CheckoutSession, CheckoutStep
from ordering.checkout.events import CheckoutCompleted, CheckoutStarted, CheckoutStepChanged
from ordering.order.snapshot import OrderSnapshot
from protean.exceptions import ValidationError
from shared.errors import EmptyCartError, UnauthenticatedError

ADDRESS = {"address": "12 Navoi St", "city": "Tashkent", "postal_code": "100000", "country": "Uzbekistan"}


def _cart(customer_id="cust-001", with_items=True):
    cart = ShoppingCart.create(customer_id=customer_id)
    if with_items:
        cart.add_or_replace_item("prod-001", "Chust Pichoq", None, 25.0, 5, 2)
    return cart


def _session_at(step, cart=None):
    cart = cart or _cart()
    session = CheckoutSession.begin(cart, "cust-001")
    if step in (CheckoutStep.PAYMENT_INPUT, CheckoutStep.REVIEW):
        session.submit_shipping(cart, ADDRESS)
    if step == CheckoutStep.REVIEW:
        session.submit_payment(cart, "creditCard")
    return session, cart


class TestBegin:
    def test_begin_starts_at_shipping_input(self):
        cart = _cart()
        session = CheckoutSession.begin(cart, "cust-001")
        assert session.step == CheckoutStep.SHIPPING_INPUT.value
        assert session.cart_id == str(cart.id)
        [event] = [e for e in session._events if isinstance(e, CheckoutStarted)]
        assert event.customer_id == "cust-001"

    def test_anonymous_customer_is_rejected(self):
        with pytest.raises(UnauthenticatedError):
            CheckoutSession.begin(_cart(), None)

    def test_someone_elses_cart_is_rejected(self):
        with pytest.raises(UnauthenticatedError):
            CheckoutSession.begin(_cart(customer_id="cust-999"), "cust-001")

    def test_guest_cart_can_be_checked_out_by_signed_in_customer(self):
        session = CheckoutSession.begin(_cart(customer_id=None), "cust-001")
        assert session.customer_id == "cust-001"

    def test_empty_cart_is_rejected(self):
        with pytest.raises(EmptyCartError):
            CheckoutSession.begin(_cart(with_items=False), "cust-001")


class TestShipping:
    def test_submit_shipping_moves_to_payment_input(self):
        session, cart = _session_at(CheckoutStep.SHIPPING_INPUT)
        session.submit_shipping(cart, ADDRESS)
        assert session.step == CheckoutStep.PAYMENT_INPUT.value
        assert cart.shipping_address.city == "Tashkent"

    def test_fields_are_trimmed(self):
        session, cart = _session_at(CheckoutStep.SHIPPING_INPUT)
        session.submit_shipping(cart, {**ADDRESS, "city": "  Samarkand  "})
        assert cart.shipping_address.city == "Samarkand"

    def test_all_missing_fields_are_reported_together(self):
        session, cart = _session_at(CheckoutStep.SHIPPING_INPUT)
        with pytest.raises(ValidationError) as exc_info:
            session.submit_shipping(cart, {"address": "12 Navoi St", "city": "   "})

        assert set(exc_info.value.messages) == {"city", "postal_code", "country"}
        assert session.step == CheckoutStep.SHIPPING_INPUT.value

    def test_transition_raises_step_changed(self):
        session, cart = _session_at(CheckoutStep.SHIPPING_INPUT)
        session._events.clear()
        session.submit_shipping(cart, ADDRESS)
        [event] = session._events
        assert isinstance(event, CheckoutStepChanged)
        assert (event.from_step, event.to_step) == ("ShippingInput", "PaymentInput")


class TestPayment:
    def test_submit_payment_moves_to_review(self):
        session, cart = _session_at(CheckoutStep.PAYMENT_INPUT)
        session.submit_payment(cart, "paypal")
        assert session.step == CheckoutStep.REVIEW.value
        assert cart.payment_method == "PayPal"

    def test_unknown_method_keeps_step(self):
        session, cart = _session_at(CheckoutStep.PAYMENT_INPUT)
        with pytest.raises(ValidationError):
            session.submit_payment(cart, "barter")
        assert session.step == CheckoutStep.PAYMENT_INPUT.value


class TestNoSkipping:
    def test_payment_cannot_be_submitted_before_shipping(self):
        session, cart = _session_at(CheckoutStep.SHIPPING_INPUT)
        with pytest.raises(ValidationError) as exc_info:
            session.submit_payment(cart, "stripe")
        assert "step" in exc_info.value.messages
        assert session.step == CheckoutStep.SHIPPING_INPUT.value

    def test_placed_is_unreachable_from_shipping_input(self):
        session, _ = _session_at(CheckoutStep.SHIPPING_INPUT)
        with pytest.raises(ValidationError):
            session.mark_placed("order-1")
        assert session.step == CheckoutStep.SHIPPING_INPUT.value

    def test_placed_is_unreachable_from_payment_input(self):
        session, _ = _session_at(CheckoutStep.PAYMENT_INPUT)
        with pytest.raises(ValidationError):
            session.mark_placed("order-1")
        assert session.step == CheckoutStep.PAYMENT_INPUT.value

    def test_prepare_order_needs_review(self):
        session, cart = _session_at(CheckoutStep.PAYMENT_INPUT)
        with pytest.raises(ValidationError):
            session.prepare_order(cart, "cust-001")


class TestPrepareOrder:
    def test_returns_immutable_snapshot(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        snapshot = session.prepare_order(cart, "cust-001")

        assert isinstance(snapshot, OrderSnapshot)
        assert snapshot.customer_id == "cust-001"
        assert snapshot.payment_method == "CreditCard"
        assert [(line.product_id, line.quantity) for line in snapshot.lines] == [("prod-001", 2)]
        assert str(snapshot.pricing.total_price) == "69.99"
        assert session.step == CheckoutStep.REVIEW.value

    def test_empty_cart_at_review(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        cart.clear()
        with pytest.raises(EmptyCartError):
            session.prepare_order(cart, "cust-001")
        assert session.step == CheckoutStep.REVIEW.value

    def test_other_customer_is_rejected(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        with pytest.raises(UnauthenticatedError):
            session.prepare_order(cart, "cust-002")

    def test_missing_customer_is_rejected(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        with pytest.raises(UnauthenticatedError):
            session.prepare_order(cart, None)

    def test_address_cleared_behind_the_session_is_caught(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        cart.set_shipping_address({"address": "12 Navoi St"})
        with pytest.raises(ValidationError) as exc_info:
            session.prepare_order(cart, "cust-001")
        assert set(exc_info.value.messages) == {"city", "postal_code", "country"}

    def test_different_cart_is_rejected(self):
        session, _ = _session_at(CheckoutStep.REVIEW)
        with pytest.raises(ValidationError):
            session.prepare_order(_cart(), "cust-001")


class TestMarkPlaced:
    def test_review_to_placed(self):
        session, _ = _session_at(CheckoutStep.REVIEW)
        session.mark_placed("order-1")

        assert session.step == CheckoutStep.PLACED.value
        assert session.order_id == "order-1"
        assert any(isinstance(e, CheckoutCompleted) for e in session._events)

    def test_placed_is_terminal(self):
        session, cart = _session_at(CheckoutStep.REVIEW)
        session.mark_placed("order-1")
        with pytest.raises(ValidationError):
            session.submit_shipping(cart, ADDRESS)
        with pytest.raises(ValidationError):
            session.restart()
        assert session.step == CheckoutStep.PLACED.value


class TestRestart:
    @pytest.mark.parametrize("step", [CheckoutStep.PAYMENT_INPUT, CheckoutStep.REVIEW])
    def test_restart_returns_to_shipping_keeping_details(self, step):
        session, cart = _session_at(step)
        session.restart()

        assert session.step == CheckoutStep.SHIPPING_INPUT.value
        assert cart.shipping_address.city == "Tashkent"

    def test_restart_at_shipping_input_is_a_no_op(self):
        session, _ = _session_at(CheckoutStep.SHIPPING_INPUT)
        session._events.clear()
        session.restart()
        assert session.step == CheckoutStep.SHIPPING_INPUT.value
        assert session._events == []
