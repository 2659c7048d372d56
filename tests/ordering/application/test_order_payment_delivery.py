"""Application tests for the order payment and delivery commands."""

import pytest
from ordering.order.delivery import MarkOrderDelivered
from ordering.order.payment import MarkOrderPaid
from ordering.order.snapshot import AddressSnapshot, OrderLine, OrderSnapshot
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def order(order_store):
    return order_store.create_order(
        OrderSnapshot(
            customer_id="cust-001",
            lines=[OrderLine(product_id="prod-001", name="Kard", image=None, unit_price=80.0, quantity=2)],
            shipping_address=AddressSnapshot(address="1 Chorsu", city="Tashkent", postal_code="100011", country="UZ"),
            payment_method="PayPal",
        )
    )


class TestMarkOrderPaid:
    def test_records_payment(self, order):
        paid = current_domain.process(
            MarkOrderPaid(order_id=str(order.id), payment_id="PAY-1", status="COMPLETED", email_address="a@b.uz"),
            asynchronous=False,
        )
        assert paid.is_paid is True
        assert paid.payment_result.email_address == "a@b.uz"

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(MarkOrderPaid(order_id="missing"), asynchronous=False)


class TestMarkOrderDelivered:
    def test_unpaid_order_is_rejected(self, order):
        with pytest.raises(ValidationError):
            current_domain.process(MarkOrderDelivered(order_id=str(order.id)), asynchronous=False)

    def test_paid_order_is_delivered(self, order):
        current_domain.process(MarkOrderPaid(order_id=str(order.id)), asynchronous=False)
        delivered = current_domain.process(MarkOrderDelivered(order_id=str(order.id)), asynchronous=False)

        assert delivered.is_delivered is True
        assert delivered.delivered_at is not None
