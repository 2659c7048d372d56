"""Placement against the real catalogue, without the HTTP layer.

Stock lives in the Catalogue context and orders in Ordering, so these tests
check that a reservation lands in the catalogue store and survives the ordering
unit of work that records the order.
"""

import pytest
from catalogue.domain import catalogue
from catalogue.product.management import CreateProduct
from catalogue.product.product import Product
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import add_product_to_cart
from ordering.cart.management import CreateCart
from ordering.checkout.checkout import CheckoutSession, CheckoutStep
from ordering.checkout.flow import BeginCheckout, SubmitPaymentMethod, SubmitShippingAddress
from ordering.checkout.placement import place_order
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.store import FakeOrderStore, set_order_store
from protean import current_domain
from shared.errors import PersistenceFailure, StockExhausted

CUSTOMER = "cust-across-001"


def _product(price=45.0, stock=3):
    with catalogue.domain_context():
        return current_domain.process(
            CreateProduct(
                name="Pichoq",
                category="knife",
                description="Chust-style utility knife.",
                price=price,
                count_in_stock=stock,
            ),
            asynchronous=False,
        )


def _stock_of(product_id):
    with catalogue.domain_context():
        return current_domain.repository_for(Product).get(product_id).count_in_stock


def _checkout_at_review(product_id, quantity):
    cart_id = current_domain.process(CreateCart(customer_id=CUSTOMER), asynchronous=False)
    add_product_to_cart(cart_id, product_id, quantity)
    checkout_id = current_domain.process(BeginCheckout(cart_id=cart_id, customer_id=CUSTOMER), asynchronous=False)
    current_domain.process(
        SubmitShippingAddress(
            checkout_id=checkout_id,
            address="3 Amir Temur",
            city="Shahrisabz",
            postal_code="181300",
            country="Uzbekistan",
        ),
        asynchronous=False,
    )
    current_domain.process(SubmitPaymentMethod(checkout_id=checkout_id, payment_method="paypal"), asynchronous=False)
    return cart_id, checkout_id


@pytest.fixture()
def product_id():
    return _product()


def test_placement_decrements_catalogue_stock(product_id):
    with ordering.domain_context():
        cart_id, checkout_id = _checkout_at_review(product_id, 2)
        order_id = place_order(checkout_id, CUSTOMER)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].product_id == product_id
        assert str(order.pricing().total_price) == "113.19"
        assert current_domain.repository_for(CheckoutSession).get(checkout_id).step == CheckoutStep.PLACED.value
        assert len(current_domain.repository_for(ShoppingCart).get(cart_id).items) == 0

    assert _stock_of(product_id) == 1


def test_shortage_leaves_both_contexts_untouched(product_id):
    with ordering.domain_context():
        cart_id, checkout_id = _checkout_at_review(product_id, 3)

    with catalogue.domain_context():
        product = current_domain.repository_for(Product).get(product_id)
        product.count_in_stock = 2
        current_domain.repository_for(Product).add(product)

    with ordering.domain_context():
        with pytest.raises(StockExhausted):
            place_order(checkout_id, CUSTOMER)

        assert current_domain.repository_for(CheckoutSession).get(checkout_id).step == CheckoutStep.REVIEW.value
        assert len(current_domain.repository_for(ShoppingCart).get(cart_id).items) == 1

    assert _stock_of(product_id) == 2


def test_failed_order_write_restores_catalogue_stock(product_id):
    store = FakeOrderStore()
    store.configure("persistence")
    set_order_store(store)

    with ordering.domain_context():
        _, checkout_id = _checkout_at_review(product_id, 2)
        with pytest.raises(PersistenceFailure):
            place_order(checkout_id, CUSTOMER)

    assert _stock_of(product_id) == 3
