"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import ShoppingCart
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.errors import StorefrontError


@pytest.fixture()
def error():
    """Container for a captured domain error."""
    return {"exc": None}


@given(parsers.cfparse('a cart belonging to "{customer_id}"'), target_fixture="cart")
def _(customer_id):
    return ShoppingCart.create(customer_id=customer_id)


@given(parsers.cfparse('the cart holds {quantity:d} of "{product_id}" at {price:f} with {stock:d} in stock'))
def cart_holds(cart, quantity, product_id, price, stock):
    cart.add_or_replace_item(product_id, f"Blade {product_id}", None, price, stock, quantity)


@then("the action is rejected")
def action_rejected(error):
    assert isinstance(error["exc"], ValidationError | StorefrontError)


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_line_count(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total(cart, total):
    assert float(cart.recompute_totals().total_price) == pytest.approx(total)
