"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for a captured validation error."""
    return {"exc": None}


@given(parsers.cfparse('a "{category}" named "{name}" priced {price:f} with {stock:d} in stock'), target_fixture="product")
def _(category, name, price, stock):
    return Product.create(
        name=name,
        category=category,
        description=f"{name}, forged in Uzbekistan.",
        price=price,
        count_in_stock=stock,
    )


@then("the action is rejected")
def action_rejected(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("the product has {count:d} in stock"))
def product_stock(product, count):
    assert product.count_in_stock == count
