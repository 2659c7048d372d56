"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from identity.user.registration import RegisterUser
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.errors import StorefrontError


@pytest.fixture()
def error():
    """Container for a captured domain error."""
    return {"exc": None}


@given(parsers.cfparse('"{name}" registered as "{email}" with password "{password}"'), target_fixture="user_id")
def _(name, email, password):
    return current_domain.process(RegisterUser(name=name, email=email, password=password), asynchronous=False)


@then("the action is rejected")
def action_rejected(error):
    assert isinstance(error["exc"], ValidationError | StorefrontError)
