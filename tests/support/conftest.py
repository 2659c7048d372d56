import os

import pytest


@pytest.fixture(scope="session")
def _support_domain(request):
    """Initialize the support domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from support.domain import support

    support.init()
    return support


@pytest.fixture(scope="session", autouse=True)
def setup_db(_support_domain):
    from shared.db import drop_db, setup_db

    setup_db(_support_domain)

    yield

    drop_db(_support_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_support_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _support_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
