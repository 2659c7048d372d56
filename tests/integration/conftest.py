"""Fixtures for end-to-end storefront tests.

These drive the assembled application, so requests cross the Identity,
Catalogue, Ordering and Support contexts exactly as they do in production.
"""

import os

import pytest


@pytest.fixture(scope="session")
def storefront_app(request):
    """Import the application once per session; importing it initializes every domain."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from app import app

    return app


@pytest.fixture(scope="session")
def domains(storefront_app):  # noqa: ARG001
    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering
    from support.domain import support

    return [identity, catalogue, ordering, support]


@pytest.fixture(scope="session", autouse=True)
def setup_databases(domains):
    from shared.db import drop_db, setup_db

    for domain in domains:
        setup_db(domain)

    yield

    for domain in domains:
        drop_db(domain)


@pytest.fixture(autouse=True)
def reset_domains(domains):
    """Wipe every domain's stores after each test."""
    yield

    for domain in domains:
        with domain.domain_context():
            for _, provider in domain.providers.items():
                provider._data_reset()

            for _, broker in domain.brokers.items():
                broker._data_reset()

            domain.event_store.store._data_reset()


@pytest.fixture()
def client(storefront_app):
    from fastapi.testclient import TestClient

    return TestClient(storefront_app)


@pytest.fixture(autouse=True)
def catalogue_collaborators(storefront_app):  # noqa: ARG001
    """Carts price from, and orders reserve against, the real catalogue whatever other suites installed."""
    from catalogue.product.listing import CatalogueProductDirectory
    from catalogue.product.stock import CatalogueStockLedger
    from ordering.order.store import reset_order_store
    from shared.products import set_product_directory
    from shared.stock import set_stock_ledger

    reset_order_store()
    set_product_directory(CatalogueProductDirectory())
    set_stock_ledger(CatalogueStockLedger())
    yield
    reset_order_store()
