import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def order_store():
    """Every test starts with a fake order store and leaves the default behind."""
    from ordering.order.store import FakeOrderStore, reset_order_store, set_order_store

    store = FakeOrderStore()
    set_order_store(store)
    yield store
    reset_order_store()


@pytest.fixture(autouse=True)
def product_directory():
    """Cart lines are priced from a small in-memory catalogue."""
    from shared.products import FakeProductDirectory, ProductListing, reset_product_directory, set_product_directory

    directory = FakeProductDirectory(
        [
            ProductListing("prod-001", "Chust Pichoq", "/img/chust.jpg", 40.0, 5),
            ProductListing("prod-002", "Kard", "/img/kard.jpg", 12.5, 9),
            ProductListing("prod-003", "Shamshir", "/img/shamshir.jpg", 450.0, 1),
        ]
    )
    set_product_directory(directory)
    yield directory
    reset_product_directory()


@pytest.fixture(autouse=True)
def _no_stock_control():
    from shared.stock import reset_stock_ledger

    reset_stock_ledger()
    yield
    reset_stock_ledger()


@pytest.fixture()
def stock_ledger():
    """Placement reserves against an in-memory ledger instead of skipping stock control."""
    from shared.stock import FakeStockLedger, set_stock_ledger

    ledger = FakeStockLedger({"prod-001": 5, "prod-002": 9, "prod-003": 1})
    set_stock_ledger(ledger)
    return ledger
