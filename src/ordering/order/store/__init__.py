"""Order store factory.

Provides get_order_store() / set_order_store() to swap implementations:
- RepositoryOrderStore, backed by the Protean repository (default)
- FakeOrderStore for development and testing
"""

from ordering.order.store.fake_adapter import FakeOrderStore
from ordering.order.store.port import OrderStore
from ordering.order.store.repository_adapter import RepositoryOrderStore

__all__ = [
    "FakeOrderStore",
    "OrderStore",
    "RepositoryOrderStore",
    "get_order_store",
    "reset_order_store",
    "set_order_store",
]

_current_store: OrderStore | None = None


def get_order_store() -> OrderStore:
    """Return the current order store. Defaults to RepositoryOrderStore."""
    global _current_store
    if _current_store is None:
        _current_store = RepositoryOrderStore()
    return _current_store


def set_order_store(store: OrderStore) -> None:
    """Override the active order store (useful for tests and app wiring)."""
    global _current_store
    _current_store = store


def reset_order_store() -> None:
    """Reset to default store."""
    global _current_store
    _current_store = None
