"""Stock ledger contract between Ordering and the Catalogue.

Ordering never touches product stock itself. At order placement it hands the
order lines to a ``StockLedger`` which must decrement all of them or none, and
raise ``StockExhausted`` when any product is short.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from shared.errors import StockExhausted, StockShortage


@dataclass(frozen=True)
class StockLine:
    product_id: str
    quantity: int


class StockLedger(ABC):
    """Abstract stock reservation interface."""

    @abstractmethod
    def reserve(self, lines: list[StockLine]) -> None:
        """Decrement stock for every line, or raise ``StockExhausted`` and change nothing."""
        ...

    @abstractmethod
    def release(self, lines: list[StockLine]) -> None:
        """Give back stock previously reserved for these lines."""
        ...


class FakeStockLedger(StockLedger):
    """In-memory ledger for development and tests."""

    def __init__(self, levels: dict[str, int] | None = None) -> None:
        self.levels: dict[str, int] = dict(levels or {})
        self.calls: list[dict] = []

    def reserve(self, lines: list[StockLine]) -> None:
        self.calls.append({"method": "reserve", "lines": list(lines)})
        shortages = [
            StockShortage(line.product_id, line.quantity, self.levels.get(line.product_id, 0))
            for line in lines
            if self.levels.get(line.product_id, 0) < line.quantity
        ]
        if shortages:
            raise StockExhausted(shortages)
        for line in lines:
            self.levels[line.product_id] -= line.quantity

    def release(self, lines: list[StockLine]) -> None:
        self.calls.append({"method": "release", "lines": list(lines)})
        for line in lines:
            self.levels[line.product_id] = self.levels.get(line.product_id, 0) + line.quantity


_current_ledger: StockLedger | None = None


def get_stock_ledger() -> StockLedger | None:
    """Return the active ledger, or ``None`` when placement runs without stock control."""
    return _current_ledger


def set_stock_ledger(ledger: StockLedger | None) -> None:
    global _current_ledger
    _current_ledger = ledger


def reset_stock_ledger() -> None:
    global _current_ledger
    _current_ledger = None
