"""Product directory contract between Ordering and the Catalogue.

The cart never trusts a client with prices or stock levels. Before a line is
added, Ordering asks a ``ProductDirectory`` for the product's current name,
image, price and stock, and builds the line from that answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError

PLACEHOLDER_IMAGE = "/placeholder.jpg"


@dataclass(frozen=True)
class ProductListing:
    product_id: str
    name: str
    image: str | None
    price: float
    count_in_stock: int


class ProductDirectory(ABC):
    """Abstract product lookup interface."""

    @abstractmethod
    def find(self, product_id: str) -> ProductListing:
        """Current listing for a product id or slug. Raises ``ObjectNotFoundError``."""
        ...


class FakeProductDirectory(ProductDirectory):
    """In-memory directory for development and tests."""

    def __init__(self, listings: list[ProductListing] | None = None) -> None:
        self.listings: dict[str, ProductListing] = {}
        for listing in listings or []:
            self.put(listing)

    def put(self, listing: ProductListing) -> None:
        self.listings[str(listing.product_id)] = listing

    def find(self, product_id: str) -> ProductListing:
        try:
            return self.listings[str(product_id)]
        except KeyError:
            raise ObjectNotFoundError({"_entity": "Product not found"}) from None


_current_directory: ProductDirectory | None = None


def get_product_directory() -> ProductDirectory:
    """Return the active directory. Defaults to an empty ``FakeProductDirectory``."""
    global _current_directory
    if _current_directory is None:
        _current_directory = FakeProductDirectory()
    return _current_directory


def set_product_directory(directory: ProductDirectory) -> None:
    global _current_directory
    _current_directory = directory


def reset_product_directory() -> None:
    global _current_directory
    _current_directory = None
