"""Error taxonomy shared by the storefront's bounded contexts.

Input problems reuse Protean's ``ValidationError`` (a field -> messages map) and
missing records reuse ``ObjectNotFoundError``. Everything else the checkout core
can run into is a ``StorefrontError`` carrying a stable ``code`` that the HTTP
layer turns into a status and a localized message.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError

NotFound = ObjectNotFoundError


class InvalidQuantity(ValidationError):
    """A cart line quantity outside ``1..available_stock``."""

    def __init__(self, quantity, available_stock):
        self.quantity = quantity
        self.available_stock = available_stock
        super().__init__(
            {"quantity": [f"Quantity must be between 1 and {available_stock}, got {quantity}"]}
        )


class StorefrontError(Exception):
    code = "storefront_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class EmptyCartError(StorefrontError):
    """The cart has no items."""

    code = "empty_cart"


class UnauthenticatedError(StorefrontError):
    """The request is not attributable to a signed-in user."""

    code = "unauthenticated"


class ForbiddenError(StorefrontError):
    """The signed-in user may not act on this resource."""

    code = "forbidden"


class PersistenceFailure(StorefrontError):
    """The order could not be written."""

    code = "persistence_failure"


@dataclass(frozen=True)
class StockShortage:
    product_id: str
    requested: int
    available: int


class StockExhausted(StorefrontError):
    """Not enough stock left for one or more products."""

    code = "stock_exhausted"

    def __init__(self, shortages: list[StockShortage]):
        self.shortages = list(shortages)
        details = ", ".join(f"{s.product_id} ({s.available} of {s.requested} left)" for s in self.shortages)
        super().__init__(f"Not enough stock: {details}")
