"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    count_in_stock: Integer(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductUpdated:
    """An admin edited a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON: sorted list of field names
    updated_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductReviewAdded:
    """A customer reviewed a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    new_average: Float(required=True)
    num_reviews: Integer(required=True)


@catalogue.event(part_of="Product")
class StockReserved:
    """Stock was set aside for an order being placed."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@catalogue.event(part_of="Product")
class StockReleased:
    """Previously reserved stock was given back."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
