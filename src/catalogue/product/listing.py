"""Read-side queries over the product catalogue."""

import math
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product, ProductCategory
from shared.products import PLACEHOLDER_IMAGE, ProductDirectory, ProductListing

PAGE_SIZE = 10
TOP_PRODUCTS_LIMIT = 5
FEATURED_PRODUCTS_LIMIT = 8
DEFAULT_SORT = ["-created_at"]

# The storefront sends camelCase field names in sort specs
_SORTABLE_FIELDS = {
    "name": "name",
    "price": "price",
    "discountPrice": "discount_price",
    "discount_price": "discount_price",
    "rating": "rating",
    "numReviews": "num_reviews",
    "num_reviews": "num_reviews",
    "countInStock": "count_in_stock",
    "count_in_stock": "count_in_stock",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}


@dataclass
class ProductFilter:
    keyword: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    featured: bool = False
    collectible: bool = False


@dataclass
class ProductPage:
    items: list = field(default_factory=list)
    page: int = 1
    pages: int = 0
    total: int = 0


def parse_sort(spec):
    """Turn ``"price:asc,rating:desc"`` into Protean ordering keys."""
    if not spec:
        return list(DEFAULT_SORT)

    ordering = []
    for part in spec.split(","):
        name, _, direction = part.strip().partition(":")
        if name not in _SORTABLE_FIELDS:
            raise ValidationError({"sort": [f"Cannot sort by {name!r}"]})
        prefix = "-" if direction.strip().lower() == "desc" else ""
        ordering.append(prefix + _SORTABLE_FIELDS[name])
    return ordering


def _filtered_query(filters):
    query = current_domain.repository_for(Product)._dao.query
    if filters is None:
        return query

    if filters.keyword:
        query = query.filter(name__icontains=filters.keyword)
    if filters.category:
        if filters.category not in {c.value for c in ProductCategory}:
            raise ValidationError({"category": [f"Unknown category {filters.category!r}"]})
        query = query.filter(category=filters.category)
    if filters.featured:
        query = query.filter(is_featured=True)
    if filters.collectible:
        query = query.filter(is_collectible=True)
    if filters.min_price is not None:
        query = query.filter(price__gte=filters.min_price)
    if filters.max_price is not None:
        query = query.filter(price__lte=filters.max_price)
    return query


def list_products(filters=None, sort=None, page=1):
    page = max(int(page or 1), 1)
    result = (
        _filtered_query(filters)
        .order_by(parse_sort(sort))
        .limit(PAGE_SIZE)
        .offset(PAGE_SIZE * (page - 1))
        .all()
    )
    return ProductPage(
        items=list(result.items),
        page=page,
        pages=math.ceil(result.total / PAGE_SIZE),
        total=result.total,
    )


def get_product_by_slug_or_id(key):
    repo = current_domain.repository_for(Product)
    try:
        return repo.get(key)
    except ObjectNotFoundError:
        pass

    product = repo._dao.query.filter(slug=key).all().first
    if product is None:
        raise ObjectNotFoundError({"_entity": "Product not found"})
    return product


def top_products(limit=TOP_PRODUCTS_LIMIT):
    return current_domain.repository_for(Product)._dao.query.order_by("-rating").limit(limit).all().items


def featured_products(limit=FEATURED_PRODUCTS_LIMIT):
    return (
        current_domain.repository_for(Product)
        ._dao.query.filter(is_featured=True)
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )


class CatalogueProductDirectory(ProductDirectory):
    """``ProductDirectory`` over the catalogue's products.

    Called from other bounded contexts, so each lookup runs in the catalogue's
    own domain context. It must not be called inside another domain's unit of
    work.
    """

    def find(self, product_id):
        with catalogue.domain_context():
            product = get_product_by_slug_or_id(str(product_id))
            images = product.image_list()
            return ProductListing(
                product_id=str(product.id),
                name=product.name,
                image=images[0] if images else PLACEHOLDER_IMAGE,
                price=product.price,
                count_in_stock=product.count_in_stock or 0,
            )
