"""Product aggregate root with the Review entity and the Details value object."""

import json
import re
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from catalogue.domain import catalogue

META_DESCRIPTION_LENGTH = 160


class ProductCategory(Enum):
    SWORD = "sword"
    KNIFE = "knife"
    DAGGER = "dagger"
    ACCESSORY = "accessory"


def slugify(name):
    """URL slug for a product name: ``"Tashkent Pichoq #2"`` -> ``"tashkent-pichoq-2"``."""
    slug = re.sub(r"[^\w\s-]", "", (name or "").lower())
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


@catalogue.value_object(part_of="Product")
class ProductDetails:
    """Physical and historical details of a blade."""

    material: String(max_length=100)
    length_cm: Float(min_value=0.0)
    weight_g: Float(min_value=0.0)
    origin: String(max_length=100)
    era: String(max_length=100)
    style: String(max_length=100)


@catalogue.entity(part_of="Product")
class ProductReview:
    """A customer's rating of a product. One per customer per product."""

    user_id: Identifier(required=True)
    name: String(required=True, max_length=50)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)
    created_at: DateTime(default=datetime.now)


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=200)
    slug: String(required=True, max_length=220)
    images: Text()  # JSON array of image URLs
    category: String(required=True, choices=ProductCategory)
    sub_category: String(max_length=100)
    description: Text(required=True)
    details: ValueObject(ProductDetails)
    reviews: HasMany(ProductReview)
    rating: Float(default=0.0)
    num_reviews: Integer(default=0)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(default=0.0, min_value=0.0)
    count_in_stock: Integer(default=0, min_value=0)
    is_featured: Boolean(default=False)
    is_collectible: Boolean(default=False)
    meta_title: String(max_length=200)
    meta_description: String(max_length=META_DESCRIPTION_LENGTH)
    meta_keywords: String(max_length=500)
    video_url: String(max_length=500, default="")
    created_by: Identifier()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def num_reviews_must_match_reviews(self):
        if self.num_reviews != len(self.reviews):
            raise ValidationError({"num_reviews": ["Review count is out of step with the reviews"]})

    @classmethod
    def create(
        cls,
        name,
        category,
        description,
        price,
        count_in_stock=0,
        sub_category=None,
        images=None,
        details=None,
        is_featured=False,
        is_collectible=False,
        meta_title=None,
        meta_description=None,
        meta_keywords=None,
        video_url=None,
        created_by=None,
    ):
        from catalogue.product.events import ProductCreated

        if isinstance(details, dict):
            details = ProductDetails(**details)

        product = cls(
            name=name,
            slug=slugify(name),
            category=category,
            sub_category=sub_category,
            description=description,
            price=price,
            count_in_stock=count_in_stock or 0,
            images=json.dumps(list(images or [])),
            details=details,
            is_featured=bool(is_featured),
            is_collectible=bool(is_collectible),
            meta_title=meta_title or name,
            meta_description=meta_description or (description or "")[:META_DESCRIPTION_LENGTH],
            meta_keywords=meta_keywords or "",
            video_url=video_url or "",
            created_by=created_by,
        )

        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=product.name,
                slug=product.slug,
                category=product.category,
                price=product.price,
                count_in_stock=product.count_in_stock,
                created_at=product.created_at,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Admin edits
    # -------------------------------------------------------------------
    def update(self, **changes):
        """Apply a partial update. ``None`` means "leave as is"; the slug follows the name."""
        from catalogue.product.events import ProductUpdated

        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            return

        if "images" in changes:
            changes["images"] = json.dumps(list(changes["images"]))
        if isinstance(changes.get("details"), dict):
            changes["details"] = ProductDetails(**changes["details"])

        for key, value in changes.items():
            setattr(self, key, value)
        if "name" in changes:
            self.slug = slugify(self.name)
        self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                changed_fields=json.dumps(sorted(changes)),
                updated_at=self.updated_at,
            )
        )

    def image_list(self):
        return json.loads(self.images) if self.images else []

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def add_review(self, user_id, name, rating, comment):
        from catalogue.product.events import ProductReviewAdded

        if any(str(r.user_id) == str(user_id) for r in self.reviews):
            raise ValidationError({"reviews": ["Product already reviewed"]})
        if not comment or not str(comment).strip():
            raise ValidationError({"comment": ["Please provide both rating and comment"]})

        with atomic_change(self):
            self.add_reviews(ProductReview(user_id=user_id, name=name, rating=rating, comment=comment))
            self.num_reviews = len(self.reviews)
            self.rating = sum(r.rating for r in self.reviews) / len(self.reviews)
        self.updated_at = datetime.now()

        self.raise_(
            ProductReviewAdded(
                product_id=str(self.id),
                user_id=str(user_id),
                rating=rating,
                new_average=self.rating,
                num_reviews=self.num_reviews,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def has_stock_for(self, quantity):
        return (self.count_in_stock or 0) >= quantity

    def take_stock(self, quantity):
        from catalogue.product.events import StockReserved

        if not self.has_stock_for(quantity):
            raise ValidationError({"count_in_stock": [f"Only {self.count_in_stock} of {self.name} left"]})
        self.count_in_stock -= quantity
        self.updated_at = datetime.now()

        self.raise_(StockReserved(product_id=str(self.id), quantity=quantity, remaining=self.count_in_stock))

    def return_stock(self, quantity):
        from catalogue.product.events import StockReleased

        self.count_in_stock = (self.count_in_stock or 0) + quantity
        self.updated_at = datetime.now()

        self.raise_(StockReleased(product_id=str(self.id), quantity=quantity, remaining=self.count_in_stock))
