"""Tests for the Product aggregate: creation, edits, reviews and stock."""

import json

import pytest
from catalogue.product.events import (
    ProductCreated,
    ProductReviewAdded,
    ProductUpdated,
    StockReleased,
    StockReserved,
)
from catalogue.product.product import META_DESCRIPTION_LENGTH, Product, ProductDetails, slugify
from protean.exceptions import ValidationError


def _product(**overrides):
    defaults = {
        "name": "Chust Pichoq Classic",
        "category": "knife",
        "description": "Hand-forged carbon steel blade with a horn handle. " * 5,
        "price": 89.0,
        "count_in_stock": 5,
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestSlugify:
    @pytest.mark.parametrize(
        "name, slug",
        [
            ("Chust Pichoq Classic", "chust-pichoq-classic"),
            ("Tashkent Pichoq #2", "tashkent-pichoq-2"),
            ("  Damascus -- Katana  ", "damascus-katana"),
            ("under_score name", "under-score-name"),
        ],
    )
    def test_slug(self, name, slug):
        assert slugify(name) == slug


class TestCreateProduct:
    def test_defaults_are_derived_from_name_and_description(self):
        product = _product()
        assert product.slug == "chust-pichoq-classic"
        assert product.meta_title == "Chust Pichoq Classic"
        assert len(product.meta_description) == META_DESCRIPTION_LENGTH
        assert product.rating == 0.0
        assert product.num_reviews == 0

    def test_images_are_kept_in_order(self):
        product = _product(images=["/img/a.jpg", "/img/b.jpg"])
        assert product.image_list() == ["/img/a.jpg", "/img/b.jpg"]

    def test_details_from_dict(self):
        product = _product(details={"material": "Damascus steel", "length_cm": 32})
        assert product.details == ProductDetails(material="Damascus steel", length_cm=32)

    def test_unknown_category_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(category="spoon")

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(price=-1)

    def test_create_raises_event(self):
        product = _product()
        [event] = [e for e in product._events if isinstance(e, ProductCreated)]
        assert event.slug == "chust-pichoq-classic"


class TestUpdateProduct:
    def test_slug_follows_new_name(self):
        product = _product()
        product.update(name="Chust Pichoq Deluxe")
        assert product.slug == "chust-pichoq-deluxe"

    def test_none_values_are_ignored(self):
        product = _product()
        product._events.clear()

        product.update(name=None, price=99.0)

        assert product.name == "Chust Pichoq Classic"
        assert product.price == 99.0
        [event] = product._events
        assert isinstance(event, ProductUpdated)
        assert json.loads(event.changed_fields) == ["price"]

    def test_empty_update_raises_nothing(self):
        product = _product()
        product._events.clear()
        product.update()
        assert product._events == []


class TestReviews:
    def test_rating_is_mean_of_reviews(self):
        product = _product()
        product.add_review("user-1", "Aziz", 5, "Razor sharp")
        product.add_review("user-2", "Lola", 4, "Beautiful handle")

        assert product.num_reviews == 2
        assert product.rating == 4.5

    def test_one_review_per_user(self):
        product = _product()
        product.add_review("user-1", "Aziz", 5, "Razor sharp")
        with pytest.raises(ValidationError):
            product.add_review("user-1", "Aziz", 1, "Changed my mind")

    def test_blank_comment_is_rejected(self):
        with pytest.raises(ValidationError):
            _product().add_review("user-1", "Aziz", 5, "   ")

    def test_rating_out_of_range_is_rejected(self):
        with pytest.raises(ValidationError):
            _product().add_review("user-1", "Aziz", 6, "Too good")

    def test_review_raises_event(self):
        product = _product()
        product.add_review("user-1", "Aziz", 3, "Fine")
        [event] = [e for e in product._events if isinstance(e, ProductReviewAdded)]
        assert event.new_average == 3.0
        assert event.num_reviews == 1


class TestStock:
    def test_take_and_return_stock(self):
        product = _product(count_in_stock=5)
        product.take_stock(3)
        assert product.count_in_stock == 2
        product.return_stock(1)
        assert product.count_in_stock == 3

        kinds = [type(e) for e in product._events]
        assert StockReserved in kinds
        assert StockReleased in kinds

    def test_cannot_take_more_than_in_stock(self):
        product = _product(count_in_stock=1)
        with pytest.raises(ValidationError):
            product.take_stock(2)
        assert product.count_in_stock == 1
