"""Application tests for product administration, reviews and stock control."""

import json

import pytest
from catalogue.product.management import CreateProduct, DeleteProduct, UpdateProduct
from catalogue.product.product import Product
from catalogue.product.reviews import AddProductReview
from catalogue.product.stock import CatalogueStockLedger, ReleaseStock, ReserveStock
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.errors import StockExhausted
from shared.stock import StockLine


def _create(**overrides):
    defaults = {
        "name": "Bukhara Dagger",
        "category": "dagger",
        "description": "Engraved ceremonial dagger.",
        "price": 150.0,
        "count_in_stock": 4,
        "images": json.dumps(["/img/bukhara.jpg"]),
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


def _product(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestCreateProduct:
    def test_create_persists(self):
        product = _product(_create())
        assert product.slug == "bukhara-dagger"
        assert product.image_list() == ["/img/bukhara.jpg"]

    def test_create_with_details(self):
        product_id = _create(details=json.dumps({"material": "Silver", "era": "19th century"}))
        assert _product(product_id).details.era == "19th century"

    def test_duplicate_name_is_rejected(self):
        _create()
        with pytest.raises(ValidationError) as exc_info:
            _create()
        assert "name" in exc_info.value.messages


class TestUpdateProduct:
    def test_partial_update(self):
        product_id = _create()
        current_domain.process(UpdateProduct(product_id=product_id, price=120.0), asynchronous=False)

        product = _product(product_id)
        assert product.price == 120.0
        assert product.name == "Bukhara Dagger"

    def test_rename_to_existing_name_is_rejected(self):
        _create(name="Khiva Sword", category="sword")
        product_id = _create()
        with pytest.raises(ValidationError):
            current_domain.process(UpdateProduct(product_id=product_id, name="Khiva Sword"), asynchronous=False)

    def test_update_missing_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateProduct(product_id="missing", price=1.0), asynchronous=False)


class TestDeleteProduct:
    def test_delete(self):
        product_id = _create()
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _product(product_id)


class TestReviews:
    def test_review_updates_rating(self):
        product_id = _create()
        current_domain.process(
            AddProductReview(product_id=product_id, user_id="user-1", name="Aziz", rating=4, comment="Solid"),
            asynchronous=False,
        )
        product = _product(product_id)
        assert product.num_reviews == 1
        assert product.rating == 4.0
        assert product.reviews[0].name == "Aziz"


class TestStockControl:
    def test_reserve_decrements_every_product(self):
        first, second = _create(), _create(name="Khiva Sword", category="sword", count_in_stock=2)
        lines = json.dumps([{"product_id": first, "quantity": 3}, {"product_id": second, "quantity": 2}])

        current_domain.process(ReserveStock(lines=lines), asynchronous=False)

        assert _product(first).count_in_stock == 1
        assert _product(second).count_in_stock == 0

    def test_reservation_is_all_or_nothing(self):
        first, second = _create(), _create(name="Khiva Sword", category="sword", count_in_stock=1)
        lines = json.dumps([{"product_id": first, "quantity": 1}, {"product_id": second, "quantity": 2}])

        with pytest.raises(StockExhausted) as exc_info:
            current_domain.process(ReserveStock(lines=lines), asynchronous=False)

        assert [s.product_id for s in exc_info.value.shortages] == [second]
        assert _product(first).count_in_stock == 4
        assert _product(second).count_in_stock == 1

    def test_repeated_product_lines_are_merged(self):
        product_id = _create(count_in_stock=3)
        lines = json.dumps([{"product_id": product_id, "quantity": 2}, {"product_id": product_id, "quantity": 2}])
        with pytest.raises(StockExhausted):
            current_domain.process(ReserveStock(lines=lines), asynchronous=False)

    def test_missing_product_counts_as_out_of_stock(self):
        with pytest.raises(StockExhausted) as exc_info:
            current_domain.process(
                ReserveStock(lines=json.dumps([{"product_id": "ghost", "quantity": 1}])),
                asynchronous=False,
            )
        assert exc_info.value.shortages[0].available == 0

    def test_release_gives_stock_back(self):
        product_id = _create(count_in_stock=1)
        current_domain.process(
            ReleaseStock(lines=json.dumps([{"product_id": product_id, "quantity": 2}])),
            asynchronous=False,
        )
        assert _product(product_id).count_in_stock == 3


class TestCatalogueStockLedger:
    def test_ledger_reserves_and_releases(self):
        product_id = _create(count_in_stock=5)
        ledger = CatalogueStockLedger()

        ledger.reserve([StockLine(product_id, 2)])
        assert _product(product_id).count_in_stock == 3

        ledger.release([StockLine(product_id, 2)])
        assert _product(product_id).count_in_stock == 5

    def test_ledger_reports_shortage(self):
        product_id = _create(count_in_stock=1)
        with pytest.raises(StockExhausted):
            CatalogueStockLedger().reserve([StockLine(product_id, 2)])
