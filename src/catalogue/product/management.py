"""Product administration: commands and handler.

Product names are unique across the catalogue, and the slug is always derived
from the name, so two products can never share a URL.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200)
    category: String(required=True, max_length=20)
    sub_category: String(max_length=100)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    count_in_stock: Integer(default=0, min_value=0)
    images: Text()  # JSON array of image URLs
    details: Text()  # JSON object: material, length_cm, weight_g, origin, era, style
    is_featured: Boolean(default=False)
    is_collectible: Boolean(default=False)
    meta_title: String(max_length=200)
    meta_description: String(max_length=160)
    meta_keywords: String(max_length=500)
    video_url: String(max_length=500)
    created_by: Identifier()


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=200)
    category: String(max_length=20)
    sub_category: String(max_length=100)
    description: Text()
    price: Float(min_value=0.0)
    discount_price: Float(min_value=0.0)
    count_in_stock: Integer(min_value=0)
    images: Text()
    details: Text()
    is_featured: Boolean()
    is_collectible: Boolean()
    meta_title: String(max_length=200)
    meta_description: String(max_length=160)
    meta_keywords: String(max_length=500)
    video_url: String(max_length=500)


@catalogue.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def _json(value):
    return json.loads(value) if isinstance(value, str) and value else value


def _assert_name_available(name, product_id=None):
    repo = current_domain.repository_for(Product)
    existing = repo._dao.query.filter(name=name).all().items
    if any(str(p.id) != str(product_id) for p in existing):
        raise ValidationError({"name": ["Product with this name already exists"]})


@catalogue.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        _assert_name_available(command.name)

        product = Product.create(
            name=command.name,
            category=command.category,
            sub_category=command.sub_category,
            description=command.description,
            price=command.price,
            count_in_stock=command.count_in_stock,
            images=_json(command.images),
            details=_json(command.details),
            is_featured=command.is_featured,
            is_collectible=command.is_collectible,
            meta_title=command.meta_title,
            meta_description=command.meta_description,
            meta_keywords=command.meta_keywords,
            video_url=command.video_url,
            created_by=command.created_by,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), slug=product.slug)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.name and command.name != product.name:
            _assert_name_available(command.name, product_id=product.id)

        product.update(
            name=command.name,
            category=command.category,
            sub_category=command.sub_category,
            description=command.description,
            price=command.price,
            discount_price=command.discount_price,
            count_in_stock=command.count_in_stock,
            images=_json(command.images),
            details=_json(command.details),
            is_featured=command.is_featured,
            is_collectible=command.is_collectible,
            meta_title=command.meta_title,
            meta_description=command.meta_description,
            meta_keywords=command.meta_keywords,
            video_url=command.video_url,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)

        logger.info("Product deleted", product_id=str(command.product_id), name=product.name)
