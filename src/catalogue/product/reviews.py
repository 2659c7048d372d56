"""Product reviews: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class AddProductReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    name: String(required=True, max_length=50)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)


@catalogue.command_handler(part_of=Product)
class ProductReviewHandler:
    @handle(AddProductReview)
    def add_product_review(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.add_review(
            user_id=command.user_id,
            name=command.name,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(product)
