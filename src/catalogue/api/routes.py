"""FastAPI endpoints for the Catalogue domain."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    CreateProductRequest,
    ProductDetailsSchema,
    ProductIdResponse,
    ProductPageResponse,
    ProductResponse,
    ProductReviewRequest,
    ProductReviewResponse,
    StatusResponse,
    UpdateProductRequest,
)
from catalogue.product.listing import (
    ProductFilter,
    featured_products,
    get_product_by_slug_or_id,
    list_products,
    top_products,
)
from catalogue.product.management import CreateProduct, DeleteProduct, UpdateProduct
from catalogue.product.reviews import AddProductReview
from shared.auth import CurrentUser, require_admin, require_user

product_router = APIRouter(prefix="/products", tags=["products"])


def _iso(value):
    return value.isoformat() if value else None


def _product_response(product) -> ProductResponse:
    details = product.details
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        slug=product.slug,
        images=product.image_list(),
        category=product.category,
        sub_category=product.sub_category,
        description=product.description,
        details=(
            ProductDetailsSchema(
                material=details.material,
                length_cm=details.length_cm,
                weight_g=details.weight_g,
                origin=details.origin,
                era=details.era,
                style=details.style,
            )
            if details
            else None
        ),
        reviews=[
            ProductReviewResponse(
                user_id=str(review.user_id),
                name=review.name,
                rating=review.rating,
                comment=review.comment,
                created_at=_iso(review.created_at),
            )
            for review in product.reviews
        ],
        rating=product.rating or 0.0,
        num_reviews=product.num_reviews or 0,
        price=product.price,
        discount_price=product.discount_price or 0.0,
        count_in_stock=product.count_in_stock or 0,
        is_featured=bool(product.is_featured),
        is_collectible=bool(product.is_collectible),
        meta_title=product.meta_title,
        meta_description=product.meta_description,
        meta_keywords=product.meta_keywords,
        video_url=product.video_url,
        created_at=_iso(product.created_at),
        updated_at=_iso(product.updated_at),
    )


def _details_json(details):
    return json.dumps(details.model_dump(exclude_none=True)) if details else None


# --- Product queries ---


@product_router.get("", response_model=ProductPageResponse)
async def get_products(
    keyword: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    featured: bool = False,
    collectible: bool = False,
    sort: str | None = None,
    page: int = Query(1, alias="pageNumber", ge=1),
) -> ProductPageResponse:
    result = list_products(
        ProductFilter(
            keyword=keyword,
            category=category,
            min_price=min_price,
            max_price=max_price,
            featured=featured,
            collectible=collectible,
        ),
        sort=sort,
        page=page,
    )
    return ProductPageResponse(
        products=[_product_response(p) for p in result.items],
        page=result.page,
        pages=result.pages,
        total_products=result.total,
    )


@product_router.get("/top", response_model=list[ProductResponse])
async def get_top_products() -> list[ProductResponse]:
    return [_product_response(p) for p in top_products()]


@product_router.get("/featured", response_model=list[ProductResponse])
async def get_featured_products() -> list[ProductResponse]:
    return [_product_response(p) for p in featured_products()]


@product_router.get("/slug/{slug}", response_model=ProductResponse)
async def get_product_by_slug(slug: str) -> ProductResponse:
    return _product_response(get_product_by_slug_or_id(slug))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(get_product_by_slug_or_id(product_id))


# --- Product administration ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, user: CurrentUser = Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        category=body.category,
        sub_category=body.sub_category,
        description=body.description,
        price=body.price,
        count_in_stock=body.count_in_stock,
        images=json.dumps(body.images),
        details=_details_json(body.details),
        is_featured=body.is_featured,
        is_collectible=body.is_collectible,
        meta_title=body.meta_title,
        meta_description=body.meta_description,
        meta_keywords=body.meta_keywords,
        video_url=body.video_url,
        created_by=user.id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, user: CurrentUser = Depends(require_admin)  # noqa: ARG001
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        category=body.category,
        sub_category=body.sub_category,
        description=body.description,
        price=body.price,
        discount_price=body.discount_price,
        count_in_stock=body.count_in_stock,
        images=json.dumps(body.images) if body.images is not None else None,
        details=_details_json(body.details),
        is_featured=body.is_featured,
        is_collectible=body.is_collectible,
        meta_title=body.meta_title,
        meta_description=body.meta_description,
        meta_keywords=body.meta_keywords,
        video_url=body.video_url,
    )
    current_domain.process(command, asynchronous=False)
    return _product_response(get_product_by_slug_or_id(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, user: CurrentUser = Depends(require_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/reviews", status_code=201, response_model=StatusResponse)
async def add_product_review(
    product_id: str, body: ProductReviewRequest, user: CurrentUser = Depends(require_user)
) -> StatusResponse:
    command = AddProductReview(
        product_id=product_id,
        user_id=user.id,
        name=user.name or "Customer",
        rating=body.rating,
        comment=body.comment,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
