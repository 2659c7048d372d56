"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class ProductDetailsSchema(BaseModel):
    material: str | None = None
    length_cm: float | None = Field(None, ge=0)
    weight_g: float | None = Field(None, ge=0)
    origin: str | None = None
    era: str | None = None
    style: str | None = None


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Uzbek Pichoq Classic",
                    "category": "knife",
                    "sub_category": "pichoq",
                    "description": "Hand-forged Chust pichoq with a horn handle.",
                    "price": 89.0,
                    "count_in_stock": 12,
                    "images": ["/images/pichoq-classic.jpg"],
                    "details": {"material": "Carbon steel", "length_cm": 28, "origin": "Chust"},
                    "is_featured": True,
                }
            ]
        }
    }

    name: str = Field(..., max_length=200)
    category: str = Field(..., max_length=20)
    sub_category: str | None = Field(None, max_length=100)
    description: str
    price: float = Field(..., ge=0)
    count_in_stock: int = Field(0, ge=0)
    images: list[str] = Field(default_factory=list)
    details: ProductDetailsSchema | None = None
    is_featured: bool = False
    is_collectible: bool = False
    meta_title: str | None = Field(None, max_length=200)
    meta_description: str | None = Field(None, max_length=160)
    meta_keywords: str | None = Field(None, max_length=500)
    video_url: str | None = Field(None, max_length=500)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=200)
    category: str | None = Field(None, max_length=20)
    sub_category: str | None = Field(None, max_length=100)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    discount_price: float | None = Field(None, ge=0)
    count_in_stock: int | None = Field(None, ge=0)
    images: list[str] | None = None
    details: ProductDetailsSchema | None = None
    is_featured: bool | None = None
    is_collectible: bool | None = None
    meta_title: str | None = Field(None, max_length=200)
    meta_description: str | None = Field(None, max_length=160)
    meta_keywords: str | None = Field(None, max_length=500)
    video_url: str | None = Field(None, max_length=500)


class ProductReviewRequest(BaseModel):
    rating: int
    comment: str


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ProductReviewResponse(BaseModel):
    user_id: str
    name: str
    rating: int
    comment: str
    created_at: str | None = None


class ProductResponse(BaseModel):
    product_id: str
    name: str
    slug: str
    images: list[str]
    category: str
    sub_category: str | None = None
    description: str
    details: ProductDetailsSchema | None = None
    reviews: list[ProductReviewResponse] = Field(default_factory=list)
    rating: float
    num_reviews: int
    price: float
    discount_price: float
    count_in_stock: int
    is_featured: bool
    is_collectible: bool
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None
    video_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ProductPageResponse(BaseModel):
    products: list[ProductResponse]
    page: int
    pages: int
    total_products: int
