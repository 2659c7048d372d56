"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Quantities and addresses are deliberately loose here:
the domain owns those rules and reports them in its own error format.
"""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None


class SnapshotItemSchema(BaseModel):
    """A stored cart line. Only ``product`` and ``quantity`` are trusted on restore."""

    product: str
    name: str | None = None
    image: str | None = None
    price: float | None = None
    countInStock: int | None = None  # noqa: N815
    quantity: int


class SnapshotAddressSchema(BaseModel):
    address: str | None = None
    city: str | None = None
    postalCode: str | None = None  # noqa: N815
    country: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": None,
                    "session_id": "sess-7f3a",
                }
            ]
        }
    }


class RestoreCartRequest(BaseModel):
    """Cart state exactly as the web client stores it."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str | None = None
    session_id: str | None = None
    cart_items: list[SnapshotItemSchema] = Field(default_factory=list, alias="cartItems")
    shipping_address: SnapshotAddressSchema | None = Field(default=None, alias="shippingAddress")
    payment_method: str | None = Field(default=None, alias="paymentMethod")


class CartItemRequest(BaseModel):
    """The product to add and how many. Name, price and stock are looked up."""

    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "damascus-katana",
                    "quantity": 1,
                }
            ]
        }
    }


class PaymentMethodRequest(BaseModel):
    payment_method: str


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class BeginCheckoutRequest(BaseModel):
    cart_id: str


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PaymentResultRequest(BaseModel):
    """Confirmation returned by the payment provider, stored as-is."""

    id: str | None = None
    status: str | None = None
    update_time: str | None = None
    email_address: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class CheckoutIdResponse(BaseModel):
    checkout_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CartItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    available_stock: int
    quantity: int


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str | None = None
    session_id: str | None = None
    items: list[CartItemResponse]
    shipping_address: AddressSchema | None = None
    payment_method: str | None = None
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float


class CheckoutResponse(BaseModel):
    checkout_id: str
    cart_id: str
    customer_id: str
    step: str
    order_id: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    quantity: int


class PaymentResultResponse(BaseModel):
    id: str | None = None
    status: str | None = None
    update_time: str | None = None
    email_address: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    payment_method: str
    payment_result: PaymentResultResponse | None = None
    items_price: float
    shipping_price: float
    tax_price: float
    total_price: float
    is_paid: bool
    paid_at: str | None = None
    is_delivered: bool
    delivered_at: str | None = None
    created_at: str | None = None
