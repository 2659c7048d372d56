"""FastAPI routes for the Ordering domain: carts, checkout and orders."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddressSchema,
    BeginCheckoutRequest,
    CartIdResponse,
    CartItemRequest,
    CartItemResponse,
    CartResponse,
    CheckoutIdResponse,
    CheckoutResponse,
    CreateCartRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    PaymentMethodRequest,
    PaymentResultRequest,
    PaymentResultResponse,
    RestoreCartRequest,
    StatusResponse,
)
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import ClearCart, RemoveFromCart, add_product_to_cart
from ordering.cart.management import CreateCart, SetPaymentMethod, SetShippingAddress, restore_cart
from ordering.cart.snapshot import to_snapshot
from ordering.checkout.checkout import CheckoutSession
from ordering.checkout.flow import BeginCheckout, RestartCheckout, SubmitPaymentMethod, SubmitShippingAddress
from ordering.checkout.placement import place_order
from ordering.order.delivery import MarkOrderDelivered
from ordering.order.payment import MarkOrderPaid
from ordering.order.store import get_order_store
from shared.auth import CurrentUser, current_user, require_admin, require_user
from shared.errors import ForbiddenError, UnauthenticatedError


def _iso(value):
    return value.isoformat() if value else None


def _address(value):
    if value is None:
        return None
    return AddressSchema(
        address=value.address,
        city=value.city,
        postal_code=value.postal_code,
        country=value.country,
    )


def _cart_response(cart) -> CartResponse:
    pricing = cart.recompute_totals()
    return CartResponse(
        cart_id=str(cart.id),
        customer_id=str(cart.customer_id) if cart.customer_id else None,
        session_id=cart.session_id,
        items=[
            CartItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                image=item.image,
                unit_price=item.unit_price,
                available_stock=item.available_stock,
                quantity=item.quantity,
            )
            for item in cart.items
        ],
        shipping_address=_address(cart.shipping_address),
        payment_method=cart.payment_method,
        **pricing.to_dict(),
    )


def _checkout_response(session) -> CheckoutResponse:
    return CheckoutResponse(
        checkout_id=str(session.id),
        cart_id=str(session.cart_id),
        customer_id=str(session.customer_id),
        step=session.step,
        order_id=str(session.order_id) if session.order_id else None,
    )


def _order_response(order) -> OrderResponse:
    result = order.payment_result
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                image=item.image,
                unit_price=float(item.price()),
                quantity=item.quantity,
            )
            for item in order.items
        ],
        shipping_address=_address(order.shipping_address),
        payment_method=order.payment_method,
        payment_result=(
            PaymentResultResponse(
                id=result.payment_id,
                status=result.status,
                update_time=result.update_time,
                email_address=result.email_address,
            )
            if result
            else None
        ),
        **order.pricing().to_dict(),
        is_paid=bool(order.is_paid),
        paid_at=_iso(order.paid_at),
        is_delivered=bool(order.is_delivered),
        delivered_at=_iso(order.delivered_at),
        created_at=_iso(order.created_at),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _claim_customer(customer_id: str | None, user: CurrentUser | None) -> None:
    """A cart can only be opened in the name of the signed-in customer."""
    if not customer_id:
        return
    if user is None:
        raise UnauthenticatedError("Sign in to open a customer cart")
    if str(customer_id) != str(user.id):
        raise ForbiddenError("Cannot open a cart for another customer")


def _accessible_cart(cart_id: str, user: CurrentUser | None):
    """Guest carts are open to whoever holds the id; a customer's cart only to that customer."""
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    if cart.customer_id:
        if user is None:
            raise UnauthenticatedError("Sign in to use this cart")
        if str(cart.customer_id) != str(user.id):
            raise ForbiddenError("This cart belongs to another customer")
    return cart


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest, user: CurrentUser | None = Depends(current_user)) -> CartIdResponse:
    _claim_customer(body.customer_id, user)
    command = CreateCart(
        customer_id=body.customer_id,
        session_id=body.session_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.post("/restore", status_code=201, response_model=CartIdResponse)
async def restore_cart_from_snapshot(
    body: RestoreCartRequest, user: CurrentUser | None = Depends(current_user)
) -> CartIdResponse:
    """Rebuild a cart from browser storage. Lines are repriced from the catalogue."""
    _claim_customer(body.customer_id, user)
    snapshot = body.model_dump(by_alias=True, exclude={"customer_id", "session_id"}, exclude_none=True)
    result = restore_cart(snapshot, customer_id=body.customer_id, session_id=body.session_id)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, user: CurrentUser | None = Depends(current_user)) -> CartResponse:
    return _cart_response(_accessible_cart(cart_id, user))


@cart_router.get("/{cart_id}/snapshot")
async def get_cart_snapshot(cart_id: str, user: CurrentUser | None = Depends(current_user)) -> dict:
    return to_snapshot(_accessible_cart(cart_id, user))


@cart_router.put("/{cart_id}/items", response_model=CartResponse)
async def put_cart_item(
    cart_id: str, body: CartItemRequest, user: CurrentUser | None = Depends(current_user)
) -> CartResponse:
    """Add a product or replace its quantity. Price and stock come from the catalogue."""
    _accessible_cart(cart_id, user)
    add_product_to_cart(cart_id, body.product_id, body.quantity)
    return _cart_response(current_domain.repository_for(ShoppingCart).get(cart_id))


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    cart_id: str, product_id: str, user: CurrentUser | None = Depends(current_user)
) -> CartResponse:
    _accessible_cart(cart_id, user)
    command = RemoveFromCart(
        cart_id=cart_id,
        product_id=product_id,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(current_domain.repository_for(ShoppingCart).get(cart_id))


@cart_router.delete("/{cart_id}/items", response_model=CartResponse)
async def clear_cart(cart_id: str, user: CurrentUser | None = Depends(current_user)) -> CartResponse:
    _accessible_cart(cart_id, user)
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return _cart_response(current_domain.repository_for(ShoppingCart).get(cart_id))


@cart_router.put("/{cart_id}/shipping-address", response_model=StatusResponse)
async def set_cart_shipping_address(
    cart_id: str, body: AddressSchema, user: CurrentUser | None = Depends(current_user)
) -> StatusResponse:
    _accessible_cart(cart_id, user)
    command = SetShippingAddress(
        cart_id=cart_id,
        address=body.address,
        city=body.city,
        postal_code=body.postal_code,
        country=body.country,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/payment-method", response_model=StatusResponse)
async def set_cart_payment_method(
    cart_id: str, body: PaymentMethodRequest, user: CurrentUser | None = Depends(current_user)
) -> StatusResponse:
    _accessible_cart(cart_id, user)
    command = SetPaymentMethod(
        cart_id=cart_id,
        payment_method=body.payment_method,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def _owned_session(checkout_id: str, user: CurrentUser):
    session = current_domain.repository_for(CheckoutSession).get(checkout_id)
    if str(session.customer_id) != str(user.id):
        raise ForbiddenError("This checkout belongs to another customer")
    return session


@checkout_router.post("", status_code=201, response_model=CheckoutIdResponse)
async def begin_checkout(body: BeginCheckoutRequest, user: CurrentUser = Depends(require_user)) -> CheckoutIdResponse:
    command = BeginCheckout(cart_id=body.cart_id, customer_id=user.id)
    result = current_domain.process(command, asynchronous=False)
    return CheckoutIdResponse(checkout_id=result)


@checkout_router.get("/{checkout_id}", response_model=CheckoutResponse)
async def get_checkout(checkout_id: str, user: CurrentUser = Depends(require_user)) -> CheckoutResponse:
    return _checkout_response(_owned_session(checkout_id, user))


@checkout_router.put("/{checkout_id}/shipping", response_model=CheckoutResponse)
async def submit_checkout_shipping(
    checkout_id: str, body: AddressSchema, user: CurrentUser = Depends(require_user)
) -> CheckoutResponse:
    _owned_session(checkout_id, user)
    command = SubmitShippingAddress(
        checkout_id=checkout_id,
        address=body.address,
        city=body.city,
        postal_code=body.postal_code,
        country=body.country,
    )
    current_domain.process(command, asynchronous=False)
    return _checkout_response(_owned_session(checkout_id, user))


@checkout_router.put("/{checkout_id}/payment", response_model=CheckoutResponse)
async def submit_checkout_payment(
    checkout_id: str, body: PaymentMethodRequest, user: CurrentUser = Depends(require_user)
) -> CheckoutResponse:
    _owned_session(checkout_id, user)
    command = SubmitPaymentMethod(checkout_id=checkout_id, payment_method=body.payment_method)
    current_domain.process(command, asynchronous=False)
    return _checkout_response(_owned_session(checkout_id, user))


@checkout_router.put("/{checkout_id}/restart", response_model=CheckoutResponse)
async def restart_checkout(checkout_id: str, user: CurrentUser = Depends(require_user)) -> CheckoutResponse:
    _owned_session(checkout_id, user)
    current_domain.process(RestartCheckout(checkout_id=checkout_id), asynchronous=False)
    return _checkout_response(_owned_session(checkout_id, user))


@checkout_router.post("/{checkout_id}/place", status_code=201, response_model=OrderIdResponse)
async def place_checkout_order(checkout_id: str, user: CurrentUser = Depends(require_user)) -> OrderIdResponse:
    """Reserve stock, record the order, then empty the cart.

    409 when stock ran out (the body lists the short products), 503 when the
    order could not be saved. In both cases the checkout stays at Review.
    """
    _owned_session(checkout_id, user)
    order_id = place_order(checkout_id, user.id)
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _visible_order(order_id: str, user: CurrentUser):
    order = get_order_store().get_order(order_id)
    if not user.is_admin and str(order.customer_id) != str(user.id):
        raise ForbiddenError("Not authorized to view this order")
    return order


@order_router.get("/mine", response_model=list[OrderResponse])
async def list_my_orders(user: CurrentUser = Depends(require_user)) -> list[OrderResponse]:
    return [_order_response(order) for order in get_order_store().list_orders_for_user(user.id)]


@order_router.get("", response_model=list[OrderResponse])
async def list_all_orders(user: CurrentUser = Depends(require_admin)) -> list[OrderResponse]:  # noqa: ARG001
    return [_order_response(order) for order in get_order_store().list_orders()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: CurrentUser = Depends(require_user)) -> OrderResponse:
    return _order_response(_visible_order(order_id, user))


@order_router.put("/{order_id}/pay", response_model=OrderResponse)
async def pay_order(
    order_id: str, body: PaymentResultRequest, user: CurrentUser = Depends(require_user)
) -> OrderResponse:
    _visible_order(order_id, user)
    command = MarkOrderPaid(
        order_id=order_id,
        payment_id=body.id,
        status=body.status,
        update_time=body.update_time,
        email_address=body.email_address,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(get_order_store().get_order(order_id))


@order_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str, user: CurrentUser = Depends(require_admin)) -> OrderResponse:  # noqa: ARG001
    current_domain.process(MarkOrderDelivered(order_id=order_id), asynchronous=False)
    return _order_response(get_order_store().get_order(order_id))
