"""Client-local cart state.

The web client keeps the cart in browser storage under three well-known keys
and sends them back verbatim to restore a cart after a reload or on another
device::

    {
        "cartItems": [{"product", "name", "image", "price", "countInStock", "quantity"}],
        "shippingAddress": {"address", "city", "postalCode", "country"},
        "paymentMethod": "creditCard",
    }
"""

import json

CART_ITEMS_KEY = "cartItems"
SHIPPING_ADDRESS_KEY = "shippingAddress"
PAYMENT_METHOD_KEY = "paymentMethod"


def to_snapshot(cart) -> dict:
    address = cart.shipping_address
    return {
        CART_ITEMS_KEY: [
            {
                "product": str(item.product_id),
                "name": item.name,
                "image": item.image or "",
                "price": item.unit_price,
                "countInStock": item.available_stock,
                "quantity": item.quantity,
            }
            for item in cart.items
        ],
        SHIPPING_ADDRESS_KEY: (
            {
                "address": address.address or "",
                "city": address.city or "",
                "postalCode": address.postal_code or "",
                "country": address.country or "",
            }
            if address
            else {}
        ),
        PAYMENT_METHOD_KEY: cart.payment_method or "",
    }


def load_snapshot(raw) -> dict:
    """Accept a snapshot as a dict or its JSON text."""
    data = json.loads(raw) if isinstance(raw, str) else dict(raw or {})
    return {
        CART_ITEMS_KEY: data.get(CART_ITEMS_KEY) or [],
        SHIPPING_ADDRESS_KEY: data.get(SHIPPING_ADDRESS_KEY) or {},
        PAYMENT_METHOD_KEY: data.get(PAYMENT_METHOD_KEY) or "",
    }


def line_from_snapshot(entry: dict) -> dict:
    """Translate one stored line into ``ShoppingCart.add_or_replace_item`` arguments."""
    return {
        "product_id": entry.get("product"),
        "name": entry.get("name"),
        "image": entry.get("image") or None,
        "unit_price": entry.get("price"),
        "available_stock": int(entry.get("countInStock") or 0),
        "quantity": int(entry.get("quantity") or 0),
    }


def address_from_snapshot(entry: dict) -> dict | None:
    address = {
        "address": entry.get("address") or None,
        "city": entry.get("city") or None,
        "postal_code": entry.get("postalCode") or None,
        "country": entry.get("country") or None,
    }
    return address if any(address.values()) else None
