"""Support domain API package."""

from support.api.routes import contact_router, newsletter_router

__all__ = ["contact_router", "newsletter_router"]
