"""Baxoq.Store FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the domain.toml overlay (memory stores by default,
# sqlite under "production").
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from support.domain import support  # noqa: E402

from shared import config
from shared.http import register_exception_handlers
from shared.logging import request_context

identity.init()
catalogue.init()
ordering.init()
support.init()

# ---------------------------------------------------------------------------
# Cross-context wiring
# ---------------------------------------------------------------------------
# Cart lines are priced from the catalogue, and placing an order reserves
# stock against its products.
from catalogue.product.listing import CatalogueProductDirectory  # noqa: E402
from catalogue.product.stock import CatalogueStockLedger  # noqa: E402
from shared.products import set_product_directory  # noqa: E402
from shared.stock import set_stock_ledger  # noqa: E402

set_product_directory(CatalogueProductDirectory())
set_stock_ledger(CatalogueStockLedger())

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/users": identity,
    "/products": catalogue,
    "/carts": ordering,
    "/checkout": ordering,
    "/orders": ordering,
    "/contact": support,
    "/newsletter": support,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Baxoq.Store API",
    description="Storefront for Uzbek knives: Identity, Catalogue, Ordering and Support domains",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=config.FRONTEND_URL != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with request_context(domain.name, request.url.path), domain.domain_context():
            return await call_next(request)
    # No domain match: health check and docs pass through
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import product_router  # noqa: E402
from identity.api import router as identity_router  # noqa: E402
from ordering.api import cart_router, checkout_router, order_router  # noqa: E402
from support.api import contact_router, newsletter_router  # noqa: E402

app.include_router(identity_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(contact_router)
app.include_router(newsletter_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "identity": {"name": identity.name},
                "catalogue": {"name": catalogue.name},
                "ordering": {"name": ordering.name},
                "support": {"name": support.name},
            },
        }
    )
