"""Centralised environment configuration for Baxoq.Store.

Every environment variable the application reads is resolved here, once, at
import time. Protean's own settings live in each context's ``domain.toml``.
"""

import os

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()
IS_PRODUCTION = ENVIRONMENT in ("production", "prod")

# Tokens
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-access-secret")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "change-me-refresh-secret")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
REFRESH_COOKIE_NAME = "refreshToken"

# HTTP
FRONTEND_URL = os.getenv("FRONTEND_URL", "*")

if IS_PRODUCTION and JWT_SECRET.startswith("change-me"):
    raise RuntimeError("JWT_SECRET must be set in production")
