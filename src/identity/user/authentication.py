"""Credential checks for login and token refresh."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.projections.user_lookup import find_user_id
from identity.security import verify_password
from identity.user.user import User, normalize_email
from shared.errors import UnauthenticatedError

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def authenticate(email, password):
    """Return the ``User`` behind a matching email and password.

    An unknown email and a wrong password raise the same error.
    """
    user_id = find_user_id(normalize_email(email))
    if user_id is None:
        logger.info("Login rejected", reason="unknown_email")
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    user = current_domain.repository_for(User).get(user_id)
    if not verify_password(password or "", user.password_hash):
        logger.info("Login rejected", reason="bad_password", user_id=user_id)
        raise UnauthenticatedError(INVALID_CREDENTIALS)
    return user


def user_for_refresh(user_id):
    """Load the account a refresh token was issued to."""
    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError as exc:
        raise UnauthenticatedError("User not found") from exc
