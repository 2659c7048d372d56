"""Support bounded context: the contact form inbox and newsletter subscriptions.

Both are open to anonymous visitors for writing and to admins for reading and
housekeeping.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

support = Domain(name="support")

logger = structlog.get_logger(__name__)
