"""Domain initialization and configuration."""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging()

logger = structlog.get_logger(__name__)

# Domain Composition Root
catalogue = Domain(name="catalogue")
