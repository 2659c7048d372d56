"""Admin view of the mailing list, most recent subscriptions first."""

import math
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from support.newsletter.subscription import NewsletterSubscription

PAGE_SIZE = 20


@dataclass
class SubscriptionPage:
    items: list = field(default_factory=list)
    page: int = 1
    pages: int = 0
    total: int = 0


def list_subscriptions(page=1):
    page = max(int(page or 1), 1)
    result = (
        current_domain.repository_for(NewsletterSubscription)
        ._dao.query.order_by("-subscribed_at")
        .limit(PAGE_SIZE)
        .offset(PAGE_SIZE * (page - 1))
        .all()
    )
    return SubscriptionPage(
        items=list(result.items),
        page=page,
        pages=math.ceil(result.total / PAGE_SIZE),
        total=result.total,
    )
