"""Admin view of the contact inbox, newest first."""

import math
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from support.contact.message import ContactMessage

PAGE_SIZE = 10


@dataclass
class ContactPage:
    items: list = field(default_factory=list)
    page: int = 1
    pages: int = 0
    total: int = 0


def list_contact_messages(page=1):
    page = max(int(page or 1), 1)
    result = (
        current_domain.repository_for(ContactMessage)
        ._dao.query.order_by("-created_at")
        .limit(PAGE_SIZE)
        .offset(PAGE_SIZE * (page - 1))
        .all()
    )
    return ContactPage(
        items=list(result.items),
        page=page,
        pages=math.ceil(result.total / PAGE_SIZE),
        total=result.total,
    )
