"""Newsletter subscription commands and handler.

Subscribing is keyed by email address, never by id, so the same public form
both signs up new readers and updates or revives existing subscriptions.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from shared.email import normalize_email
from support.domain import support
from support.newsletter.subscription import NewsletterSubscription

logger = structlog.get_logger(__name__)

SUBSCRIBED = "subscribed"
RESUBSCRIBED = "resubscribed"
PREFERENCES_UPDATED = "preferences_updated"


@support.command(part_of="NewsletterSubscription")
class SubscribeToNewsletter:
    email = String(required=True, max_length=254)
    preferences = Text()  # JSON object: topic -> bool


@support.command(part_of="NewsletterSubscription")
class UnsubscribeFromNewsletter:
    email = String(required=True, max_length=254)


@support.command(part_of="NewsletterSubscription")
class DeleteNewsletterSubscription:
    subscription_id = Identifier(required=True)


def find_subscription(email):
    """The subscription for an address, or ``None``."""
    return (
        current_domain.repository_for(NewsletterSubscription)
        ._dao.query.filter(email=normalize_email(email))
        .all()
        .first
    )


@support.command_handler(part_of=NewsletterSubscription)
class NewsletterHandler:
    @handle(SubscribeToNewsletter)
    def subscribe(self, command):
        """Returns ``{"subscription_id", "outcome"}``."""
        repo = current_domain.repository_for(NewsletterSubscription)
        preferences = json.loads(command.preferences) if command.preferences else None

        subscription = find_subscription(command.email)
        if subscription is None:
            subscription = NewsletterSubscription.subscribe(command.email, preferences)
            outcome = SUBSCRIBED
        else:
            outcome = RESUBSCRIBED if subscription.renew(preferences) else PREFERENCES_UPDATED
        repo.add(subscription)

        logger.info("Newsletter subscription saved", subscription_id=str(subscription.id), outcome=outcome)
        return {"subscription_id": str(subscription.id), "outcome": outcome}

    @handle(UnsubscribeFromNewsletter)
    def unsubscribe(self, command):
        subscription = find_subscription(command.email)
        if subscription is None:
            raise ObjectNotFoundError({"_entity": "Subscription not found"})

        subscription.unsubscribe()
        current_domain.repository_for(NewsletterSubscription).add(subscription)

        logger.info("Newsletter unsubscribed", subscription_id=str(subscription.id))

    @handle(DeleteNewsletterSubscription)
    def delete(self, command):
        repo = current_domain.repository_for(NewsletterSubscription)
        subscription = repo.get(command.subscription_id)
        repo._dao.delete(subscription)
