"""Domain events for the NewsletterSubscription aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from support.domain import support


@support.event(part_of="NewsletterSubscription")
class NewsletterSubscribed:
    """An address started, or restarted, receiving the newsletter."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    email = String(required=True)
    resubscribed = Boolean(default=False)
    subscribed_at = DateTime(required=True)


@support.event(part_of="NewsletterSubscription")
class NewsletterUnsubscribed:
    __version__ = 1

    subscription_id = Identifier(required=True)
    email = String(required=True)
    unsubscribed_at = DateTime(required=True)
