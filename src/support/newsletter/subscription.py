"""NewsletterSubscription aggregate: one email address on the mailing list.

There is one subscription per address. Unsubscribing keeps the record so a
later subscribe brings it back with its old preferences, overlaid with any new
ones.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, ValueObject

from shared.email import is_valid_email, normalize_email
from support.domain import support
from support.newsletter.events import NewsletterSubscribed, NewsletterUnsubscribed


@support.value_object(part_of="NewsletterSubscription")
class Preferences:
    """Topics the subscriber wants to hear about. Everything is on by default."""

    swords = Boolean(default=True)
    knives = Boolean(default=True)
    accessories = Boolean(default=True)
    promotions = Boolean(default=True)

    def merged_with(self, changes):
        """A copy with ``changes`` applied. Keys set to ``None`` are ignored."""
        values = self.to_dict()
        for topic, wanted in (changes or {}).items():
            if topic not in values:
                raise ValidationError({"preferences": [f"Unknown newsletter topic {topic!r}"]})
            if wanted is not None:
                values[topic] = bool(wanted)
        return Preferences(**values)


@support.aggregate
class NewsletterSubscription:
    email = String(required=True, max_length=254, unique=True)
    is_subscribed = Boolean(default=True)
    subscribed_at = DateTime()
    unsubscribed_at = DateTime()
    preferences = ValueObject(Preferences)

    @invariant.post
    def email_must_be_valid(self):
        if not is_valid_email(self.email):
            raise ValidationError({"email": ["Please include a valid email"]})

    @classmethod
    def subscribe(cls, email, preferences=None):
        now = datetime.now(UTC)
        subscription = cls(
            email=normalize_email(email),
            is_subscribed=True,
            subscribed_at=now,
            preferences=Preferences().merged_with(preferences),
        )
        subscription.raise_(
            NewsletterSubscribed(
                subscription_id=str(subscription.id),
                email=subscription.email,
                resubscribed=False,
                subscribed_at=now,
            )
        )
        return subscription

    def renew(self, preferences=None):
        """Subscribe again with the same address.

        An active subscription only has its preferences updated. A lapsed one is
        reactivated with a fresh ``subscribed_at``. Returns ``True`` when the
        subscription was reactivated.
        """
        self.preferences = (self.preferences or Preferences()).merged_with(preferences)
        if self.is_subscribed:
            return False

        now = datetime.now(UTC)
        self.is_subscribed = True
        self.subscribed_at = now
        self.unsubscribed_at = None
        self.raise_(
            NewsletterSubscribed(
                subscription_id=str(self.id),
                email=self.email,
                resubscribed=True,
                subscribed_at=now,
            )
        )
        return True

    def unsubscribe(self):
        if not self.is_subscribed:
            return

        now = datetime.now(UTC)
        self.is_subscribed = False
        self.unsubscribed_at = now
        self.raise_(
            NewsletterUnsubscribed(
                subscription_id=str(self.id),
                email=self.email,
                unsubscribed_at=now,
            )
        )
