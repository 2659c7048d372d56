"""Tests for the NewsletterSubscription aggregate and its preferences."""

import pytest
from protean.exceptions import ValidationError
from support.newsletter.events import NewsletterSubscribed, NewsletterUnsubscribed
from support.newsletter.subscription import NewsletterSubscription, Preferences


class TestPreferences:
    def test_everything_on_by_default(self):
        assert Preferences().to_dict() == {"swords": True, "knives": True, "accessories": True, "promotions": True}

    def test_merge_ignores_none(self):
        merged = Preferences().merged_with({"promotions": False, "swords": None})
        assert (merged.promotions, merged.swords) == (False, True)

    def test_unknown_topic(self):
        with pytest.raises(ValidationError):
            Preferences().merged_with({"horses": True})


class TestSubscribe:
    def test_new_subscription(self):
        subscription = NewsletterSubscription.subscribe(" Aziz@Example.com", {"knives": False})

        assert subscription.email == "aziz@example.com"
        assert subscription.is_subscribed is True
        assert subscription.preferences.knives is False
        [event] = subscription._events
        assert isinstance(event, NewsletterSubscribed)
        assert event.resubscribed is False

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            NewsletterSubscription.subscribe("aziz-at-example")


class TestRenewAndUnsubscribe:
    def test_renewing_active_subscription_only_updates_preferences(self):
        subscription = NewsletterSubscription.subscribe("aziz@example.com")
        subscription._events.clear()

        assert subscription.renew({"accessories": False}) is False
        assert subscription.preferences.accessories is False
        assert subscription._events == []

    def test_unsubscribe_then_renew_keeps_old_preferences(self):
        subscription = NewsletterSubscription.subscribe("aziz@example.com", {"promotions": False})
        subscription.unsubscribe()
        assert subscription.is_subscribed is False
        assert subscription.unsubscribed_at is not None

        assert subscription.renew({"swords": False}) is True
        assert subscription.is_subscribed is True
        assert subscription.unsubscribed_at is None
        assert (subscription.preferences.promotions, subscription.preferences.swords) == (False, False)
        assert isinstance(subscription._events[-1], NewsletterSubscribed)
        assert subscription._events[-1].resubscribed is True

    def test_unsubscribe_is_idempotent(self):
        subscription = NewsletterSubscription.subscribe("aziz@example.com")
        subscription.unsubscribe()
        subscription.unsubscribe()

        assert [type(e) for e in subscription._events] == [NewsletterSubscribed, NewsletterUnsubscribed]
