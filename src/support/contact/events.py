"""Domain events for the ContactMessage aggregate."""

from protean.fields import DateTime, Identifier, String

from support.domain import support


@support.event(part_of="ContactMessage")
class ContactMessageReceived:
    """A visitor sent a message through the contact form."""

    __version__ = 1

    message_id = Identifier(required=True)
    email = String(required=True)
    subject = String(required=True)
    received_at = DateTime(required=True)


@support.event(part_of="ContactMessage")
class ContactMessageStatusChanged:
    __version__ = 1

    message_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)
