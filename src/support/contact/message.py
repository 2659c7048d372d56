"""ContactMessage aggregate: one submission of the storefront's contact form.

Messages arrive as ``New`` and are triaged by an admin. Marking a message
``Resolved`` also sets ``is_resolved`` and stamps ``resolved_at``; the flag
stays set if the message is later moved to another status.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from shared.email import is_valid_email, normalize_email
from support.contact.events import ContactMessageReceived, ContactMessageStatusChanged
from support.domain import support


class ContactStatus(Enum):
    NEW = "New"
    READ = "Read"
    REPLIED = "Replied"
    RESOLVED = "Resolved"
    SPAM = "Spam"


REQUIRED_FIELDS = {
    "name": "Name is required",
    "subject": "Subject is required",
    "message": "Message is required",
}


@support.aggregate
class ContactMessage:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    subject = String(required=True, max_length=200)
    message = Text(required=True)
    status = String(choices=ContactStatus, default=ContactStatus.NEW.value)
    is_resolved = Boolean(default=False)
    resolved_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_be_valid(self):
        if not is_valid_email(self.email):
            raise ValidationError({"email": ["Please include a valid email"]})

    @classmethod
    def submit(cls, name, email, subject, message):
        """Accept a contact form submission. Every field is required, blanks included."""
        values = {"name": name, "subject": subject, "message": message}
        missing = {field: [text] for field, text in REQUIRED_FIELDS.items() if not (values[field] or "").strip()}
        if missing:
            raise ValidationError(missing)

        now = datetime.now(UTC)
        contact = cls(
            name=name.strip(),
            email=normalize_email(email),
            subject=subject.strip(),
            message=message.strip(),
            status=ContactStatus.NEW.value,
            created_at=now,
            updated_at=now,
        )
        contact.raise_(
            ContactMessageReceived(
                message_id=str(contact.id),
                email=contact.email,
                subject=contact.subject,
                received_at=now,
            )
        )
        return contact

    def change_status(self, status):
        """Move to ``status``. An empty status leaves the message unchanged."""
        if not status:
            return

        try:
            new_status = ContactStatus(status)
        except ValueError:
            raise ValidationError(
                {"status": [f"Status must be one of {', '.join(s.value for s in ContactStatus)}"]}
            ) from None

        now = datetime.now(UTC)
        previous = self.status
        self.status = new_status.value
        self.updated_at = now
        if new_status == ContactStatus.RESOLVED:
            self.is_resolved = True
            self.resolved_at = now

        self.raise_(
            ContactMessageStatusChanged(
                message_id=str(self.id),
                previous_status=previous,
                status=self.status,
                changed_at=now,
            )
        )
