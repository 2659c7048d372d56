"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A visitor created a storefront account."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    is_admin: Boolean(default=False)
    registered_at: DateTime(required=True)


@identity.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON: sorted list of field names
    updated_at: DateTime(required=True)


@identity.event(part_of="User")
class UserEmailChanged:
    """The login email moved to a new address."""

    __version__ = 1

    user_id: Identifier(required=True)
    old_email: String(required=True)
    new_email: String(required=True)
