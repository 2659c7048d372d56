"""User aggregate: a storefront account that logs in with email and password."""

import json
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, ValueObject

from identity.domain import identity
from identity.user.events import UserEmailChanged, UserProfileUpdated, UserRegistered
from shared.email import is_valid_email, normalize_email


@identity.value_object(part_of="User")
class EmailAddress:
    """A login email, already normalized by the caller."""

    address: String(required=True, max_length=254)

    @invariant.post
    def must_look_like_an_email(self):
        if not is_valid_email(self.address):
            raise ValidationError({"email": ["Please enter a valid email"]})
        if self.address != normalize_email(self.address):
            raise ValidationError({"email": ["Email must be lower-case"]})


@identity.aggregate
class User:
    """A registered shopper or administrator.

    The password is never held in clear: only the bcrypt hash produced by
    ``identity.security`` reaches the aggregate.
    """

    name: String(required=True, min_length=2, max_length=50)
    email: ValueObject(EmailAddress, required=True)
    password_hash: String(required=True, max_length=255)
    is_admin: Boolean(default=False)
    phone: String(max_length=30)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @property
    def email_address(self) -> str:
        return self.email.address

    @classmethod
    def register(cls, name, email, password_hash, is_admin=False, phone=None):
        now = datetime.now()
        user = cls(
            name=(name or "").strip(),
            email=EmailAddress(address=normalize_email(email)),
            password_hash=password_hash,
            is_admin=is_admin,
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=user.name,
                email=user.email_address,
                is_admin=user.is_admin,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, name=None, email=None, password_hash=None, phone=None):
        """Apply the non-empty changes and return the names of the fields that changed."""
        changed = []

        if name and name.strip() != self.name:
            self.name = name.strip()
            changed.append("name")

        if email:
            new_email = normalize_email(email)
            if new_email != self.email_address:
                old_email = self.email_address
                self.email = EmailAddress(address=new_email)
                changed.append("email")
                self.raise_(UserEmailChanged(user_id=str(self.id), old_email=old_email, new_email=new_email))

        if phone is not None and phone != self.phone:
            self.phone = phone
            changed.append("phone")

        if password_hash:
            self.password_hash = password_hash
            changed.append("password")

        if changed:
            self.updated_at = datetime.now()
            self.raise_(
                UserProfileUpdated(
                    user_id=str(self.id),
                    changed_fields=json.dumps(sorted(changed)),
                    updated_at=self.updated_at,
                )
            )
        return changed
