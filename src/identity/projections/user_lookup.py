"""User lookup: find an account by its login email."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.events import UserEmailChanged, UserRegistered
from identity.user.user import User


@identity.projection
class UserLookup:
    email: Identifier(identifier=True, required=True)
    user_id: String(required=True)


def find_user_id(email):
    """Return the id of the account registered under ``email``, or ``None``."""
    try:
        return current_domain.repository_for(UserLookup).get(email).user_id
    except ObjectNotFoundError:
        return None


def forget_email(email):
    repo = current_domain.repository_for(UserLookup)
    try:
        repo._dao.delete(repo.get(email))
    except ObjectNotFoundError:
        pass


@identity.projector(projector_for=UserLookup, aggregates=[User])
class UserLookupProjector:
    @on(UserRegistered)
    def on_user_registered(self, event):
        current_domain.repository_for(UserLookup).add(UserLookup(email=event.email, user_id=event.user_id))

    @on(UserEmailChanged)
    def on_user_email_changed(self, event):
        forget_email(event.old_email)
        current_domain.repository_for(UserLookup).add(UserLookup(email=event.new_email, user_id=event.user_id))
