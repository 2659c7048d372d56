"""Profile maintenance and account removal."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.projections.user_lookup import forget_email
from identity.security import hash_password
from identity.user.registration import assert_email_available, assert_password_strength
from identity.user.user import User

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=50)
    email: String(max_length=254)
    password: String(max_length=128)
    phone: String(max_length=30)


@identity.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)


@identity.command_handler(part_of=User)
class ManageUserHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email:
            assert_email_available(command.email, user_id=user.id)
        password_hash = None
        if command.password:
            assert_password_strength(command.password)
            password_hash = hash_password(command.password)

        changed = user.update_profile(
            name=command.name,
            email=command.email,
            password_hash=password_hash,
            phone=command.phone,
        )
        repo.add(user)

        logger.info("Profile updated", user_id=str(user.id), changed=changed)

    @handle(DeleteUser)
    def delete_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        if user.is_admin:
            raise ValidationError({"user": ["Cannot delete an admin account"]})

        repo._dao.delete(user)
        forget_email(user.email_address)

        logger.info("User deleted", user_id=str(command.user_id))
