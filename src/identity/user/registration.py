"""Account registration: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.projections.user_lookup import find_user_id
from identity.security import MIN_PASSWORD_LENGTH, hash_password
from identity.user.user import User, normalize_email

logger = structlog.get_logger(__name__)


@identity.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone: String(max_length=30)
    is_admin: Boolean(default=False)


def assert_password_strength(password):
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"]})


def assert_email_available(email, user_id=None):
    owner = find_user_id(normalize_email(email))
    if owner is not None and owner != str(user_id):
        raise ValidationError({"email": ["User already exists"]})


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        assert_password_strength(command.password)
        assert_email_available(command.email)

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=hash_password(command.password),
            is_admin=command.is_admin,
            phone=command.phone,
        )
        current_domain.repository_for(User).add(user)

        logger.info("User registered", user_id=str(user.id))
        return str(user.id)
