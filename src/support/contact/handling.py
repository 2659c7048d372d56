"""Contact form: submission and admin triage commands."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from support.contact.message import ContactMessage
from support.domain import support

logger = structlog.get_logger(__name__)


@support.command(part_of="ContactMessage")
class SubmitContactMessage:
    name = String(max_length=100)
    email = String(max_length=254)
    subject = String(max_length=200)
    message = Text()


@support.command(part_of="ContactMessage")
class ChangeContactStatus:
    message_id = Identifier(required=True)
    status = String(max_length=20)


@support.command(part_of="ContactMessage")
class DeleteContactMessage:
    message_id = Identifier(required=True)


@support.command_handler(part_of=ContactMessage)
class ContactMessageHandler:
    @handle(SubmitContactMessage)
    def submit(self, command):
        contact = ContactMessage.submit(
            name=command.name,
            email=command.email,
            subject=command.subject,
            message=command.message,
        )
        current_domain.repository_for(ContactMessage).add(contact)

        logger.info("Contact message received", message_id=str(contact.id), subject=contact.subject)
        return str(contact.id)

    @handle(ChangeContactStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(ContactMessage)
        contact = repo.get(command.message_id)
        contact.change_status(command.status)
        repo.add(contact)

    @handle(DeleteContactMessage)
    def delete(self, command):
        repo = current_domain.repository_for(ContactMessage)
        contact = repo.get(command.message_id)
        repo._dao.delete(contact)

        logger.info("Contact message deleted", message_id=str(command.message_id))
