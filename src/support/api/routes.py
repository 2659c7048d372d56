"""FastAPI endpoints for the Support domain: contact form and newsletter."""

import json

from fastapi import APIRouter, Depends, Query, Response
from protean.utils.globals import current_domain

from shared.auth import CurrentUser, require_admin
from support.api.schemas import (
    ContactPageResponse,
    ContactRequest,
    ContactResponse,
    ContactStatusRequest,
    ContactSubmittedResponse,
    PreferencesSchema,
    StatusResponse,
    SubscribeRequest,
    SubscribeResponse,
    SubscriptionPageResponse,
    SubscriptionResponse,
    UnsubscribeRequest,
)
from support.contact.handling import ChangeContactStatus, DeleteContactMessage, SubmitContactMessage
from support.contact.listing import list_contact_messages
from support.contact.message import ContactMessage
from support.newsletter.handling import (
    SUBSCRIBED,
    DeleteNewsletterSubscription,
    SubscribeToNewsletter,
    UnsubscribeFromNewsletter,
)
from support.newsletter.listing import list_subscriptions
from support.newsletter.subscription import NewsletterSubscription


def _iso(value):
    return value.isoformat() if value else None


def _contact_response(contact) -> ContactResponse:
    return ContactResponse(
        message_id=str(contact.id),
        name=contact.name,
        email=contact.email,
        subject=contact.subject,
        message=contact.message,
        status=contact.status,
        is_resolved=bool(contact.is_resolved),
        resolved_at=_iso(contact.resolved_at),
        created_at=_iso(contact.created_at),
        updated_at=_iso(contact.updated_at),
    )


def _subscription_response(subscription) -> SubscriptionResponse:
    preferences = subscription.preferences
    return SubscriptionResponse(
        subscription_id=str(subscription.id),
        email=subscription.email,
        is_subscribed=bool(subscription.is_subscribed),
        subscribed_at=_iso(subscription.subscribed_at),
        unsubscribed_at=_iso(subscription.unsubscribed_at),
        preferences=PreferencesSchema(**preferences.to_dict()) if preferences else PreferencesSchema(),
    )


# ---------------------------------------------------------------------------
# Contact Router
# ---------------------------------------------------------------------------
contact_router = APIRouter(prefix="/contact", tags=["contact"])


@contact_router.post("", status_code=201, response_model=ContactSubmittedResponse)
async def submit_contact_form(body: ContactRequest) -> ContactSubmittedResponse:
    command = SubmitContactMessage(
        name=body.name,
        email=body.email,
        subject=body.subject,
        message=body.message,
    )
    message_id = current_domain.process(command, asynchronous=False)
    contact = current_domain.repository_for(ContactMessage).get(message_id)
    return ContactSubmittedResponse(contact=_contact_response(contact))


@contact_router.get("", response_model=ContactPageResponse)
async def get_contact_messages(
    page: int = Query(1, alias="pageNumber", ge=1),
    user: CurrentUser = Depends(require_admin),  # noqa: ARG001
) -> ContactPageResponse:
    result = list_contact_messages(page=page)
    return ContactPageResponse(
        contacts=[_contact_response(c) for c in result.items],
        page=result.page,
        pages=result.pages,
        total=result.total,
    )


@contact_router.get("/{message_id}", response_model=ContactResponse)
async def get_contact_message(message_id: str, user: CurrentUser = Depends(require_admin)) -> ContactResponse:  # noqa: ARG001
    return _contact_response(current_domain.repository_for(ContactMessage).get(message_id))


@contact_router.put("/{message_id}", response_model=ContactResponse)
async def update_contact_status(
    message_id: str, body: ContactStatusRequest, user: CurrentUser = Depends(require_admin)  # noqa: ARG001
) -> ContactResponse:
    current_domain.process(ChangeContactStatus(message_id=message_id, status=body.status), asynchronous=False)
    return _contact_response(current_domain.repository_for(ContactMessage).get(message_id))


@contact_router.delete("/{message_id}", response_model=StatusResponse)
async def delete_contact_message(message_id: str, user: CurrentUser = Depends(require_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(DeleteContactMessage(message_id=message_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Newsletter Router
# ---------------------------------------------------------------------------
newsletter_router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@newsletter_router.post("/subscribe", status_code=201, response_model=SubscribeResponse)
async def subscribe(body: SubscribeRequest, response: Response) -> SubscribeResponse:
    """201 for a new address; 200 when an existing subscription is updated or revived."""
    preferences = body.preferences.model_dump(exclude_none=True) if body.preferences else None
    command = SubscribeToNewsletter(
        email=body.email,
        preferences=json.dumps(preferences) if preferences else None,
    )
    result = current_domain.process(command, asynchronous=False)
    if result["outcome"] != SUBSCRIBED:
        response.status_code = 200

    subscription = current_domain.repository_for(NewsletterSubscription).get(result["subscription_id"])
    return SubscribeResponse(outcome=result["outcome"], subscription=_subscription_response(subscription))


@newsletter_router.put("/unsubscribe", response_model=StatusResponse)
async def unsubscribe(body: UnsubscribeRequest) -> StatusResponse:
    current_domain.process(UnsubscribeFromNewsletter(email=body.email), asynchronous=False)
    return StatusResponse()


@newsletter_router.get("", response_model=SubscriptionPageResponse)
async def get_subscriptions(
    page: int = Query(1, alias="pageNumber", ge=1),
    user: CurrentUser = Depends(require_admin),  # noqa: ARG001
) -> SubscriptionPageResponse:
    result = list_subscriptions(page=page)
    return SubscriptionPageResponse(
        subscriptions=[_subscription_response(s) for s in result.items],
        page=result.page,
        pages=result.pages,
        total=result.total,
    )


@newsletter_router.delete("/{subscription_id}", response_model=StatusResponse)
async def delete_subscription(subscription_id: str, user: CurrentUser = Depends(require_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(DeleteNewsletterSubscription(subscription_id=subscription_id), asynchronous=False)
    return StatusResponse()
