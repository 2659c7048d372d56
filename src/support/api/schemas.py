"""Pydantic request/response schemas for the Support API."""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Contact form
# ---------------------------------------------------------------------------
class ContactRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Dilnoza",
                    "email": "dilnoza@example.com",
                    "subject": "Engraving",
                    "message": "Can you engrave a name on the Chust pichoq?",
                }
            ]
        }
    }


class ContactStatusRequest(BaseModel):
    status: str | None = None


class ContactResponse(BaseModel):
    message_id: str
    name: str
    email: str
    subject: str
    message: str
    status: str
    is_resolved: bool
    resolved_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ContactSubmittedResponse(BaseModel):
    message: str = "Contact form submitted successfully"
    contact: ContactResponse


class ContactPageResponse(BaseModel):
    contacts: list[ContactResponse]
    page: int
    pages: int
    total: int


# ---------------------------------------------------------------------------
# Newsletter
# ---------------------------------------------------------------------------
class PreferencesSchema(BaseModel):
    swords: bool | None = None
    knives: bool | None = None
    accessories: bool | None = None
    promotions: bool | None = None


class SubscribeRequest(BaseModel):
    email: str
    preferences: PreferencesSchema | None = None


class UnsubscribeRequest(BaseModel):
    email: str


class SubscriptionResponse(BaseModel):
    subscription_id: str
    email: str
    is_subscribed: bool
    subscribed_at: str | None = None
    unsubscribed_at: str | None = None
    preferences: PreferencesSchema


class SubscribeResponse(BaseModel):
    outcome: str
    subscription: SubscriptionResponse


class SubscriptionPageResponse(BaseModel):
    subscriptions: list[SubscriptionResponse]
    page: int
    pages: int
    total: int


class StatusResponse(BaseModel):
    status: str = "ok"
