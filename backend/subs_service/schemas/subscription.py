"""Pydantic v2 request/response schemas for subscription endpoints."""

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SubscriptionCreate(BaseModel):
    """Schema for creating a subscription.

    Values are passed to the service as-is; emptiness, price sign, UUID and
    month format are validated there so every rule lives in one place.
    """

    service_name: str = Field(..., examples=["Yandex Plus"])
    price: int = Field(..., description="Monthly price in minor currency units", examples=[400])
    user_id: str = Field(..., examples=["60601fee-2bf1-4721-ae6f-7636e79a0cba"])
    start_date: str = Field(..., description="First billed month, MM-YYYY", examples=["07-2025"])
    end_date: str | None = Field(
        None, description="Last billed month, MM-YYYY; omit or leave empty for open-ended"
    )


class SubscriptionUpdate(SubscriptionCreate):
    """Schema for replacing a subscription. Every field is rewritten."""


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SubscriptionResponse(BaseModel):
    """A stored subscription as returned by the API."""

    id: int
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: date
    end_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class SubscriptionCreatedResponse(BaseModel):
    """Identifier assigned to a newly created subscription."""

    id: int


class SubscriptionTotalResponse(BaseModel):
    """Total price of subscriptions active within a month window."""

    total: int
