# This project was developed with assistance from AI tools.
"""Request/response schemas for the scoped business entities."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from meras_db.enums import BookingStatus, ConversationStatus
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Envelope for scoped list endpoints. An empty scope is an empty list, not an error."""

    success: bool = True
    data: list[T]
    count: int
    pagination: Pagination


class ItemResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class DeleteResponse(BaseModel):
    success: bool = True


class ContactItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str
    email: str | None = None
    tags: list[str] | None = None
    branch_id: str | None = None
    created_at: datetime | None = None


class ContactUpdate(BaseModel):
    """Partial update to a contact. Branch re-anchoring is not editable here."""

    name: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)
    email: str | None = None
    tags: list[str] | None = None


class ConversationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contact_id: str
    assigned_to_id: str | None = None
    status: ConversationStatus
    updated_at: datetime | None = None


class BookingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_number: str
    contact_id: str
    agent_id: str | None = None
    date: datetime
    notes: str | None = None
    status: BookingStatus


class BookingUpdate(BaseModel):
    date: datetime | None = None
    notes: str | None = None
    status: BookingStatus | None = None


class TemplateItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str | None = None
    content: str
    language: str | None = None
    whatsapp_account_id: str | None = None


class TemplateUpdate(BaseModel):
    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str | None = None
    language: str | None = None
    whatsapp_account_id: str | None = None


class BotFlowItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    trigger: str
    steps: Any
    is_active: bool
    branch_id: str | None = None
    whatsapp_account_id: str | None = None


class BotFlowCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    trigger: str = Field(min_length=1)
    steps: list[dict[str, Any]]
    is_active: bool = True
    branch_id: str | None = None
    whatsapp_account_id: str | None = None


class WhatsAppAccountItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str | None = None
    branch_id: str | None = None
