# This project was developed with assistance from AI tools.
"""
Domain enums for the CRM.

Shared domain types used by both SQLAlchemy models (meras_db package)
and Pydantic schemas (meras_api package).
"""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    AGENT = "AGENT"


class EntityType(str, enum.Enum):
    """Business entities that carry a scope anchor."""

    CONTACT = "Contact"
    CONVERSATION = "Conversation"
    BOOKING = "Booking"
    TEMPLATE = "Template"
    BOT_FLOW = "BotFlow"
    OFFER = "Offer"
    WHATSAPP_ACCOUNT = "WhatsAppAccount"
    BRANCH = "Branch"


class AuditAction(str, enum.Enum):
    DELETE = "DELETE"


class AuditOutcome(str, enum.Enum):
    GRANTED = "GRANTED"
    DENIED = "DENIED"


class ConversationStatus(str, enum.Enum):
    OPEN = "OPEN"
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
