# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, SessionLocal, get_db, get_db_service
from .enums import (
    AuditAction,
    AuditOutcome,
    BookingStatus,
    ConversationStatus,
    EntityType,
    UserRole,
)
from .models import (
    AuditRecord,
    Booking,
    BotFlow,
    Branch,
    Contact,
    Conversation,
    Message,
    Offer,
    Template,
    User,
    WhatsAppAccount,
    user_branches,
    user_whatsapp_accounts,
)

__all__ = [
    "Base",
    "DatabaseService",
    "SessionLocal",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "AuditAction",
    "AuditOutcome",
    "BookingStatus",
    "ConversationStatus",
    "EntityType",
    "UserRole",
    # Models
    "AuditRecord",
    "Booking",
    "BotFlow",
    "Branch",
    "Contact",
    "Conversation",
    "Message",
    "Offer",
    "Template",
    "User",
    "WhatsAppAccount",
    "user_branches",
    "user_whatsapp_accounts",
]
