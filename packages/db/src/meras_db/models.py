# This project was developed with assistance from AI tools.
"""
Meras CRM -- domain models

Users, branches and WhatsApp accounts (the scope sources), the scoped
business entities, and the append-only delete audit trail.
"""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .database import Base
from .enums import AuditAction, AuditOutcome, BookingStatus, ConversationStatus, UserRole


def _new_id() -> str:
    return str(uuid.uuid4())


user_branches = Table(
    "user_branches",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("branch_id", String(36), ForeignKey("branches.id", ondelete="CASCADE"), primary_key=True),
)

user_whatsapp_accounts = Table(
    "user_whatsapp_accounts",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "whatsapp_account_id",
        String(36),
        ForeignKey("whatsapp_accounts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """CRM operator. Role and memberships are the inputs to scope resolution."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False),
        nullable=False,
        default=UserRole.AGENT,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    branches = relationship("Branch", secondary=user_branches, back_populates="users")
    whatsapp_accounts = relationship(
        "WhatsAppAccount", secondary=user_whatsapp_accounts, back_populates="users",
    )

    def __repr__(self):
        return f"<User(id={self.id}, role='{self.role}')>"


class Branch(Base):
    __tablename__ = "branches"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    users = relationship("User", secondary=user_branches, back_populates="branches")
    whatsapp_accounts = relationship("WhatsAppAccount", back_populates="branch")
    contacts = relationship("Contact", back_populates="branch")

    def __repr__(self):
        return f"<Branch(id={self.id}, name='{self.name}')>"


class WhatsAppAccount(Base):
    """A connected WhatsApp number, optionally anchored to a branch."""

    __tablename__ = "whatsapp_accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    branch_id = Column(
        String(36), ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    branch = relationship("Branch", back_populates="whatsapp_accounts")
    users = relationship(
        "User", secondary=user_whatsapp_accounts, back_populates="whatsapp_accounts",
    )

    def __repr__(self):
        return f"<WhatsAppAccount(id={self.id}, name='{self.name}')>"


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    tags = Column(JSONB, nullable=True)
    branch_id = Column(
        String(36), ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    branch = relationship("Branch", back_populates="contacts")
    conversations = relationship(
        "Conversation", back_populates="contact", cascade="all, delete-orphan",
    )
    bookings = relationship("Booking", back_populates="contact", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Contact(id={self.id}, name='{self.name}')>"


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=_new_id)
    contact_id = Column(
        String(36), ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    assigned_to_id = Column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    status = Column(
        Enum(ConversationStatus, name="conversation_status", native_enum=False),
        nullable=False,
        default=ConversationStatus.OPEN,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    contact = relationship("Contact", back_populates="conversations")
    assigned_to = relationship("User")
    messages = relationship(
        "Message", back_populates="conversation", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Conversation(id={self.id}, status='{self.status}')>"


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=_new_id)
    conversation_id = Column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    whatsapp_account_id = Column(
        String(36), ForeignKey("whatsapp_accounts.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    body = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    conversation = relationship("Conversation", back_populates="messages")

    def __repr__(self):
        return f"<Message(id={self.id}, conversation_id={self.conversation_id})>"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_new_id)
    booking_number = Column(String(50), nullable=False, unique=True)
    contact_id = Column(
        String(36), ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    agent_id = Column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    date = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    contact = relationship("Contact", back_populates="bookings")
    agent = relationship("User")

    def __repr__(self):
        return f"<Booking(id={self.id}, number='{self.booking_number}')>"


class Template(Base):
    __tablename__ = "templates"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    language = Column(String(10), nullable=True)
    whatsapp_account_id = Column(
        String(36), ForeignKey("whatsapp_accounts.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Template(id={self.id}, name='{self.name}')>"


class BotFlow(Base):
    __tablename__ = "bot_flows"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    trigger = Column(String(255), nullable=False)
    steps = Column(JSON, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    branch_id = Column(
        String(36), ForeignKey("branches.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    whatsapp_account_id = Column(
        String(36), ForeignKey("whatsapp_accounts.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<BotFlow(id={self.id}, name='{self.name}')>"


class Offer(Base):
    __tablename__ = "offers"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    whatsapp_account_id = Column(
        String(36), ForeignKey("whatsapp_accounts.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Offer(id={self.id}, title='{self.title}')>"


class AuditRecord(Base):
    """Append-only delete audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    actor_id = Column(String(36), nullable=False, index=True)
    actor_role = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(255), nullable=False, index=True)
    action = Column(
        Enum(AuditAction, name="audit_action", native_enum=False),
        nullable=False,
        default=AuditAction.DELETE,
    )
    outcome = Column(Enum(AuditOutcome, name="audit_outcome", native_enum=False), nullable=False)
    prior_state = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditRecord(id={self.id}, {self.entity_type}:{self.entity_id} {self.outcome})>"
