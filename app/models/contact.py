from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base


CONTACT_TYPES = ("general", "property_inquiry", "agent_inquiry", "support", "partnership")
CONTACT_STATUSES = ("new", "in_progress", "resolved", "closed")
CONTACT_PRIORITIES = ("low", "medium", "high")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String, primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    subject = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="general", index=True)
    status = Column(String, nullable=False, default="new", index=True)
    priority = Column(String, nullable=False, default="medium", index=True)
    source = Column(String, nullable=False, default="website")
    assigned_to_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    response_notes = relationship(
        "ContactNote",
        back_populates="contact",
        cascade="all, delete-orphan",
        order_by="ContactNote.added_at",
    )

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index('idx_contacts_status_priority', 'status', 'priority'),
    )


class ContactNote(Base):
    __tablename__ = "contact_notes"

    id = Column(String, primary_key=True)
    contact_id = Column(String, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True)
    note = Column(Text, nullable=False)
    added_by_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    added_at = Column(DateTime(timezone=True), nullable=False)

    contact = relationship("Contact", back_populates="response_notes")
    added_by = relationship("User", foreign_keys=[added_by_id])
