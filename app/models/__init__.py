# Database models
from app.models.user import User, AgentProfile, AgentRating
from app.models.document import VerificationDocument
from app.models.property import Property, PropertyImage, PropertyInquiry
from app.models.contact import Contact, ContactNote

__all__ = [
    "User",
    "AgentProfile",
    "AgentRating",
    "VerificationDocument",
    "Property",
    "PropertyImage",
    "PropertyInquiry",
    "Contact",
    "ContactNote",
]
