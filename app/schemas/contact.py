from pydantic import BaseModel, EmailStr, Field, validator
from typing import Literal, Optional, List
from app.schemas.auth import PHONE_PATTERN

ContactType = Literal["general", "property_inquiry", "agent_inquiry", "support", "partnership"]
ContactStatus = Literal["new", "in_progress", "resolved", "closed"]
ContactPriority = Literal["low", "medium", "high"]


class ContactCreateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50, description="Submitter name")
    email: EmailStr = Field(..., description="Submitter email address")
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    subject: str = Field(..., min_length=5, max_length=100)
    message: str = Field(..., min_length=10, max_length=1000)
    type: ContactType = "general"

    @validator('name', 'subject')
    def strip_text(cls, v):
        return v.strip()

    @validator('email')
    def normalize_email(cls, v):
        return v.lower()


class ContactUpdateRequest(BaseModel):
    status: Optional[ContactStatus] = None
    priority: Optional[ContactPriority] = None
    assigned_to: Optional[str] = Field(None, description="User id of the assignee")


class ContactNoteRequest(BaseModel):
    note: str = Field(..., min_length=1, max_length=1000)


class UserRef(BaseModel):
    id: str
    name: str
    email: str


class ContactNoteResponse(BaseModel):
    id: str
    note: str
    added_by: Optional[UserRef] = None
    added_at: Optional[str] = None


class ContactResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    type: str
    status: str
    priority: str
    source: str
    assigned_to: Optional[UserRef] = None
    is_read: bool
    response_notes: List[ContactNoteResponse] = []
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


class ContactReceipt(BaseModel):
    id: str
    name: str
    subject: str
    created_at: str


class ContactReceiptResponse(BaseModel):
    success: bool = True
    message: str
    contact: ContactReceipt


class ContactEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    contact: ContactResponse


class ContactListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    contacts: List[ContactResponse]


class ContactTypeCount(BaseModel):
    type: str
    count: int


class ContactStats(BaseModel):
    total_contacts: int
    new_contacts: int
    in_progress_contacts: int
    resolved_contacts: int
    high_priority_contacts: int
    contacts_by_type: List[ContactTypeCount]
    recent_contacts: List[dict]


class ContactStatsResponse(BaseModel):
    success: bool = True
    stats: ContactStats
