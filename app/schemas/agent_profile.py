from pydantic import BaseModel, Field, validator
from typing import Optional, List
from app.models.user import SPECIALIZATIONS
from app.schemas.auth import AddressPayload, PHONE_PATTERN, UserResponse
from app.schemas.property import PropertyResponse


class AgentProfileUpdateRequest(BaseModel):
    license_number: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    specializations: Optional[List[str]] = Field(None, min_length=1)
    bio: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[AddressPayload] = None

    @validator("specializations")
    def check_specializations(cls, v):
        if v is None:
            return v
        invalid = [s for s in v if s not in SPECIALIZATIONS]
        if invalid:
            raise ValueError(f"Invalid specialization: {', '.join(invalid)}")
        return v


class RateAgentRequest(BaseModel):
    rating: float = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)


class AgentListResponse(BaseModel):
    success: bool = True
    count: int
    total: Optional[int] = None
    page: Optional[int] = None
    pages: Optional[int] = None
    agents: List[UserResponse]


class AgentPropertyStats(BaseModel):
    total_properties: int
    active_properties: int
    sold_properties: int


class AgentDetailResponse(BaseModel):
    success: bool = True
    agent: UserResponse
    properties: List[PropertyResponse]
    stats: AgentPropertyStats


class RatingSubmittedResponse(BaseModel):
    success: bool = True
    message: str
    rating: dict
