from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Optional
from app.models.user import SPECIALIZATIONS

PHONE_PATTERN = r"^[\+]?[1-9][\d]{0,15}$"


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @validator("name")
    def strip_name(cls, v):
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None


class AddressPayload(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class RegisterAgentRequest(BaseModel):
    """Upgrade the current user to an agent"""
    license_number: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    specializations: List[str] = Field(default_factory=list)
    bio: Optional[str] = Field(None, max_length=500)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: Optional[AddressPayload] = None

    @validator("specializations")
    def check_specializations(cls, v):
        invalid = [s for s in v if s not in SPECIALIZATIONS]
        if invalid:
            raise ValueError(f"Invalid specialization: {', '.join(invalid)}")
        return v


class RatingResponse(BaseModel):
    average: float = 0.0
    count: int = 0


class ProfileImageResponse(BaseModel):
    public_id: Optional[str] = None
    url: Optional[str] = None


class AgentProfileResponse(BaseModel):
    id: str
    license_number: Optional[str] = None
    experience: Optional[int] = None
    specializations: List[str] = []
    bio: Optional[str] = None
    phone: Optional[str] = None
    address: AddressPayload
    profile_image: Optional[ProfileImageResponse] = None
    rating: RatingResponse
    total_transactions: int = 0
    is_verified: bool = False


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    is_agent: bool
    is_active: bool
    profile_image: Optional[ProfileImageResponse] = None
    agent_profile: Optional[AgentProfileResponse] = None
    last_login: Optional[str] = None
    created_at: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    token: str
    token_type: str = "bearer"
    user: UserResponse


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse
