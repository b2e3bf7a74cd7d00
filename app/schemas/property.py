from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Literal, Optional
from app.models.property import AMENITIES
from app.schemas.auth import PHONE_PATTERN

PropertyType = Literal["apartment", "house", "condo", "townhouse", "land", "commercial", "office", "warehouse"]
ListingType = Literal["sale", "rent", "lease"]
PropertyStatus = Literal["draft", "active", "pending", "sold", "rented", "inactive"]
PriceType = Literal["total", "per_month", "per_year", "per_sqft"]
AreaUnit = Literal["sqft", "sqm", "acres", "hectares"]
Furnishing = Literal["unfurnished", "semi-furnished", "fully-furnished"]


class PricePayload(BaseModel):
    amount: float = Field(..., ge=0)
    currency: str = "INR"
    price_type: PriceType = "total"


class CoordinatesPayload(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class AddressPayload(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "India"
    coordinates: Optional[CoordinatesPayload] = None


class AreaPayload(BaseModel):
    value: float = Field(..., ge=1)
    unit: AreaUnit = "sqft"


class SpecificationsPayload(BaseModel):
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    area: AreaPayload
    floors: Optional[int] = Field(None, ge=0)
    parking: int = Field(0, ge=0)
    furnished: Furnishing = "unfurnished"
    year_built: Optional[int] = Field(None, ge=1800)


class SeoPayload(BaseModel):
    title: Optional[str] = Field(None, max_length=60)
    description: Optional[str] = Field(None, max_length=160)


class ContactInfoPayload(BaseModel):
    phone: str = Field(..., pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = None


def _check_amenities(v):
    if v is None:
        return v
    invalid = [a for a in v if a not in AMENITIES]
    if invalid:
        raise ValueError(f"Invalid amenity: {', '.join(invalid)}")
    return v


class PropertyCreateRequest(BaseModel):
    title: str = Field(..., min_length=10, max_length=100)
    description: str = Field(..., min_length=50, max_length=2000)
    type: PropertyType
    listing_type: ListingType
    price: PricePayload
    address: AddressPayload
    specifications: SpecificationsPayload
    amenities: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    seo: Optional[SeoPayload] = None
    contact_info: ContactInfoPayload
    featured: bool = False
    status: PropertyStatus = "draft"

    @validator("title")
    def strip_title(cls, v):
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Title must be between 10 and 100 characters")
        return v

    @validator("amenities")
    def check_amenities(cls, v):
        return _check_amenities(v)


class PropertyUpdateRequest(BaseModel):
    """Mutable property fields; only fields the client sends are applied"""
    title: Optional[str] = Field(None, min_length=10, max_length=100)
    description: Optional[str] = Field(None, min_length=50, max_length=2000)
    type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    status: Optional[PropertyStatus] = None
    price: Optional[PricePayload] = None
    address: Optional[AddressPayload] = None
    specifications: Optional[SpecificationsPayload] = None
    amenities: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    seo: Optional[SeoPayload] = None
    contact_info: Optional[ContactInfoPayload] = None
    featured: Optional[bool] = None

    @validator("amenities")
    def check_amenities(cls, v):
        return _check_amenities(v)


class PropertyStatusRequest(BaseModel):
    status: PropertyStatus


class InquiryRequest(BaseModel):
    message: str = Field(..., min_length=10, max_length=500)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None


class PropertyImageResponse(BaseModel):
    id: str
    public_id: str
    url: str
    caption: str = ""
    is_primary: bool = False


class AgentSummary(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    rating: dict
    profile_image: Optional[dict] = None


class InquiryResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    message: str
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None


class PropertyResponse(BaseModel):
    id: str
    agent_id: str
    title: str
    description: str
    type: str
    listing_type: str
    status: str
    featured: bool
    price: dict
    address: dict
    specifications: dict
    amenities: List[str] = []
    tags: List[str] = []
    seo: dict
    contact_info: dict
    images: List[PropertyImageResponse] = []
    agent: Optional[AgentSummary] = None
    inquiries: Optional[List[InquiryResponse]] = None
    views: int = 0
    analytics: dict
    is_verified: bool = False
    # Meters from the search point; only set by nearby search
    distance: Optional[float] = None
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


class PropertyEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    property: PropertyResponse


class PropertyListResponse(BaseModel):
    success: bool = True
    count: int
    total: Optional[int] = None
    page: Optional[int] = None
    pages: Optional[int] = None
    properties: List[PropertyResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
