from pydantic import BaseModel
from typing import Optional, List
from app.schemas.auth import RatingResponse


class RecentInquiryResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    message: str
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None
    property_id: str
    property_title: str


class AgentDashboardStats(BaseModel):
    total_properties: int
    active_properties: int
    sold_properties: int
    draft_properties: int
    total_views: int
    total_inquiries: int
    rating: RatingResponse
    total_transactions: int


class AgentDashboardStatsResponse(BaseModel):
    success: bool = True
    stats: AgentDashboardStats
    recent_inquiries: List[RecentInquiryResponse]
