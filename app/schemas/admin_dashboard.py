from pydantic import BaseModel


class UserStats(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    total_agents: int
    verified_agents: int
    unverified_agents: int
    total_admins: int


class PropertyStats(BaseModel):
    total_properties: int
    active_properties: int
    sold_properties: int
    draft_properties: int
    featured_properties: int
    total_views: int
    total_inquiries: int


class ContactSummaryStats(BaseModel):
    total_contacts: int
    new_contacts: int
    unread_contacts: int


class AdminDashboardStats(BaseModel):
    users: UserStats
    properties: PropertyStats
    contacts: ContactSummaryStats


class AdminDashboardResponse(BaseModel):
    success: bool = True
    stats: AdminDashboardStats
