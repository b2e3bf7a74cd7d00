# Real Estate Agent Services
from app.services.real_estate_agent.profile_service import update_agent_profile
from app.services.real_estate_agent.dashboard_service import (
    get_agent_dashboard_stats,
    flatten_recent_inquiries,
)

__all__ = [
    "update_agent_profile",
    "get_agent_dashboard_stats",
    "flatten_recent_inquiries",
]
