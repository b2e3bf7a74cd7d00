"""
Agent Dashboard Controller - Dashboard statistics endpoint
"""
from fastapi import APIRouter, Depends
from app.schemas.agent_dashboard import AgentDashboardStatsResponse
from app.services.real_estate_agent.dashboard_service import get_agent_dashboard_stats
from app.utils.dependencies import require_agent

router = APIRouter(prefix="/agents", tags=["Agent Dashboard"])


@router.get("/dashboard/stats", response_model=AgentDashboardStatsResponse)
async def get_dashboard_stats(agent: dict = Depends(require_agent)):
    """
    Dashboard statistics for the current agent:
    listing counts by status, total views and inquiries, rating, and the
    five most recent inquiries across their listings.
    """
    dashboard = await get_agent_dashboard_stats(agent["id"])
    return AgentDashboardStatsResponse(**dashboard)
