from fastapi import APIRouter, Depends
from app.schemas.admin_dashboard import AdminDashboardResponse
from app.services.admin_dashboard_service import get_admin_dashboard_stats
from app.utils.dependencies import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def get_dashboard(admin: dict = Depends(require_admin)):
    """Site-wide user, property and contact statistics (Admin only)"""
    stats = await get_admin_dashboard_stats()
    return AdminDashboardResponse(stats=stats)
