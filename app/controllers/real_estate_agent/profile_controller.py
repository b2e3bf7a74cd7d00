"""
Agent Profile Controller
"""
from fastapi import APIRouter, Depends
from app.schemas.agent_profile import AgentProfileUpdateRequest
from app.schemas.auth import UserEnvelope, UserResponse
from app.services.real_estate_agent.profile_service import update_agent_profile
from app.utils.dependencies import require_agent
from app.utils.exceptions import NotFoundError

router = APIRouter(prefix="/agents", tags=["Agent Profile"])


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    request: AgentProfileUpdateRequest,
    agent: dict = Depends(require_agent)
):
    """Update the current agent's profile (only the fields sent)"""
    user = await update_agent_profile(agent["id"], request.dict(exclude_unset=True))
    if not user:
        raise NotFoundError("Agent profile")
    return UserEnvelope(message="Agent profile updated successfully", user=UserResponse(**user))
