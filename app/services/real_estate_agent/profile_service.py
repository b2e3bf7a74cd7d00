"""
Profile Service - Agent profile management
"""
from typing import Optional, Dict
import logging
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.user import User, AgentProfile
from app.services.serializers import serialize_user
from app.utils.exceptions import DuplicateResourceError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("license_number", "experience", "specializations", "bio", "phone")
ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country")


async def _load_agent(session, agent_id: str) -> Optional[User]:
    stmt = (
        select(User)
        .options(selectinload(User.agent_profile))
        .where(User.id == agent_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def update_agent_profile(agent_id: str, update_data: Dict) -> Optional[Dict]:
    """Apply the sent agent-profile fields to the current agent"""
    async with AsyncSessionLocal() as session:
        agent = await _load_agent(session, agent_id)

        if not agent or agent.agent_profile is None:
            return None

        profile = agent.agent_profile

        # Blank license numbers are stored as NULL so they never collide
        if "license_number" in update_data:
            update_data["license_number"] = (update_data["license_number"] or "").strip() or None
        license_number = update_data.get("license_number")
        if license_number and license_number != profile.license_number:
            license_stmt = select(AgentProfile).where(
                AgentProfile.license_number == license_number,
                AgentProfile.id != profile.id
            )
            license_result = await session.execute(license_stmt)
            if license_result.scalar_one_or_none():
                raise DuplicateResourceError("Agent", "license_number")

        for key in PROFILE_FIELDS:
            if key in update_data:
                setattr(profile, key, update_data[key])

        address = update_data.get("address")
        if address:
            for key in ADDRESS_FIELDS:
                if key in address:
                    setattr(profile, key, address[key])

        await session.commit()

        agent = await _load_agent(session, agent_id)
        logger.info(f"Agent profile updated for {agent_id}")
        return serialize_user(agent)
