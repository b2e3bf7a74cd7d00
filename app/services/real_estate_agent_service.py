from typing import Optional, List, Tuple
import logging
import uuid
from sqlalchemy import select, func, case, and_, desc
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.property import Property
from app.models.user import User, AgentProfile, AgentRating
from app.services.property_service import property_load_options
from app.services.serializers import serialize_user, serialize_property
from app.utils.exceptions import ValidationError
from app.utils.pagination import Pager
from app.utils.rating import fold_rating

logger = logging.getLogger(__name__)

RECENT_PROPERTIES_LIMIT = 6
NEARBY_AGENTS_LIMIT = 10


def _agent_select():
    return (
        select(User)
        .join(AgentProfile, AgentProfile.user_id == User.id)
        .options(selectinload(User.agent_profile))
        .execution_options(populate_existing=True)
    )


async def get_agent_property_stats(agent_id: str, session) -> dict:
    """Total / active / sold (sold + rented) property counts for one agent"""
    stmt = select(
        func.count(Property.id).label('total'),
        func.sum(case((Property.status == 'active', 1), else_=0)).label('active'),
        func.sum(case((Property.status.in_(('sold', 'rented')), 1), else_=0)).label('sold'),
        func.sum(case((Property.status == 'draft', 1), else_=0)).label('draft'),
    ).where(Property.agent_id == agent_id)
    result = await session.execute(stmt)
    row = result.first()

    return {
        "total_properties": row.total or 0,
        "active_properties": row.active or 0,
        "sold_properties": row.sold or 0,
        "draft_properties": row.draft or 0,
    }


async def list_agents(
    conditions: list,
    order_by: list,
    pager: Pager,
) -> Tuple[List[dict], int]:
    """Public agent directory. Returns (items, total)."""
    async with AsyncSessionLocal() as session:
        where_clause = and_(*conditions)

        count_stmt = (
            select(func.count(User.id))
            .select_from(User)
            .join(AgentProfile, AgentProfile.user_id == User.id)
            .where(where_clause)
        )
        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        stmt = (
            _agent_select()
            .where(where_clause)
            .order_by(*order_by, User.id)
            .offset(pager.offset)
            .limit(pager.limit)
        )
        result = await session.execute(stmt)
        agents = result.scalars().all()

        return [serialize_user(agent) for agent in agents], total


async def get_top_agents(limit: int = 6) -> List[dict]:
    """Verified agents with at least one rating, best rated first"""
    async with AsyncSessionLocal() as session:
        stmt = (
            _agent_select()
            .where(
                User.is_agent.is_(True),
                User.is_active.is_(True),
                AgentProfile.is_verified.is_(True),
                AgentProfile.rating_count >= 1,
            )
            .order_by(desc(AgentProfile.rating_average), desc(AgentProfile.total_transactions))
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [serialize_user(agent) for agent in result.scalars().all()]


async def find_nearby_agents(latitude: float, longitude: float, max_distance: int = 10000) -> List[dict]:
    """
    Agent addresses carry no coordinates, so the location is accepted but not
    used: verified agents are returned best rated first.
    """
    async with AsyncSessionLocal() as session:
        stmt = (
            _agent_select()
            .where(
                User.is_agent.is_(True),
                User.is_active.is_(True),
                AgentProfile.is_verified.is_(True),
            )
            .order_by(desc(AgentProfile.rating_average))
            .limit(NEARBY_AGENTS_LIMIT)
        )
        result = await session.execute(stmt)
        return [serialize_user(agent) for agent in result.scalars().all()]


async def get_agent_detail(agent_id: str) -> Optional[dict]:
    """Agent profile, recent active listings and listing counts"""
    async with AsyncSessionLocal() as session:
        stmt = _agent_select().where(
            User.id == agent_id,
            User.is_agent.is_(True),
            User.is_active.is_(True),
        )
        result = await session.execute(stmt)
        agent = result.scalar_one_or_none()

        if not agent:
            return None

        recent_stmt = (
            select(Property)
            .options(*property_load_options())
            .where(Property.agent_id == agent_id, Property.status == "active")
            .order_by(desc(Property.created_at))
            .limit(RECENT_PROPERTIES_LIMIT)
            .execution_options(populate_existing=True)
        )
        recent_result = await session.execute(recent_stmt)
        recent_properties = [
            serialize_property(prop, include_agent=False)
            for prop in recent_result.scalars().all()
        ]

        stats = await get_agent_property_stats(agent_id, session)

        return {
            "agent": serialize_user(agent),
            "properties": recent_properties,
            "stats": {
                "total_properties": stats["total_properties"],
                "active_properties": stats["active_properties"],
                "sold_properties": stats["sold_properties"],
            },
        }


async def get_agent_properties(
    agent_id: str,
    pager: Pager,
    viewer: Optional[dict] = None,
    status: Optional[str] = None,
) -> Tuple[List[dict], int]:
    """
    An agent's listings, newest first.
    Non-owners only ever see active listings; the owner may filter by status.
    """
    conditions = [Property.agent_id == agent_id]
    if not viewer or viewer["id"] != agent_id:
        conditions.append(Property.status == "active")
    elif status:
        conditions.append(Property.status == status)

    async with AsyncSessionLocal() as session:
        where_clause = and_(*conditions)

        count_stmt = select(func.count()).select_from(Property).where(where_clause)
        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        stmt = (
            select(Property)
            .options(*property_load_options())
            .where(where_clause)
            .order_by(desc(Property.created_at), Property.id)
            .offset(pager.offset)
            .limit(pager.limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return [serialize_property(prop) for prop in result.scalars().all()], total


async def rate_agent(agent_id: str, rater_id: str, rating: float, comment: Optional[str] = None) -> Optional[dict]:
    """
    Fold a rating into the agent's running average.
    Read-modify-write: concurrent ratings may overwrite each other.
    """
    async with AsyncSessionLocal() as session:
        stmt = _agent_select().where(
            User.id == agent_id,
            User.is_agent.is_(True),
            User.is_active.is_(True),
        )
        result = await session.execute(stmt)
        agent = result.scalar_one_or_none()

        if not agent or agent.agent_profile is None:
            return None

        if rater_id == agent_id:
            raise ValidationError("You cannot rate yourself")

        profile = agent.agent_profile
        profile.rating_average, profile.rating_count = fold_rating(
            profile.rating_average, profile.rating_count, rating
        )
        session.add(AgentRating(
            id=str(uuid.uuid4()),
            agent_profile_id=profile.id,
            rater_id=rater_id,
            rating=rating,
            comment=comment,
        ))
        await session.commit()

        logger.info(f"Agent {agent_id} rated {rating} by {rater_id}; now {profile.rating_average:.2f} ({profile.rating_count})")
        return {"average": profile.rating_average, "count": profile.rating_count}
