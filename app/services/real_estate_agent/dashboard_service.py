"""
Agent Dashboard Service - Calculates dashboard statistics
Counts and sums run as database aggregations; only the recent inquiries are
assembled in Python.
"""
from typing import Dict, List
from datetime import datetime, timezone
from sqlalchemy import select, func, desc
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.property import Property, PropertyInquiry
from app.models.user import AgentProfile
from app.services.real_estate_agent_service import get_agent_property_stats
from app.services.serializers import as_utc, serialize_inquiry

RECENT_INQUIRIES_LIMIT = 5


def flatten_recent_inquiries(properties: List[Property], limit: int = RECENT_INQUIRIES_LIMIT) -> List[Dict]:
    """
    Flatten the inquiries of the given properties, annotate each with its
    property, and keep the newest `limit`.
    """
    flat = []
    for prop in properties:
        for inquiry in prop.inquiries:
            item = serialize_inquiry(inquiry)
            item["property_id"] = prop.id
            item["property_title"] = prop.title
            flat.append((as_utc(inquiry.created_at) or datetime.min.replace(tzinfo=timezone.utc), item))

    flat.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in flat[:limit]]


async def get_agent_dashboard_stats(agent_id: str) -> Dict:
    """Listing counts, view and inquiry totals, rating and recent inquiries for one agent"""
    async with AsyncSessionLocal() as session:
        # 1. Property counts by status
        property_stats = await get_agent_property_stats(agent_id, session)

        # 2. Views across all listings
        views_stmt = select(func.coalesce(func.sum(Property.views), 0)).where(Property.agent_id == agent_id)
        views_result = await session.execute(views_stmt)
        total_views = views_result.scalar() or 0

        # 3. Inquiries across all listings
        inquiries_stmt = (
            select(func.count(PropertyInquiry.id))
            .join(Property, Property.id == PropertyInquiry.property_id)
            .where(Property.agent_id == agent_id)
        )
        inquiries_result = await session.execute(inquiries_stmt)
        total_inquiries = inquiries_result.scalar() or 0

        # 4. Rating and transactions from the agent profile
        profile_stmt = select(AgentProfile).where(AgentProfile.user_id == agent_id)
        profile_result = await session.execute(profile_stmt)
        profile = profile_result.scalar_one_or_none()

        # 5. The five properties with the latest inquiry activity
        latest_inquiry = (
            select(
                PropertyInquiry.property_id,
                func.max(PropertyInquiry.created_at).label("latest"),
            )
            .group_by(PropertyInquiry.property_id)
            .subquery()
        )
        recent_stmt = (
            select(Property)
            .join(latest_inquiry, latest_inquiry.c.property_id == Property.id)
            .options(selectinload(Property.inquiries))
            .where(Property.agent_id == agent_id)
            .order_by(desc(latest_inquiry.c.latest))
            .limit(RECENT_INQUIRIES_LIMIT)
            .execution_options(populate_existing=True)
        )
        recent_result = await session.execute(recent_stmt)
        recent_properties = recent_result.scalars().all()

        return {
            "stats": {
                **property_stats,
                "total_views": int(total_views),
                "total_inquiries": total_inquiries,
                "rating": {
                    "average": profile.rating_average if profile else 0.0,
                    "count": profile.rating_count if profile else 0,
                },
                "total_transactions": profile.total_transactions if profile else 0,
            },
            "recent_inquiries": flatten_recent_inquiries(recent_properties),
        }
