from sqlalchemy import select, func, case
from app.database.connection import AsyncSessionLocal
from app.models.user import User, AgentProfile
from app.models.property import Property, PropertyInquiry
from app.models.contact import Contact


async def get_admin_dashboard_stats() -> dict:
    """Site-wide counts for the admin dashboard, one aggregate query per table"""
    async with AsyncSessionLocal() as session:
        # User statistics
        user_stats_stmt = select(
            func.count(User.id).label('total'),
            func.sum(case((User.is_active == True, 1), else_=0)).label('active'),
            func.sum(case((User.is_agent == True, 1), else_=0)).label('agents'),
            func.sum(case((User.role == 'admin', 1), else_=0)).label('admins'),
        )
        user_stats_result = await session.execute(user_stats_stmt)
        user_stats = user_stats_result.first()

        verified_agents_stmt = select(func.count(AgentProfile.id)).where(AgentProfile.is_verified == True)
        verified_agents_result = await session.execute(verified_agents_stmt)
        verified_agents = verified_agents_result.scalar() or 0

        # Property statistics
        property_stats_stmt = select(
            func.count(Property.id).label('total'),
            func.sum(case((Property.status == 'active', 1), else_=0)).label('active'),
            func.sum(case((Property.status.in_(('sold', 'rented')), 1), else_=0)).label('sold'),
            func.sum(case((Property.status == 'draft', 1), else_=0)).label('draft'),
            func.sum(case((Property.featured == True, 1), else_=0)).label('featured'),
            func.coalesce(func.sum(Property.views), 0).label('views'),
        )
        property_stats_result = await session.execute(property_stats_stmt)
        property_stats = property_stats_result.first()

        inquiries_stmt = select(func.count(PropertyInquiry.id))
        inquiries_result = await session.execute(inquiries_stmt)
        total_inquiries = inquiries_result.scalar() or 0

        # Contact statistics
        contact_stats_stmt = select(
            func.count(Contact.id).label('total'),
            func.sum(case((Contact.status == 'new', 1), else_=0)).label('new'),
            func.sum(case((Contact.is_read == False, 1), else_=0)).label('unread'),
        )
        contact_stats_result = await session.execute(contact_stats_stmt)
        contact_stats = contact_stats_result.first()

        total_users = user_stats.total or 0
        active_users = user_stats.active or 0
        total_agents = user_stats.agents or 0

        return {
            "users": {
                "total_users": total_users,
                "active_users": active_users,
                "inactive_users": total_users - active_users,
                "total_agents": total_agents,
                "verified_agents": verified_agents,
                "unverified_agents": total_agents - verified_agents,
                "total_admins": user_stats.admins or 0,
            },
            "properties": {
                "total_properties": property_stats.total or 0,
                "active_properties": property_stats.active or 0,
                "sold_properties": property_stats.sold or 0,
                "draft_properties": property_stats.draft or 0,
                "featured_properties": property_stats.featured or 0,
                "total_views": int(property_stats.views or 0),
                "total_inquiries": total_inquiries,
            },
            "contacts": {
                "total_contacts": contact_stats.total or 0,
                "new_contacts": contact_stats.new or 0,
                "unread_contacts": contact_stats.unread or 0,
            },
        }
