"""
Test Case Suite: Dashboard Module
Test ID Range: TC-070 to TC-074

This test suite validates the agent dashboard statistics and the admin
site-wide dashboard.
"""

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient
from app.models.property import PropertyInquiry
from tests.conftest import create_user, create_property, auth_headers


async def add_inquiry(db_session, prop, minutes_ago: int, message: str = "Is this still available?"):
    inquiry = PropertyInquiry(
        id=str(uuid.uuid4()),
        property_id=prop.id,
        message=message,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )
    db_session.add(inquiry)
    await db_session.commit()
    return inquiry


class TestAgentDashboard:
    """
    Test Case TC-070: Agent Dashboard Statistics
    Description: Verify listing counts, totals and rating for the current agent only
    Expected Result: Counts reflect the agent's own listings
    """
    @pytest.mark.asyncio
    async def test_tc070_agent_dashboard_stats(self, client: AsyncClient, db_session):
        """TC-070: Agent dashboard statistics"""
        agent = await create_user(db_session, is_agent=True, role="agent", rating_average=4.5, rating_count=2, total_transactions=7)
        other = await create_user(db_session, is_agent=True, role="agent")
        active = await create_property(db_session, agent, status="active", views=10)
        await create_property(db_session, agent, status="sold", views=5)
        await create_property(db_session, agent, status="draft")
        foreign = await create_property(db_session, other, views=100)
        await add_inquiry(db_session, active, minutes_ago=3)
        await add_inquiry(db_session, foreign, minutes_ago=1)

        response = await client.get("/api/agents/dashboard/stats", headers=auth_headers(agent))
        assert response.status_code == 200

        stats = response.json()["stats"]
        assert stats["total_properties"] == 3
        assert stats["active_properties"] == 1
        assert stats["sold_properties"] == 1
        assert stats["draft_properties"] == 1
        assert stats["total_views"] == 15
        assert stats["total_inquiries"] == 1
        assert stats["rating"] == {"average": 4.5, "count": 2}
        assert stats["total_transactions"] == 7

    """
    Test Case TC-071: Recent Inquiries Across Listings
    Description: Verify the five newest inquiries are returned newest first with their property
    Expected Result: Five inquiries, annotated with property id and title
    """
    @pytest.mark.asyncio
    async def test_tc071_recent_inquiries(self, client: AsyncClient, db_session):
        """TC-071: Recent inquiries"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        first = await create_property(db_session, agent, title="Lakeside cottage with garden")
        second = await create_property(db_session, agent, title="Downtown loft near the metro")
        expected = []
        for minutes in (1, 2, 3, 4, 5, 6, 7):
            prop = first if minutes % 2 else second
            inquiry = await add_inquiry(db_session, prop, minutes_ago=minutes, message=f"Inquiry number {minutes}")
            expected.append((inquiry.id, prop.id, prop.title))

        response = await client.get("/api/agents/dashboard/stats", headers=auth_headers(agent))
        recent = response.json()["recent_inquiries"]

        assert [(i["id"], i["property_id"], i["property_title"]) for i in recent] == expected[:5]

    """
    Test Case TC-072: Agent Dashboard Requires an Agent
    Description: Verify that plain users cannot open the agent dashboard
    Expected Result: Returns 403
    """
    @pytest.mark.asyncio
    async def test_tc072_agent_dashboard_requires_agent(self, authenticated_user):
        """TC-072: Agent dashboard requires an agent"""
        client, _ = authenticated_user

        response = await client.get("/api/agents/dashboard/stats")
        assert response.status_code == 403


class TestAdminDashboard:
    """
    Test Case TC-073: Admin Dashboard Statistics
    Description: Verify site-wide user, property and contact counts
    Expected Result: Returns aggregated counts
    """
    @pytest.mark.asyncio
    async def test_tc073_admin_dashboard_stats(self, authenticated_admin, db_session):
        """TC-073: Admin dashboard statistics"""
        client, _ = authenticated_admin
        agent = await create_user(db_session, is_agent=True, role="agent")
        await create_user(db_session, is_agent=True, role="agent", is_verified_agent=False)
        await create_user(db_session)
        prop = await create_property(db_session, agent, featured=True, views=4)
        await create_property(db_session, agent, status="draft")
        await add_inquiry(db_session, prop, minutes_ago=1)
        await client.post("/api/contact", json={
            "name": "Sana Khan",
            "email": "sana@example.com",
            "subject": "Listing question",
            "message": "How long does verification usually take?"
        })

        response = await client.get("/api/admin/dashboard")
        assert response.status_code == 200

        stats = response.json()["stats"]
        assert stats["users"]["total_users"] == 4
        assert stats["users"]["total_agents"] == 2
        assert stats["users"]["verified_agents"] == 1
        assert stats["users"]["unverified_agents"] == 1
        assert stats["users"]["total_admins"] == 1
        assert stats["properties"]["total_properties"] == 2
        assert stats["properties"]["active_properties"] == 1
        assert stats["properties"]["draft_properties"] == 1
        assert stats["properties"]["featured_properties"] == 1
        assert stats["properties"]["total_views"] == 4
        assert stats["properties"]["total_inquiries"] == 1
        assert stats["contacts"] == {"total_contacts": 1, "new_contacts": 1, "unread_contacts": 1}

    """
    Test Case TC-074: Admin Dashboard Requires Admin
    Description: Verify that agents cannot open the admin dashboard
    Expected Result: Returns 403
    """
    @pytest.mark.asyncio
    async def test_tc074_admin_dashboard_requires_admin(self, authenticated_agent):
        """TC-074: Admin dashboard requires admin"""
        client, _ = authenticated_agent

        response = await client.get("/api/admin/dashboard")
        assert response.status_code == 403
