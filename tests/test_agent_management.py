"""
Test Case Suite: Agent Directory Module
Test ID Range: TC-040 to TC-049

This test suite validates the public agent directory, agent detail pages,
agent listings visibility, profile updates and ratings.
"""

import pytest
from httpx import AsyncClient
from tests.conftest import create_user, create_property, auth_headers


class TestAgentDirectory:
    """
    Test Case TC-040: List Verified Agents
    Description: Verify that only active, verified agents are listed, best rated first
    Expected Result: Returns verified agents ordered by rating
    """
    @pytest.mark.asyncio
    async def test_tc040_list_verified_agents(self, client: AsyncClient, db_session):
        """TC-040: List verified agents"""
        good = await create_user(db_session, name="Anita Rao", is_agent=True, role="agent", rating_average=4.5, rating_count=2)
        best = await create_user(db_session, name="Vikram Shah", is_agent=True, role="agent", rating_average=4.9, rating_count=8)
        await create_user(db_session, name="Unverified Agent", is_agent=True, role="agent", is_verified_agent=False)
        await create_user(db_session, name="Plain User")

        response = await client.get("/api/agents")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 2
        assert [a["id"] for a in data["agents"]] == [best.id, good.id]
        assert data["agents"][0]["agent_profile"]["rating"] == {"average": 4.9, "count": 8}

    """
    Test Case TC-041: Filter Agents
    Description: Verify specialization, city, minimum rating and name search filters
    Expected Result: Each filter narrows the directory
    """
    @pytest.mark.asyncio
    async def test_tc041_filter_agents(self, client: AsyncClient, db_session):
        """TC-041: Filter agents"""
        luxury = await create_user(
            db_session, name="Meera Kapoor", is_agent=True, role="agent",
            specializations=["luxury", "residential"], city="Mumbai", rating_average=4.8, rating_count=3,
        )
        await create_user(
            db_session, name="Rahul Verma", is_agent=True, role="agent",
            specializations=["commercial"], city="Pune", rating_average=3.0, rating_count=1,
        )

        response = await client.get("/api/agents?specialization=luxury")
        assert [a["id"] for a in response.json()["agents"]] == [luxury.id]

        response = await client.get("/api/agents?city=mum")
        assert [a["id"] for a in response.json()["agents"]] == [luxury.id]

        response = await client.get("/api/agents?minRating=4")
        assert [a["id"] for a in response.json()["agents"]] == [luxury.id]

        response = await client.get("/api/agents?search=meera")
        assert [a["id"] for a in response.json()["agents"]] == [luxury.id]

        response = await client.get("/api/agents?specialization=farming")
        assert response.status_code == 400

    """
    Test Case TC-042: Top Agents
    Description: Verify that only rated, verified agents appear in the top list
    Expected Result: Returns rated agents only
    """
    @pytest.mark.asyncio
    async def test_tc042_top_agents(self, client: AsyncClient, db_session):
        """TC-042: Top agents"""
        rated = await create_user(db_session, is_agent=True, role="agent", rating_average=4.0, rating_count=1)
        await create_user(db_session, is_agent=True, role="agent")

        response = await client.get("/api/agents/top")
        assert response.status_code == 200
        assert [a["id"] for a in response.json()["agents"]] == [rated.id]

    """
    Test Case TC-043: Nearby Agents
    Description: Verify that nearby search returns verified agents regardless of the location given
    Expected Result: Returns verified agents best rated first
    """
    @pytest.mark.asyncio
    async def test_tc043_nearby_agents(self, client: AsyncClient, db_session):
        """TC-043: Nearby agents"""
        first = await create_user(db_session, is_agent=True, role="agent", rating_average=4.2, rating_count=1)
        second = await create_user(db_session, is_agent=True, role="agent", rating_average=3.1, rating_count=1)

        response = await client.get("/api/agents/search/nearby?latitude=0&longitude=0")
        assert response.status_code == 200
        assert [a["id"] for a in response.json()["agents"]] == [first.id, second.id]


class TestAgentDetail:
    """
    Test Case TC-044: Agent Detail with Listings and Stats
    Description: Verify that the detail shows recent active listings and counts by status
    Expected Result: Returns the agent, active listings and total/active/sold counts
    """
    @pytest.mark.asyncio
    async def test_tc044_agent_detail(self, client: AsyncClient, db_session):
        """TC-044: Agent detail"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        active = await create_property(db_session, agent, status="active")
        await create_property(db_session, agent, status="sold")
        await create_property(db_session, agent, status="rented")
        await create_property(db_session, agent, status="draft")

        response = await client.get(f"/api/agents/{agent.id}")
        assert response.status_code == 200

        data = response.json()
        assert data["agent"]["id"] == agent.id
        assert [p["id"] for p in data["properties"]] == [active.id]
        assert data["stats"] == {"total_properties": 4, "active_properties": 1, "sold_properties": 2}

        response = await client.get("/api/agents/unknown-agent")
        assert response.status_code == 404
        assert response.json()["message"] == "Agent not found"

    """
    Test Case TC-045: Agent Listings Visibility
    Description: Verify that visitors only see active listings while the agent sees all
    Expected Result: Visitors get 1 listing, the owner gets 2 and can filter by status
    """
    @pytest.mark.asyncio
    async def test_tc045_agent_listings_visibility(self, client: AsyncClient, db_session):
        """TC-045: Agent listings visibility"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        await create_property(db_session, agent, status="active")
        await create_property(db_session, agent, status="draft")

        response = await client.get(f"/api/agents/{agent.id}/properties")
        assert response.json()["total"] == 1

        response = await client.get(f"/api/agents/{agent.id}/properties", headers=auth_headers(agent))
        assert response.json()["total"] == 2

        response = await client.get(f"/api/agents/{agent.id}/properties?status=draft", headers=auth_headers(agent))
        assert response.json()["total"] == 1
        assert response.json()["properties"][0]["status"] == "draft"


class TestAgentProfile:
    """
    Test Case TC-046: Update Agent Profile
    Description: Verify that an agent can update only the fields sent
    Expected Result: Returns 200; bio and city change, phone stays
    """
    @pytest.mark.asyncio
    async def test_tc046_update_agent_profile(self, authenticated_agent):
        """TC-046: Update agent profile"""
        client, agent = authenticated_agent

        response = await client.put("/api/agents/profile", json={
            "bio": "Ten years of helping families find homes.",
            "address": {"city": "Noida"},
        })
        assert response.status_code == 200

        profile = response.json()["user"]["agent_profile"]
        assert profile["bio"] == "Ten years of helping families find homes."
        assert profile["address"]["city"] == "Noida"
        assert profile["phone"] == "+919876543210"

    """
    Test Case TC-047: Update Agent Profile as Non-Agent
    Description: Verify that plain users cannot reach the agent profile endpoint
    Expected Result: Returns 403
    """
    @pytest.mark.asyncio
    async def test_tc047_update_agent_profile_non_agent(self, authenticated_user):
        """TC-047: Update agent profile as non-agent"""
        client, _ = authenticated_user

        response = await client.put("/api/agents/profile", json={"bio": "Not an agent"})
        assert response.status_code == 403

    """
    Test Case TC-046B: Blank License Numbers
    Description: Verify that blank license numbers are stored as null and never collide
    Expected Result: Two agents can both clear their license number; each gets 200
    """
    @pytest.mark.asyncio
    async def test_tc046b_blank_license_numbers(self, authenticated_agent, db_session):
        """TC-046B: Blank license numbers"""
        client, _ = authenticated_agent
        other = await create_user(db_session, is_agent=True, role="agent", license_number="LIC-77")

        response = await client.put("/api/agents/profile", json={"license_number": ""})
        assert response.status_code == 200
        assert response.json()["user"]["agent_profile"]["license_number"] is None

        response = await client.put(
            "/api/agents/profile", json={"license_number": "  "}, headers=auth_headers(other)
        )
        assert response.status_code == 200
        assert response.json()["user"]["agent_profile"]["license_number"] is None

        response = await client.put("/api/agents/profile", json={"license_number": "LIC-77"})
        assert response.status_code == 400


class TestAgentRating:
    """
    Test Case TC-048: Rate an Agent
    Description: Verify that ratings fold into the running average
    Expected Result: (4.0 * 1 + 5) / 2 = 4.5 with count 2
    """
    @pytest.mark.asyncio
    async def test_tc048_rate_agent(self, client: AsyncClient, db_session):
        """TC-048: Rate an agent"""
        agent = await create_user(db_session, is_agent=True, role="agent", rating_average=4.0, rating_count=1)
        rater = await create_user(db_session)

        response = await client.post(
            f"/api/agents/{agent.id}/rate",
            json={"rating": 5, "comment": "Very responsive"},
            headers=auth_headers(rater),
        )
        assert response.status_code == 200
        assert response.json()["rating"] == {"average": 4.5, "count": 2}

        response = await client.get(f"/api/agents/{agent.id}")
        assert response.json()["agent"]["agent_profile"]["rating"] == {"average": 4.5, "count": 2}

    """
    Test Case TC-049: Invalid Ratings
    Description: Verify self-ratings, out-of-range ratings and anonymous ratings are rejected
    Expected Result: Returns 400, 400 and 401
    """
    @pytest.mark.asyncio
    async def test_tc049_invalid_ratings(self, client: AsyncClient, db_session):
        """TC-049: Invalid ratings"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        rater = await create_user(db_session)

        response = await client.post(f"/api/agents/{agent.id}/rate", json={"rating": 5}, headers=auth_headers(agent))
        assert response.status_code == 400
        assert response.json()["message"] == "You cannot rate yourself"

        response = await client.post(f"/api/agents/{agent.id}/rate", json={"rating": 6}, headers=auth_headers(rater))
        assert response.status_code == 400

        response = await client.post(f"/api/agents/{agent.id}/rate", json={"rating": 3})
        assert response.status_code == 401
