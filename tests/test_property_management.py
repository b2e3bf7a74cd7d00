"""
Test Case Suite: Property Management Module
Test ID Range: TC-020 to TC-039

This test suite validates property creation, public listing with filters,
sorting and pagination, detail views and view counting, owner-only updates,
status changes, deletion, inquiries and nearby search.
"""

import pytest
from httpx import AsyncClient
from tests.conftest import create_user, create_property, auth_headers


class TestPropertyCreation:
    """
    Test Case TC-020: Create Property with Valid Data
    Description: Verify that an agent can create a listing and that it starts as a draft
    Expected Result: Returns 201 with the nested property payload
    """
    @pytest.mark.asyncio
    async def test_tc020_create_property_valid_data(self, authenticated_agent, property_payload):
        """TC-020: Create property with valid data"""
        client, agent = authenticated_agent

        response = await client.post("/api/properties", json=property_payload)
        assert response.status_code == 201

        data = response.json()["property"]
        assert data["status"] == "draft"
        assert data["agent_id"] == agent.id
        assert data["price"]["amount"] == 7500000
        assert data["address"]["city"] == "Gurgaon"
        assert data["address"]["coordinates"] == {"latitude": 28.4595, "longitude": 77.0266}
        assert data["specifications"]["area"] == {"value": 1450, "unit": "sqft"}
        assert data["amenities"] == ["gym", "security"]
        assert data["views"] == 0
        assert data["agent"]["name"] == "Test Agent"

    """
    Test Case TC-021: Create Property as Non-Agent
    Description: Verify that plain users cannot create listings
    Expected Result: Returns 403
    """
    @pytest.mark.asyncio
    async def test_tc021_create_property_non_agent(self, authenticated_user, property_payload):
        """TC-021: Create property as non-agent"""
        client, _ = authenticated_user

        response = await client.post("/api/properties", json=property_payload)
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Agent privileges required."

    """
    Test Case TC-022: Create Property with Invalid Fields
    Description: Verify that short titles and unknown amenities are rejected
    Expected Result: Returns 400 with field errors
    """
    @pytest.mark.asyncio
    async def test_tc022_create_property_invalid_fields(self, authenticated_agent, property_payload):
        """TC-022: Create property with invalid fields"""
        client, _ = authenticated_agent
        property_payload["title"] = "Short"
        property_payload["amenities"] = ["helipad"]

        response = await client.post("/api/properties", json=property_payload)
        assert response.status_code == 400

        fields = {error["field"] for error in response.json()["errors"]}
        assert "title" in fields
        assert "amenities" in fields


class TestPropertyListing:
    """
    Test Case TC-023: Filter Properties by City and Minimum Price
    Description: Verify that filters combine and only active listings are public,
                 featured first and then newest first
    Expected Result: Returns the matching active listings in default order
    """
    @pytest.mark.asyncio
    async def test_tc023_filter_city_and_min_price(self, client: AsyncClient, db_session):
        """TC-023: Filter by city and minimum price"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        featured = await create_property(db_session, agent, minutes_ago=30, price_amount=200000, featured=True)
        newest = await create_property(db_session, agent, minutes_ago=10, price_amount=300000)
        older = await create_property(db_session, agent, minutes_ago=20, price_amount=150000)
        await create_property(db_session, agent, minutes_ago=5, price_amount=50000)
        await create_property(db_session, agent, minutes_ago=5, price_amount=500000, city="Mumbai", state="Maharashtra")
        await create_property(db_session, agent, minutes_ago=5, price_amount=400000, status="draft")

        response = await client.get("/api/properties?city=delhi&minPrice=100000")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 3
        assert [p["id"] for p in data["properties"]] == [featured.id, newest.id, older.id]

    """
    Test Case TC-024: Paginate Properties
    Description: Verify page/limit slicing and the pagination block
    Expected Result: Returns count, total, page and pages
    """
    @pytest.mark.asyncio
    async def test_tc024_paginate_properties(self, client: AsyncClient, db_session):
        """TC-024: Paginate properties"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        for i in range(5):
            await create_property(db_session, agent, minutes_ago=i)

        response = await client.get("/api/properties?page=3&limit=2")
        assert response.status_code == 200

        data = response.json()
        assert data["count"] == 1
        assert data["total"] == 5
        assert data["page"] == 3
        assert data["pages"] == 3

    """
    Test Case TC-025: Reject Invalid Listing Parameters
    Description: Verify that out-of-range limits and unknown enum values are rejected
    Expected Result: Returns 400 with the offending field named
    """
    @pytest.mark.asyncio
    async def test_tc025_invalid_listing_parameters(self, client: AsyncClient):
        """TC-025: Invalid listing parameters"""
        response = await client.get("/api/properties?limit=500")
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "limit"

        response = await client.get("/api/properties?type=castle")
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "type"

        response = await client.get("/api/properties?sortBy=title")
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "sortBy"

    """
    Test Case TC-026: Sort and Search Properties
    Description: Verify sortBy/sortOrder and free-text search over title, description, city and state
    Expected Result: Returns matching listings in the requested order
    """
    @pytest.mark.asyncio
    async def test_tc026_sort_and_search(self, client: AsyncClient, db_session):
        """TC-026: Sort and search properties"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        cheap = await create_property(db_session, agent, price_amount=100000, description="Cozy studio overlooking the lake with lots of natural light.")
        mid = await create_property(db_session, agent, price_amount=200000, description="Lake facing villa with a private jetty and a landscaped lawn.")
        await create_property(db_session, agent, price_amount=300000, description="City centre penthouse with skyline views and a rooftop deck.")

        response = await client.get("/api/properties?search=lake&sortBy=price&sortOrder=asc")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["properties"]] == [cheap.id, mid.id]

    """
    Test Case TC-027: Featured Properties
    Description: Verify that only active featured listings are returned
    Expected Result: Returns featured active listings only
    """
    @pytest.mark.asyncio
    async def test_tc027_featured_properties(self, client: AsyncClient, db_session):
        """TC-027: Featured properties"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        featured = await create_property(db_session, agent, featured=True)
        await create_property(db_session, agent, featured=True, status="draft")
        await create_property(db_session, agent)

        response = await client.get("/api/properties/featured")
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["properties"]] == [featured.id]

    """
    Test Case TC-028: Agent's Own Listings Include Drafts
    Description: Verify that /agent/my-properties returns every status and can be filtered
    Expected Result: Returns drafts and active listings for the owner only
    """
    @pytest.mark.asyncio
    async def test_tc028_my_properties(self, client: AsyncClient, db_session):
        """TC-028: Agent's own listings"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        other = await create_user(db_session, is_agent=True, role="agent")
        await create_property(db_session, agent, status="draft")
        await create_property(db_session, agent, status="active")
        await create_property(db_session, other, status="active")

        response = await client.get("/api/properties/agent/my-properties", headers=auth_headers(agent))
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = await client.get("/api/properties/agent/my-properties?status=draft", headers=auth_headers(agent))
        assert response.json()["total"] == 1
        assert response.json()["properties"][0]["status"] == "draft"


class TestPropertyDetail:
    """
    Test Case TC-029: View Counting
    Description: Verify that anonymous views are counted and the owner's are not
    Expected Result: views and impressions increase by one per non-owner view
    """
    @pytest.mark.asyncio
    async def test_tc029_view_counting(self, client: AsyncClient, db_session):
        """TC-029: View counting"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent)

        response = await client.get(f"/api/properties/{prop.id}")
        assert response.status_code == 200
        data = response.json()["property"]
        assert data["views"] == 1
        assert data["analytics"]["impressions"] == 1
        assert data["inquiries"] == []

        response = await client.get(f"/api/properties/{prop.id}", headers=auth_headers(agent))
        assert response.json()["property"]["views"] == 1

        response = await client.get(f"/api/properties/{prop.id}")
        assert response.json()["property"]["views"] == 2

    """
    Test Case TC-030: Retrieve Non-Existent Property
    Description: Verify that unknown ids return 404
    Expected Result: Returns 404 with 'Property not found'
    """
    @pytest.mark.asyncio
    async def test_tc030_property_not_found(self, client: AsyncClient):
        """TC-030: Property not found"""
        response = await client.get("/api/properties/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Property not found"}


class TestPropertyUpdates:
    """
    Test Case TC-031: Partial Update by Owner
    Description: Verify that only the sent fields change
    Expected Result: Returns 200; price changes and currency stays
    """
    @pytest.mark.asyncio
    async def test_tc031_partial_update_by_owner(self, client: AsyncClient, db_session):
        """TC-031: Partial update by owner"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent)

        response = await client.put(
            f"/api/properties/{prop.id}",
            json={"price": {"amount": 275000}, "tags": ["corner plot"]},
            headers=auth_headers(agent),
        )
        assert response.status_code == 200

        data = response.json()["property"]
        assert data["price"]["amount"] == 275000
        assert data["price"]["currency"] == "INR"
        assert data["tags"] == ["corner plot"]
        assert data["title"] == prop.title

    """
    Test Case TC-032: Update by Non-Owner
    Description: Verify that another agent cannot modify a listing
    Expected Result: Returns 403
    """
    @pytest.mark.asyncio
    async def test_tc032_update_by_non_owner(self, client: AsyncClient, db_session):
        """TC-032: Update by non-owner"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        intruder = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent)

        response = await client.put(
            f"/api/properties/{prop.id}",
            json={"featured": True},
            headers=auth_headers(intruder),
        )
        assert response.status_code == 403

        response = await client.delete(f"/api/properties/{prop.id}", headers=auth_headers(intruder))
        assert response.status_code == 403

    """
    Test Case TC-033: Status Changes
    Description: Verify that any status may follow any other, and that admins may change it
    Expected Result: draft -> sold -> active succeed for the owner; admin can set inactive
    """
    @pytest.mark.asyncio
    async def test_tc033_status_changes(self, client: AsyncClient, db_session):
        """TC-033: Status changes"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        admin = await create_user(db_session, role="admin")
        prop = await create_property(db_session, agent, status="draft")

        for new_status in ("sold", "active"):
            response = await client.put(
                f"/api/properties/{prop.id}/status",
                json={"status": new_status},
                headers=auth_headers(agent),
            )
            assert response.status_code == 200
            assert response.json()["property"]["status"] == new_status

        response = await client.put(
            f"/api/properties/{prop.id}/status",
            json={"status": "inactive"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["property"]["status"] == "inactive"

        response = await client.put(
            f"/api/properties/{prop.id}/status",
            json={"status": "archived"},
            headers=auth_headers(agent),
        )
        assert response.status_code == 400

    """
    Test Case TC-034: Delete Property
    Description: Verify that the owner can delete a listing along with its inquiries
    Expected Result: Returns 200, then 404 on retrieval
    """
    @pytest.mark.asyncio
    async def test_tc034_delete_property(self, client: AsyncClient, db_session):
        """TC-034: Delete property"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent)
        await client.post(f"/api/properties/{prop.id}/inquiry", json={"message": "Is the price negotiable?"})

        response = await client.delete(f"/api/properties/{prop.id}", headers=auth_headers(agent))
        assert response.status_code == 200
        assert response.json()["message"] == "Property deleted successfully"

        response = await client.get(f"/api/properties/{prop.id}")
        assert response.status_code == 404


class TestInquiries:
    """
    Test Case TC-035: Submit Inquiry
    Description: Verify that anyone can send an inquiry and that signed-in senders are recorded
    Expected Result: Returns 200; the inquiries appear on the property detail
    """
    @pytest.mark.asyncio
    async def test_tc035_submit_inquiry(self, client: AsyncClient, db_session):
        """TC-035: Submit inquiry"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        buyer = await create_user(db_session)
        prop = await create_property(db_session, agent)

        response = await client.post(
            f"/api/properties/{prop.id}/inquiry",
            json={"message": "I would like to schedule a visit.", "phone": "+919811111111"},
        )
        assert response.status_code == 200

        response = await client.post(
            f"/api/properties/{prop.id}/inquiry",
            json={"message": "Is parking included in the price?"},
            headers=auth_headers(buyer),
        )
        assert response.status_code == 200

        response = await client.get(f"/api/properties/{prop.id}", headers=auth_headers(agent))
        inquiries = response.json()["property"]["inquiries"]
        assert len(inquiries) == 2
        assert {inquiry["user_id"] for inquiry in inquiries} == {None, buyer.id}

    """
    Test Case TC-036: Inquiry Validation
    Description: Verify short messages and unknown properties are rejected
    Expected Result: Returns 400 for a short message, 404 for an unknown property
    """
    @pytest.mark.asyncio
    async def test_tc036_inquiry_validation(self, client: AsyncClient, db_session):
        """TC-036: Inquiry validation"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent)

        response = await client.post(f"/api/properties/{prop.id}/inquiry", json={"message": "Hi"})
        assert response.status_code == 400

        response = await client.post("/api/properties/missing/inquiry", json={"message": "Is this still available?"})
        assert response.status_code == 404


class TestNearbySearch:
    """
    Test Case TC-037: Nearby Properties
    Description: Verify that only active listings within maxDistance are returned, nearest first
    Expected Result: Returns the two close listings with their distances
    """
    @pytest.mark.asyncio
    async def test_tc037_nearby_properties(self, client: AsyncClient, db_session):
        """TC-037: Nearby properties"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        farther = await create_property(db_session, agent, latitude=28.6450, longitude=77.2300)
        nearest = await create_property(db_session, agent, latitude=28.6350, longitude=77.2200)
        await create_property(db_session, agent, latitude=28.7041, longitude=77.1025)
        await create_property(db_session, agent, latitude=28.6320, longitude=77.2170, status="draft")
        await create_property(db_session, agent)

        response = await client.get("/api/properties/search/nearby?latitude=28.6315&longitude=77.2167&maxDistance=5000")
        assert response.status_code == 200

        properties = response.json()["properties"]
        assert [p["id"] for p in properties] == [nearest.id, farther.id]
        assert properties[0]["distance"] < properties[1]["distance"] < 5000

    """
    Test Case TC-037B: Nearby Properties Across the Antimeridian
    Description: Verify that a listing just across longitude 180 from the search point is found
    Expected Result: Returns the listing about 2 km away
    """
    @pytest.mark.asyncio
    async def test_tc037b_nearby_across_antimeridian(self, client: AsyncClient, db_session):
        """TC-037B: Nearby properties across the antimeridian"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        prop = await create_property(db_session, agent, latitude=-17.0, longitude=179.99)
        await create_property(db_session, agent, latitude=-17.0, longitude=178.5)

        response = await client.get("/api/properties/search/nearby?latitude=-17.0&longitude=-179.99&maxDistance=5000")
        assert response.status_code == 200

        properties = response.json()["properties"]
        assert [p["id"] for p in properties] == [prop.id]
        assert 2000 < properties[0]["distance"] < 2200


class TestPropertyEdgeCases:
    """
    Test Case TC-038: Create Property with an Explicit Status
    Description: Verify that a status sent on creation is kept instead of the draft default
    Expected Result: Returns 201 with status active, and the listing is public
    """
    @pytest.mark.asyncio
    async def test_tc038_create_property_with_status(self, authenticated_agent, property_payload):
        """TC-038: Create property with an explicit status"""
        client, _ = authenticated_agent
        property_payload["status"] = "active"

        response = await client.post("/api/properties", json=property_payload)
        assert response.status_code == 201
        assert response.json()["property"]["status"] == "active"

        response = await client.get("/api/properties?city=Gurgaon")
        assert response.json()["total"] == 1

        property_payload["status"] = "archived"
        response = await client.post("/api/properties", json=property_payload)
        assert response.status_code == 400

    """
    Test Case TC-039: Wildcard Characters in Text Filters
    Description: Verify that % and _ in filter text match literally
    Expected Result: "_" and "%" match nothing; a literal match still works
    """
    @pytest.mark.asyncio
    async def test_tc039_wildcards_match_literally(self, client: AsyncClient, db_session):
        """TC-039: Wildcard characters in text filters"""
        agent = await create_user(db_session, is_agent=True, role="agent")
        await create_property(db_session, agent, city="Delhi")
        discounted = await create_property(db_session, agent, city="Delhi", title="Flat 50% off near the metro")

        for city in ("_", "%", "D_lhi"):
            response = await client.get("/api/properties", params={"city": city})
            assert response.status_code == 200
            assert response.json()["total"] == 0

        response = await client.get("/api/properties", params={"search": "50%"})
        assert [p["id"] for p in response.json()["properties"]] == [discounted.id]

        response = await client.get("/api/properties", params={"city": "elh"})
        assert response.json()["total"] == 2
