"""
Agent directory endpoints - listing, search, detail and rating
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional
from app.schemas.agent_profile import (
    AgentListResponse,
    AgentDetailResponse,
    RateAgentRequest,
    RatingSubmittedResponse,
)
from app.schemas.property import PropertyListResponse
from app.models.property import PROPERTY_STATUSES
from app.services.real_estate_agent_service import (
    list_agents,
    get_top_agents,
    find_nearby_agents,
    get_agent_detail,
    get_agent_properties,
    rate_agent,
)
from app.utils.dependencies import get_current_user, get_optional_user
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.pagination import Pager
from app.utils.query_builder import build_agent_filters, resolve_agent_sort

router = APIRouter(prefix="/agents", tags=["Agents"])


@router.get("", response_model=AgentListResponse)
async def get_agents(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    specialization: Optional[str] = None,
    city: Optional[str] = None,
    min_rating: Optional[float] = Query(None, alias="minRating"),
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
):
    """Verified, active agents; best rated first unless sorted otherwise"""
    conditions = build_agent_filters(
        specialization=specialization,
        city=city,
        min_rating=min_rating,
        search=search,
    )
    order_by = resolve_agent_sort(sort_by, sort_order)
    pager = Pager.from_params(page, limit)

    agents, total = await list_agents(conditions, order_by, pager)
    return AgentListResponse(agents=agents, **pager.meta(total, len(agents)))


@router.get("/top", response_model=AgentListResponse)
async def get_top(limit: int = Query(6, ge=1, le=50)):
    agents = await get_top_agents(limit)
    return AgentListResponse(count=len(agents), agents=agents)


@router.get("/search/nearby", response_model=AgentListResponse)
async def search_nearby(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance: int = Query(10000, alias="maxDistance", ge=100, le=50000),
):
    agents = await find_nearby_agents(latitude, longitude, max_distance)
    return AgentListResponse(count=len(agents), agents=agents)


@router.get("/{agent_id}", response_model=AgentDetailResponse)
async def get_agent(agent_id: str):
    detail = await get_agent_detail(agent_id)
    if not detail:
        raise NotFoundError("Agent")
    return AgentDetailResponse(**detail)


@router.get("/{agent_id}/properties", response_model=PropertyListResponse)
async def get_properties_of_agent(
    agent_id: str,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    status: Optional[str] = None,
    viewer: Optional[dict] = Depends(get_optional_user),
):
    """Active listings for everyone; the agent themself sees every status"""
    if status and status not in PROPERTY_STATUSES:
        raise ValidationError(
            "Validation errors",
            field_errors=[{"field": "status", "message": f"Invalid value. Must be one of: {', '.join(PROPERTY_STATUSES)}"}],
        )
    pager = Pager.from_params(page, limit)

    props, total = await get_agent_properties(agent_id, pager, viewer=viewer, status=status)
    return PropertyListResponse(properties=props, **pager.meta(total, len(props)))


@router.post("/{agent_id}/rate", response_model=RatingSubmittedResponse)
async def rate_agent_endpoint(
    agent_id: str,
    request: RateAgentRequest,
    user: dict = Depends(get_current_user),
):
    rating = await rate_agent(agent_id, user["id"], request.rating, request.comment)
    if rating is None:
        raise NotFoundError("Agent")
    return RatingSubmittedResponse(message="Rating submitted successfully", rating=rating)
