"""
Property Controller - public listing/search and owner management endpoints
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.schemas.property import (
    PropertyCreateRequest,
    PropertyUpdateRequest,
    PropertyStatusRequest,
    InquiryRequest,
    PropertyEnvelope,
    PropertyListResponse,
    MessageResponse,
)
from app.services.property_service import (
    list_properties,
    get_featured_properties,
    find_nearby_properties,
    get_property_detail,
    create_property,
    update_property,
    update_property_status,
    delete_property,
    add_inquiry,
)
from app.utils.dependencies import get_current_user, get_optional_user, require_agent
from app.utils.exceptions import NotFoundError
from app.utils.query_builder import build_property_query

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=PropertyListResponse)
async def get_properties(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    type: Optional[str] = None,
    listing_type: Optional[str] = Query(None, alias="listingType"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    city: Optional[str] = None,
    state: Optional[str] = None,
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
):
    """
    Public listing of active properties.
    Filters combine with AND; `search` matches title, description, city or state.
    Default order is featured first, then newest first.
    """
    query = build_property_query(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        type=type,
        listing_type=listing_type,
        city=city,
        state=state,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    props, total = await list_properties(query)
    return PropertyListResponse(properties=props, **query.pager.meta(total, len(props)))


@router.get("/featured", response_model=PropertyListResponse)
async def get_featured(limit: int = Query(6, ge=1, le=50)):
    props = await get_featured_properties(limit)
    return PropertyListResponse(count=len(props), properties=props)


@router.get("/search/nearby", response_model=PropertyListResponse)
async def search_nearby(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance: int = Query(10000, alias="maxDistance", ge=100, le=50000),
):
    """Active properties within `maxDistance` meters, nearest first"""
    props = await find_nearby_properties(latitude, longitude, max_distance)
    return PropertyListResponse(count=len(props), properties=props)


@router.get("/agent/my-properties", response_model=PropertyListResponse)
async def get_my_properties(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    status: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    agent: dict = Depends(require_agent),
):
    """All of the current agent's listings, any status unless filtered"""
    query = build_property_query(
        page=page,
        limit=limit,
        sort_by=sort_by or "createdAt",
        sort_order=sort_order or "desc",
        agent_id=agent["id"],
        status=status,
    )
    props, total = await list_properties(query)
    return PropertyListResponse(properties=props, **query.pager.meta(total, len(props)))


@router.get("/{property_id}", response_model=PropertyEnvelope)
async def get_property(
    property_id: str,
    viewer: Optional[dict] = Depends(get_optional_user),
):
    prop = await get_property_detail(property_id, viewer)
    if not prop:
        raise NotFoundError("Property")
    return PropertyEnvelope(property=prop)


@router.post("", response_model=PropertyEnvelope, status_code=status.HTTP_201_CREATED)
async def create_property_endpoint(
    request: PropertyCreateRequest,
    agent: dict = Depends(require_agent),
):
    """Create a new listing; it starts as a draft unless a status is sent"""
    prop = await create_property(agent["id"], request.dict())
    return PropertyEnvelope(message="Property created successfully", property=prop)


@router.put("/{property_id}", response_model=PropertyEnvelope)
async def update_property_endpoint(
    property_id: str,
    request: PropertyUpdateRequest,
    user: dict = Depends(get_current_user),
):
    prop = await update_property(property_id, user, request.dict(exclude_unset=True))
    if not prop:
        raise NotFoundError("Property")
    return PropertyEnvelope(message="Property updated successfully", property=prop)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property_endpoint(
    property_id: str,
    user: dict = Depends(get_current_user),
):
    deleted = await delete_property(property_id, user)
    if not deleted:
        raise NotFoundError("Property")
    return MessageResponse(message="Property deleted successfully")


@router.put("/{property_id}/status", response_model=PropertyEnvelope)
async def update_status_endpoint(
    property_id: str,
    request: PropertyStatusRequest,
    user: dict = Depends(get_current_user),
):
    prop = await update_property_status(property_id, user, request.status)
    if not prop:
        raise NotFoundError("Property")
    return PropertyEnvelope(message="Property status updated successfully", property=prop)


@router.post("/{property_id}/inquiry", response_model=MessageResponse)
async def create_inquiry(
    property_id: str,
    request: InquiryRequest,
    user: Optional[dict] = Depends(get_optional_user),
):
    """Submit an inquiry; the sender is recorded when authenticated"""
    inquiry = await add_inquiry(
        property_id,
        request.dict(),
        user_id=user["id"] if user else None,
    )
    if not inquiry:
        raise NotFoundError("Property")
    return MessageResponse(message="Inquiry submitted successfully")
