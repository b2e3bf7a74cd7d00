"""
Property Service - listing, search and owner management of properties
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
import logging
import uuid
from sqlalchemy import select, update, func, and_, or_, desc
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.property import Property, PropertyInquiry
from app.models.user import User
from app.services.serializers import serialize_property
from app.utils.dependencies import is_owner_or_admin
from app.utils.exceptions import ForbiddenError
from app.utils.geo import bounding_box, haversine_distance, longitude_ranges
from app.utils.query_builder import PropertyQuery

logger = logging.getLogger(__name__)

NEARBY_LIMIT = 20


def property_load_options(include_inquiries: bool = False) -> list:
    options = [
        selectinload(Property.images),
        selectinload(Property.agent).selectinload(User.agent_profile),
    ]
    if include_inquiries:
        options.append(selectinload(Property.inquiries))
    return options


async def load_property(session, property_id: str, include_inquiries: bool = False) -> Optional[Property]:
    """Load a property with its images and agent, refreshing anything already in the session"""
    stmt = (
        select(Property)
        .options(*property_load_options(include_inquiries))
        .where(Property.id == property_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def apply_property_payload(prop: Property, data: Dict) -> None:
    """
    Copy a (possibly partial) nested request payload onto the flat columns.
    Only keys present in `data` are touched.
    """
    for key in ("title", "description", "type", "listing_type", "status", "featured", "amenities", "tags"):
        if key in data and data[key] is not None:
            setattr(prop, key, data[key])

    price = data.get("price")
    if price:
        if "amount" in price:
            prop.price_amount = price["amount"]
        if "currency" in price:
            prop.price_currency = price["currency"]
        if "price_type" in price:
            prop.price_type = price["price_type"]

    address = data.get("address")
    if address:
        for key in ("street", "city", "state", "zip_code", "country"):
            if key in address and address[key] is not None:
                setattr(prop, key, address[key])
        if "coordinates" in address:
            coordinates = address["coordinates"] or {}
            prop.latitude = coordinates.get("latitude")
            prop.longitude = coordinates.get("longitude")

    specifications = data.get("specifications")
    if specifications:
        for key in ("bedrooms", "bathrooms", "floors", "parking", "furnished", "year_built"):
            if key in specifications:
                setattr(prop, key, specifications[key])
        area = specifications.get("area")
        if area:
            if "value" in area:
                prop.area_value = area["value"]
            if "unit" in area:
                prop.area_unit = area["unit"]

    seo = data.get("seo")
    if seo:
        if "title" in seo:
            prop.seo_title = seo["title"]
        if "description" in seo:
            prop.seo_description = seo["description"]

    contact_info = data.get("contact_info")
    if contact_info:
        if "phone" in contact_info:
            prop.contact_phone = contact_info["phone"]
        if "email" in contact_info:
            prop.contact_email = contact_info["email"]
        if "whatsapp" in contact_info:
            prop.contact_whatsapp = contact_info["whatsapp"]


async def list_properties(query: PropertyQuery) -> Tuple[List[dict], int]:
    """Run a property query descriptor. Returns (items, total)."""
    async with AsyncSessionLocal() as session:
        where_clause = and_(*query.conditions)

        count_stmt = select(func.count()).select_from(Property).where(where_clause)
        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        stmt = (
            select(Property)
            .options(*property_load_options())
            .where(where_clause)
            .order_by(*query.order_by, Property.id)
            .offset(query.pager.offset)
            .limit(query.pager.limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        props = result.scalars().all()

        return [serialize_property(prop) for prop in props], total


async def get_featured_properties(limit: int = 6) -> List[dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Property)
            .options(*property_load_options())
            .where(Property.status == "active", Property.featured.is_(True))
            .order_by(desc(Property.created_at))
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return [serialize_property(prop) for prop in result.scalars().all()]


async def find_nearby_properties(latitude: float, longitude: float, max_distance: int = 10000) -> List[dict]:
    """
    Active properties within `max_distance` meters, nearest first.
    A bounding box narrows the SQL scan; exact distance is checked here.
    """
    min_lat, max_lat, min_lng, max_lng = bounding_box(latitude, longitude, max_distance)

    async with AsyncSessionLocal() as session:
        stmt = (
            select(Property)
            .options(*property_load_options())
            .where(
                Property.status == "active",
                Property.latitude.isnot(None),
                Property.longitude.isnot(None),
                Property.latitude.between(min_lat, max_lat),
                or_(*(Property.longitude.between(low, high) for low, high in longitude_ranges(min_lng, max_lng))),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)

        candidates = []
        for prop in result.scalars().all():
            distance = haversine_distance(latitude, longitude, prop.latitude, prop.longitude)
            if distance <= max_distance:
                candidates.append((distance, prop))

        candidates.sort(key=lambda pair: pair[0])

        items = []
        for distance, prop in candidates[:NEARBY_LIMIT]:
            data = serialize_property(prop)
            data["distance"] = round(distance, 1)
            items.append(data)
        return items


async def get_property_detail(property_id: str, viewer: Optional[dict] = None) -> Optional[dict]:
    """Fetch one property; counts a view unless the viewer owns it"""
    async with AsyncSessionLocal() as session:
        prop = await load_property(session, property_id, include_inquiries=True)
        if not prop:
            return None

        if not viewer or viewer["id"] != prop.agent_id:
            await session.execute(
                update(Property)
                .where(Property.id == property_id)
                .values(views=Property.views + 1, impressions=Property.impressions + 1)
            )
            await session.commit()
            prop = await load_property(session, property_id, include_inquiries=True)

        return serialize_property(prop, include_inquiries=True)


async def create_property(agent_id: str, property_data: Dict) -> dict:
    """Create a listing owned by `agent_id`; listings start as drafts unless a status is given"""
    async with AsyncSessionLocal() as session:
        property_id = str(uuid.uuid4())
        new_property = Property(
            id=property_id,
            agent_id=agent_id,
            status=property_data.get("status") or "draft",
            views=0,
            impressions=0,
            clicks=0,
            saves=0,
            is_verified=False,
        )
        apply_property_payload(new_property, property_data)

        session.add(new_property)
        await session.commit()

        prop = await load_property(session, property_id)
        logger.info(f"Agent {agent_id} created property {property_id}")
        return serialize_property(prop)


async def update_property(property_id: str, user: dict, update_data: Dict) -> Optional[dict]:
    async with AsyncSessionLocal() as session:
        prop = await load_property(session, property_id)
        if not prop:
            return None

        if not is_owner_or_admin(user, prop.agent_id):
            raise ForbiddenError("Not authorized to update this property")

        apply_property_payload(prop, update_data)
        await session.commit()

        prop = await load_property(session, property_id)
        logger.info(f"Property {property_id} updated by {user['id']}")
        return serialize_property(prop)


async def update_property_status(property_id: str, user: dict, new_status: str) -> Optional[dict]:
    """Any status may be written; only ownership or the admin role is checked"""
    async with AsyncSessionLocal() as session:
        prop = await load_property(session, property_id)
        if not prop:
            return None

        if not is_owner_or_admin(user, prop.agent_id):
            raise ForbiddenError("Not authorized to update this property")

        previous = prop.status
        prop.status = new_status
        await session.commit()

        prop = await load_property(session, property_id)
        logger.info(f"Property {property_id} status {previous} -> {new_status}")
        return serialize_property(prop)


async def delete_property(property_id: str, user: dict) -> bool:
    """Delete a property together with its images and inquiries"""
    async with AsyncSessionLocal() as session:
        prop = await load_property(session, property_id, include_inquiries=True)
        if not prop:
            return False

        if not is_owner_or_admin(user, prop.agent_id):
            raise ForbiddenError("Not authorized to delete this property")

        await session.delete(prop)
        await session.commit()

        logger.info(f"Property {property_id} deleted by {user['id']}")
        return True


async def add_inquiry(property_id: str, inquiry_data: Dict, user_id: Optional[str] = None) -> Optional[dict]:
    async with AsyncSessionLocal() as session:
        stmt = select(Property.id).where(Property.id == property_id)
        result = await session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None

        inquiry = PropertyInquiry(
            id=str(uuid.uuid4()),
            property_id=property_id,
            user_id=user_id,
            message=inquiry_data["message"],
            phone=inquiry_data.get("phone"),
            email=inquiry_data.get("email"),
            created_at=datetime.now(timezone.utc),
        )
        session.add(inquiry)
        await session.commit()

        logger.info(f"Inquiry {inquiry.id} added to property {property_id}")
        return {"id": inquiry.id, "property_id": property_id}
