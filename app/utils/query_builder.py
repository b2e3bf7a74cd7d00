"""
Filter and sort construction for list endpoints.

Builders turn optional request parameters into lists of SQLAlchemy
conditions; absent or empty parameters contribute nothing. Sort resolvers map
an allow-listed sort key and direction onto concrete column orderings.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional
from sqlalchemy import String, asc, cast, desc, or_
from app.models.contact import Contact, CONTACT_PRIORITIES, CONTACT_STATUSES, CONTACT_TYPES
from app.models.property import Property, LISTING_TYPES, PROPERTY_STATUSES, PROPERTY_TYPES
from app.models.user import AgentProfile, User, SPECIALIZATIONS
from app.utils.exceptions import ValidationError
from app.utils.pagination import Pager


SORT_ORDERS = ("asc", "desc")

PROPERTY_SORT_COLUMNS = {
    "price": Property.price_amount,
    "createdAt": Property.created_at,
    "views": Property.views,
    "area": Property.area_value,
}

AGENT_SORT_COLUMNS = {
    "rating": AgentProfile.rating_average,
    "experience": AgentProfile.experience,
    "transactions": AgentProfile.total_transactions,
    "createdAt": User.created_at,
}


@dataclass
class PropertyQuery:
    """Everything a service needs to run one paged property listing"""
    conditions: List[Any] = field(default_factory=list)
    order_by: List[Any] = field(default_factory=list)
    pager: Pager = field(default_factory=Pager.from_params)


def _is_set(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _substring(value: str) -> str:
    """ILIKE pattern matching `value` literally anywhere in the column"""
    escaped = value.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _check_choice(errors: list, name: str, value, choices) -> None:
    if _is_set(value) and value not in choices:
        errors.append({"field": name, "message": f"Invalid value. Must be one of: {', '.join(choices)}"})


def _raise_if_errors(errors: list) -> None:
    if errors:
        raise ValidationError("Validation errors", field_errors=errors)


def build_property_filters(
    type: Optional[str] = None,
    listing_type: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[int] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    status: Optional[str] = None,
    agent_id: Optional[str] = None,
) -> List[Any]:
    """
    Build property predicates.

    Without an agent scope the listing is public: status defaults to active.
    With an agent scope (an owner browsing their own listings) status is only
    restricted when one is given.
    """
    errors = []
    _check_choice(errors, "type", type, PROPERTY_TYPES)
    _check_choice(errors, "listingType", listing_type, LISTING_TYPES)
    _check_choice(errors, "status", status, PROPERTY_STATUSES)
    _raise_if_errors(errors)

    conditions = []

    if _is_set(agent_id):
        conditions.append(Property.agent_id == agent_id)
        if _is_set(status):
            conditions.append(Property.status == status)
    else:
        conditions.append(Property.status == (status if _is_set(status) else "active"))

    if _is_set(type):
        conditions.append(Property.type == type)

    if _is_set(listing_type):
        conditions.append(Property.listing_type == listing_type)

    if _is_set(city):
        conditions.append(Property.city.ilike(_substring(city), escape="\\"))

    if _is_set(state):
        conditions.append(Property.state.ilike(_substring(state), escape="\\"))

    if bedrooms is not None:
        conditions.append(Property.bedrooms >= bedrooms)

    if bathrooms is not None:
        conditions.append(Property.bathrooms >= bathrooms)

    if min_price is not None:
        conditions.append(Property.price_amount >= min_price)

    if max_price is not None:
        conditions.append(Property.price_amount <= max_price)

    if _is_set(search):
        search_pattern = _substring(search)
        conditions.append(
            or_(
                Property.title.ilike(search_pattern, escape="\\"),
                Property.description.ilike(search_pattern, escape="\\"),
                Property.city.ilike(search_pattern, escape="\\"),
                Property.state.ilike(search_pattern, escape="\\"),
            )
        )

    return conditions


def _resolve_sort(sort_by, sort_order, columns: dict, default: list) -> List[Any]:
    errors = []
    _check_choice(errors, "sortBy", sort_by, tuple(columns))
    _check_choice(errors, "sortOrder", sort_order, SORT_ORDERS)
    _raise_if_errors(errors)

    if not _is_set(sort_by):
        return default

    direction = asc if sort_order == "asc" else desc
    return [direction(columns[sort_by])]


def resolve_property_sort(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> List[Any]:
    """Featured first, then newest first, unless an allow-listed key is given"""
    return _resolve_sort(
        sort_by,
        sort_order,
        PROPERTY_SORT_COLUMNS,
        [desc(Property.featured), desc(Property.created_at)],
    )


def resolve_agent_sort(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> List[Any]:
    """Highest rating first, ties broken by transaction count"""
    return _resolve_sort(
        sort_by,
        sort_order,
        AGENT_SORT_COLUMNS,
        [desc(AgentProfile.rating_average), desc(AgentProfile.total_transactions)],
    )


def build_property_query(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    **filters,
) -> PropertyQuery:
    """Combine filters, ordering and paging into one descriptor"""
    return PropertyQuery(
        conditions=build_property_filters(**filters),
        order_by=resolve_property_sort(sort_by, sort_order),
        pager=Pager.from_params(page, limit),
    )


def build_agent_filters(
    specialization: Optional[str] = None,
    city: Optional[str] = None,
    min_rating: Optional[float] = None,
    search: Optional[str] = None,
) -> List[Any]:
    """Public agent directory: active, verified agents only"""
    errors = []
    _check_choice(errors, "specialization", specialization, SPECIALIZATIONS)
    if min_rating is not None and (min_rating < 0 or min_rating > 5):
        errors.append({"field": "minRating", "message": "Minimum rating must be between 0 and 5"})
    _raise_if_errors(errors)

    conditions = [
        User.is_agent.is_(True),
        User.is_active.is_(True),
        AgentProfile.is_verified.is_(True),
    ]

    if _is_set(specialization):
        # JSON list column; match the quoted element in its serialized form
        conditions.append(cast(AgentProfile.specializations, String).like(f'%"{specialization}"%'))

    if _is_set(city):
        conditions.append(AgentProfile.city.ilike(_substring(city), escape="\\"))

    if min_rating is not None:
        conditions.append(AgentProfile.rating_average >= min_rating)

    if _is_set(search):
        conditions.append(User.name.ilike(_substring(search), escape="\\"))

    return conditions


def build_contact_filters(
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Any]:
    errors = []
    _check_choice(errors, "status", status, CONTACT_STATUSES)
    _check_choice(errors, "type", type, CONTACT_TYPES)
    _check_choice(errors, "priority", priority, CONTACT_PRIORITIES)
    _raise_if_errors(errors)

    conditions = []

    if _is_set(status):
        conditions.append(Contact.status == status)

    if _is_set(type):
        conditions.append(Contact.type == type)

    if _is_set(priority):
        conditions.append(Contact.priority == priority)

    if _is_set(search):
        search_pattern = _substring(search)
        conditions.append(
            or_(
                Contact.name.ilike(search_pattern, escape="\\"),
                Contact.email.ilike(search_pattern, escape="\\"),
                Contact.subject.ilike(search_pattern, escape="\\"),
            )
        )

    return conditions
