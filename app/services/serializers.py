"""
ORM row -> response dict conversion shared by the services.
Callers must have eager-loaded every relationship they ask to include.
"""
from datetime import datetime, timezone
from typing import Optional
from app.models.contact import Contact
from app.models.document import VerificationDocument
from app.models.property import Property, PropertyImage, PropertyInquiry
from app.models.user import AgentProfile, User


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _image(public_id: Optional[str], url: Optional[str]) -> Optional[dict]:
    if not public_id and not url:
        return None
    return {"public_id": public_id, "url": url}


def serialize_agent_profile(profile: AgentProfile, include_documents: bool = False) -> dict:
    data = {
        "id": profile.id,
        "license_number": profile.license_number,
        "experience": profile.experience,
        "specializations": list(profile.specializations or []),
        "bio": profile.bio,
        "phone": profile.phone,
        "address": {
            "street": profile.street,
            "city": profile.city,
            "state": profile.state,
            "zip_code": profile.zip_code,
            "country": profile.country,
        },
        "profile_image": _image(profile.profile_image_public_id, profile.profile_image_url),
        "rating": {
            "average": profile.rating_average or 0.0,
            "count": profile.rating_count or 0,
        },
        "total_transactions": profile.total_transactions or 0,
        "is_verified": profile.is_verified,
    }
    if include_documents:
        data["verification_documents"] = [serialize_document(doc) for doc in profile.verification_documents]
    return data


def serialize_user(user: User, include_profile: bool = True) -> dict:
    data = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "is_agent": user.is_agent,
        "is_active": user.is_active,
        "profile_image": _image(user.profile_image_public_id, user.profile_image_url),
        "last_login": iso(user.last_login),
        "created_at": iso(user.created_at) or "",
    }
    if include_profile:
        profile = user.agent_profile
        data["agent_profile"] = serialize_agent_profile(profile) if profile else None
    return data


def serialize_agent_summary(user: User) -> dict:
    """The slice of an agent embedded in property payloads"""
    profile = user.agent_profile
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": profile.phone if profile else None,
        "rating": {
            "average": profile.rating_average if profile else 0.0,
            "count": profile.rating_count if profile else 0,
        },
        "profile_image": _image(profile.profile_image_public_id, profile.profile_image_url) if profile else None,
    }


def serialize_image(image: PropertyImage) -> dict:
    return {
        "id": image.id,
        "public_id": image.public_id,
        "url": image.url,
        "caption": image.caption or "",
        "is_primary": image.is_primary,
    }


def serialize_inquiry(inquiry: PropertyInquiry) -> dict:
    return {
        "id": inquiry.id,
        "user_id": inquiry.user_id,
        "message": inquiry.message,
        "phone": inquiry.phone,
        "email": inquiry.email,
        "created_at": iso(inquiry.created_at),
    }


def serialize_document(doc: VerificationDocument) -> dict:
    return {
        "id": doc.id,
        "type": doc.document_type,
        "file_name": doc.file_name,
        "url": doc.cloudinary_url,
        "uploaded_at": iso(doc.uploaded_at),
    }


def serialize_property(
    prop: Property,
    include_agent: bool = True,
    include_inquiries: bool = False,
) -> dict:
    coordinates = None
    if prop.latitude is not None and prop.longitude is not None:
        coordinates = {"latitude": prop.latitude, "longitude": prop.longitude}

    data = {
        "id": prop.id,
        "agent_id": prop.agent_id,
        "title": prop.title,
        "description": prop.description,
        "type": prop.type,
        "listing_type": prop.listing_type,
        "status": prop.status,
        "featured": prop.featured,
        "price": {
            "amount": prop.price_amount,
            "currency": prop.price_currency,
            "price_type": prop.price_type,
        },
        "address": {
            "street": prop.street,
            "city": prop.city,
            "state": prop.state,
            "zip_code": prop.zip_code,
            "country": prop.country,
            "coordinates": coordinates,
        },
        "specifications": {
            "bedrooms": prop.bedrooms,
            "bathrooms": prop.bathrooms,
            "area": {"value": prop.area_value, "unit": prop.area_unit},
            "floors": prop.floors,
            "parking": prop.parking,
            "furnished": prop.furnished,
            "year_built": prop.year_built,
        },
        "amenities": list(prop.amenities or []),
        "tags": list(prop.tags or []),
        "seo": {"title": prop.seo_title, "description": prop.seo_description},
        "contact_info": {
            "phone": prop.contact_phone,
            "email": prop.contact_email,
            "whatsapp": prop.contact_whatsapp,
        },
        "images": [serialize_image(image) for image in prop.images],
        "views": prop.views,
        "analytics": {
            "impressions": prop.impressions,
            "clicks": prop.clicks,
            "saves": prop.saves,
        },
        "is_verified": prop.is_verified,
        "created_at": iso(prop.created_at) or "",
        "updated_at": iso(prop.updated_at) or "",
    }
    if include_agent and prop.agent is not None:
        data["agent"] = serialize_agent_summary(prop.agent)
    if include_inquiries:
        data["inquiries"] = [serialize_inquiry(inquiry) for inquiry in prop.inquiries]
    return data


def serialize_contact(contact: Contact, include_notes: bool = True) -> dict:
    assigned = contact.assigned_to
    data = {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "subject": contact.subject,
        "message": contact.message,
        "type": contact.type,
        "status": contact.status,
        "priority": contact.priority,
        "source": contact.source,
        "assigned_to": {"id": assigned.id, "name": assigned.name, "email": assigned.email} if assigned else None,
        "is_read": contact.is_read,
        "created_at": iso(contact.created_at) or "",
        "updated_at": iso(contact.updated_at) or "",
    }
    if include_notes:
        data["response_notes"] = [
            {
                "id": note.id,
                "note": note.note,
                "added_by": {"id": note.added_by.id, "name": note.added_by.name, "email": note.added_by.email}
                if note.added_by else None,
                "added_at": iso(note.added_at),
            }
            for note in contact.response_notes
        ]
    return data
