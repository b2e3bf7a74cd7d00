"""
Contact Service - contact-form intake and admin triage
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Tuple
import logging
import uuid
from sqlalchemy import select, func, case, and_, desc
from sqlalchemy.orm import selectinload
from app.database.connection import AsyncSessionLocal
from app.models.contact import Contact, ContactNote
from app.models.user import User
from app.services.serializers import serialize_contact, iso
from app.utils.exceptions import ValidationError
from app.utils.pagination import Pager

logger = logging.getLogger(__name__)

RECENT_CONTACTS_LIMIT = 5


async def _load_contact(session, contact_id: str) -> Optional[Contact]:
    stmt = (
        select(Contact)
        .options(
            selectinload(Contact.assigned_to),
            selectinload(Contact.response_notes).selectinload(ContactNote.added_by),
        )
        .where(Contact.id == contact_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_contact(contact_data: Dict) -> Dict:
    """Store a contact-form submission"""
    async with AsyncSessionLocal() as session:
        contact_id = str(uuid.uuid4())
        new_contact = Contact(
            id=contact_id,
            name=contact_data["name"],
            email=contact_data["email"].lower(),
            phone=contact_data.get("phone"),
            subject=contact_data["subject"],
            message=contact_data["message"],
            type=contact_data.get("type") or "general",
            status="new",
            priority="medium",
            source="website",
            is_read=False,
        )

        session.add(new_contact)
        await session.commit()

        logger.info(f"Contact submission {contact_id} received ({new_contact.type})")
        return {
            "id": new_contact.id,
            "name": new_contact.name,
            "subject": new_contact.subject,
            "created_at": iso(new_contact.created_at) or "",
        }


async def list_contacts(conditions: list, pager: Pager) -> Tuple[List[Dict], int]:
    """Newest submissions first. Returns (items, total)."""
    async with AsyncSessionLocal() as session:
        where_clause = and_(*conditions)

        count_stmt = select(func.count()).select_from(Contact).where(where_clause)
        total_result = await session.execute(count_stmt)
        total = total_result.scalar_one() or 0

        stmt = (
            select(Contact)
            .options(
                selectinload(Contact.assigned_to),
                selectinload(Contact.response_notes).selectinload(ContactNote.added_by),
            )
            .where(where_clause)
            .order_by(desc(Contact.created_at), Contact.id)
            .offset(pager.offset)
            .limit(pager.limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return [serialize_contact(contact) for contact in result.scalars().all()], total


async def get_contact(contact_id: str) -> Optional[Dict]:
    """Fetch one submission and mark it read"""
    async with AsyncSessionLocal() as session:
        contact = await _load_contact(session, contact_id)
        if not contact:
            return None

        if not contact.is_read:
            contact.is_read = True
            await session.commit()
            contact = await _load_contact(session, contact_id)

        return serialize_contact(contact)


async def update_contact(contact_id: str, update_data: Dict) -> Optional[Dict]:
    """Update status, priority and/or assignee"""
    async with AsyncSessionLocal() as session:
        contact = await _load_contact(session, contact_id)
        if not contact:
            return None

        if "assigned_to" in update_data:
            assignee_id = update_data["assigned_to"]
            if assignee_id:
                assignee_result = await session.execute(select(User.id).where(User.id == assignee_id))
                if assignee_result.scalar_one_or_none() is None:
                    raise ValidationError(
                        "Validation errors",
                        field_errors=[{"field": "assigned_to", "message": "Invalid user ID"}],
                    )
            contact.assigned_to_id = assignee_id or None

        if update_data.get("status"):
            contact.status = update_data["status"]

        if update_data.get("priority"):
            contact.priority = update_data["priority"]

        await session.commit()

        contact = await _load_contact(session, contact_id)
        return serialize_contact(contact)


async def add_contact_note(contact_id: str, note: str, added_by_id: str) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        contact = await _load_contact(session, contact_id)
        if not contact:
            return None

        contact.response_notes.append(ContactNote(
            id=str(uuid.uuid4()),
            note=note,
            added_by_id=added_by_id,
            added_at=datetime.now(timezone.utc),
        ))
        await session.commit()

        contact = await _load_contact(session, contact_id)
        return serialize_contact(contact)


async def delete_contact(contact_id: str) -> bool:
    async with AsyncSessionLocal() as session:
        contact = await _load_contact(session, contact_id)
        if not contact:
            return False

        await session.delete(contact)
        await session.commit()

        logger.info(f"Contact submission {contact_id} deleted")
        return True


async def get_contact_stats() -> Dict:
    """Counts by status/priority, a per-type breakdown and the latest submissions"""
    async with AsyncSessionLocal() as session:
        stats_stmt = select(
            func.count(Contact.id).label('total'),
            func.sum(case((Contact.status == 'new', 1), else_=0)).label('new'),
            func.sum(case((Contact.status == 'in_progress', 1), else_=0)).label('in_progress'),
            func.sum(case((Contact.status == 'resolved', 1), else_=0)).label('resolved'),
            func.sum(case((Contact.priority == 'high', 1), else_=0)).label('high_priority'),
        )
        stats_result = await session.execute(stats_stmt)
        stats = stats_result.first()

        by_type_stmt = select(
            Contact.type,
            func.count(Contact.id).label('count')
        ).group_by(Contact.type)
        by_type_result = await session.execute(by_type_stmt)
        contacts_by_type = [
            {"type": row[0], "count": row[1]}
            for row in by_type_result.all()
        ]

        recent_stmt = select(Contact).order_by(desc(Contact.created_at)).limit(RECENT_CONTACTS_LIMIT)
        recent_result = await session.execute(recent_stmt)
        recent_contacts = [
            {
                "id": contact.id,
                "name": contact.name,
                "email": contact.email,
                "subject": contact.subject,
                "type": contact.type,
                "status": contact.status,
                "created_at": iso(contact.created_at) or "",
            }
            for contact in recent_result.scalars().all()
        ]

        return {
            "total_contacts": stats.total or 0,
            "new_contacts": stats.new or 0,
            "in_progress_contacts": stats.in_progress or 0,
            "resolved_contacts": stats.resolved or 0,
            "high_priority_contacts": stats.high_priority or 0,
            "contacts_by_type": contacts_by_type,
            "recent_contacts": recent_contacts,
        }
