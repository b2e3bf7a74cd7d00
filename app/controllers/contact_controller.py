"""
Contact Controller - public contact form and admin triage endpoints
"""
from fastapi import APIRouter, Depends, status
from typing import Optional
from app.schemas.contact import (
    ContactCreateRequest,
    ContactUpdateRequest,
    ContactNoteRequest,
    ContactReceiptResponse,
    ContactEnvelope,
    ContactListResponse,
    ContactStatsResponse,
)
from app.schemas.property import MessageResponse
from app.services.contact_service import (
    create_contact,
    list_contacts,
    get_contact,
    update_contact,
    add_contact_note,
    delete_contact,
    get_contact_stats,
)
from app.utils.dependencies import require_admin
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Pager
from app.utils.query_builder import build_contact_filters

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=ContactReceiptResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(request: ContactCreateRequest):
    """Submit the public contact form"""
    contact = await create_contact(request.dict())
    return ContactReceiptResponse(
        message="Thank you for contacting us. We will get back to you soon.",
        contact=contact,
    )


@router.get("", response_model=ContactListResponse)
async def get_contacts(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    admin: dict = Depends(require_admin),
):
    """All submissions, newest first (Admin only)"""
    conditions = build_contact_filters(status=status, type=type, priority=priority, search=search)
    pager = Pager.from_params(page, limit)

    contacts, total = await list_contacts(conditions, pager)
    return ContactListResponse(contacts=contacts, **pager.meta(total, len(contacts)))


@router.get("/stats/dashboard", response_model=ContactStatsResponse)
async def get_stats(admin: dict = Depends(require_admin)):
    stats = await get_contact_stats()
    return ContactStatsResponse(stats=stats)


@router.get("/{contact_id}", response_model=ContactEnvelope)
async def get_contact_endpoint(contact_id: str, admin: dict = Depends(require_admin)):
    """Get one submission; viewing marks it read"""
    contact = await get_contact(contact_id)
    if not contact:
        raise NotFoundError("Contact submission")
    return ContactEnvelope(contact=contact)


@router.put("/{contact_id}", response_model=ContactEnvelope)
async def update_contact_endpoint(
    contact_id: str,
    request: ContactUpdateRequest,
    admin: dict = Depends(require_admin),
):
    contact = await update_contact(contact_id, request.dict(exclude_unset=True))
    if not contact:
        raise NotFoundError("Contact submission")
    return ContactEnvelope(message="Contact submission updated successfully", contact=contact)


@router.post("/{contact_id}/notes", response_model=ContactEnvelope)
async def add_note_endpoint(
    contact_id: str,
    request: ContactNoteRequest,
    admin: dict = Depends(require_admin),
):
    contact = await add_contact_note(contact_id, request.note, admin["id"])
    if not contact:
        raise NotFoundError("Contact submission")
    return ContactEnvelope(message="Note added successfully", contact=contact)


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact_endpoint(contact_id: str, admin: dict = Depends(require_admin)):
    deleted = await delete_contact(contact_id)
    if not deleted:
        raise NotFoundError("Contact submission")
    return MessageResponse(message="Contact submission deleted successfully")
