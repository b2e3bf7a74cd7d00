"""
Upload Controller - multipart uploads to Cloudinary
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional
from app.schemas.property import MessageResponse
from app.schemas.upload import (
    ImageUpdateRequest,
    ImagesUploadedResponse,
    ImageUpdatedResponse,
    ImageDeletedResponse,
    ProfileImageUploadedResponse,
    DocumentsUploadedResponse,
)
from app.services.upload_service import (
    upload_property_images,
    update_property_image,
    delete_property_image,
    upload_profile_image,
    delete_profile_image,
    upload_verification_documents,
)
from app.utils.dependencies import get_current_user, require_agent, require_agent_or_admin
from app.utils.exceptions import ValidationError

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post("/property-images/{property_id}", response_model=ImagesUploadedResponse)
async def upload_property_images_endpoint(
    property_id: str,
    images: List[UploadFile] = File(default=[]),
    captions: Optional[List[str]] = Form(default=None),
    user: dict = Depends(require_agent_or_admin),
):
    """Upload up to 10 images; the first becomes primary if the property had none"""
    files = [(await image.read(), image.content_type) for image in images]
    result = await upload_property_images(property_id, user, files, captions)
    return ImagesUploadedResponse(message="Images uploaded successfully", **result)


@router.put("/property-images/{property_id}/{image_id}", response_model=ImageUpdatedResponse)
async def update_property_image_endpoint(
    property_id: str,
    image_id: str,
    request: ImageUpdateRequest,
    user: dict = Depends(get_current_user),
):
    image = await update_property_image(
        property_id,
        image_id,
        user,
        caption=request.caption,
        is_primary=request.is_primary,
    )
    return ImageUpdatedResponse(message="Image updated successfully", image=image)


@router.delete("/property-images/{property_id}/{image_id}", response_model=ImageDeletedResponse)
async def delete_property_image_endpoint(
    property_id: str,
    image_id: str,
    user: dict = Depends(get_current_user),
):
    result = await delete_property_image(property_id, image_id, user)
    return ImageDeletedResponse(message="Image deleted successfully", **result)


@router.post("/profile-image", response_model=ProfileImageUploadedResponse)
async def upload_profile_image_endpoint(
    image: Optional[UploadFile] = File(default=None),
    user: dict = Depends(get_current_user),
):
    if image is None:
        raise ValidationError("No image uploaded")
    result = await upload_profile_image(user["id"], await image.read(), image.content_type)
    return ProfileImageUploadedResponse(message="Profile image updated successfully", **result)


@router.delete("/profile-image", response_model=MessageResponse)
async def delete_profile_image_endpoint(user: dict = Depends(get_current_user)):
    await delete_profile_image(user["id"])
    return MessageResponse(message="Profile image deleted successfully")


@router.post("/documents", response_model=DocumentsUploadedResponse)
async def upload_documents_endpoint(
    documents: List[UploadFile] = File(default=[]),
    types: Optional[List[str]] = Form(default=None),
    agent: dict = Depends(require_agent),
):
    """Upload up to 5 verification documents (images or PDF)"""
    files = [(await doc.read(), doc.content_type, doc.filename) for doc in documents]
    result = await upload_verification_documents(agent["id"], files, types)
    return DocumentsUploadedResponse(message="Documents uploaded successfully", **result)
