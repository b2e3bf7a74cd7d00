"""
Upload Service - property images, profile images and agent verification documents.

The Cloudinary SDK is blocking, so every upload runs in a worker thread and a
batch is joined with asyncio.gather before any reference is persisted. If one
upload in a batch fails the request fails; files already stored on Cloudinary
are left in place.
"""
import asyncio
from typing import Optional, List, Dict, Tuple
import logging
import uuid
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from app.config import settings
from app.database.connection import AsyncSessionLocal
from app.models.document import VerificationDocument, DOCUMENT_TYPES
from app.models.user import User, AgentProfile
from app.services import cloudinary_service
from app.services.property_service import load_property
from app.services.serializers import serialize_image, serialize_document, serialize_user
from app.utils.dependencies import is_owner_or_admin
from app.utils.exceptions import ValidationError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

DOCUMENT_CONTENT_TYPES = ("application/pdf",)


def validate_files(
    files: List[Tuple[bytes, Optional[str]]],
    max_files: int,
    allow_documents: bool = False,
    empty_message: str = "No images uploaded",
) -> None:
    """files: (content, content_type) pairs"""
    if not files:
        raise ValidationError(empty_message)

    if len(files) > max_files:
        raise ValidationError(f"Too many files. Maximum is {max_files} files")

    for content, content_type in files:
        content_type = content_type or ""
        is_image = content_type.startswith("image/")
        if not is_image and not (allow_documents and content_type in DOCUMENT_CONTENT_TYPES):
            raise ValidationError("Only image files are allowed")
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
            )


async def _upload_batch(contents: List[bytes], folder: str, prefix: str, owner_id: str, uploader) -> List[dict]:
    tasks = [
        asyncio.to_thread(uploader, content, folder, cloudinary_service.build_public_id(prefix, owner_id, index))
        for index, content in enumerate(contents)
    ]
    return list(await asyncio.gather(*tasks))


async def _load_owned_property(session, property_id: str, user: dict, action: str):
    prop = await load_property(session, property_id)
    if not prop:
        raise NotFoundError("Property")
    if not is_owner_or_admin(user, prop.agent_id):
        raise ForbiddenError(f"Not authorized to {action} images for this property")
    return prop


async def upload_property_images(
    property_id: str,
    user: dict,
    files: List[Tuple[bytes, Optional[str]]],
    captions: Optional[List[str]] = None,
) -> Dict:
    validate_files(files, settings.MAX_UPLOAD_FILES)
    captions = captions or []

    async with AsyncSessionLocal() as session:
        prop = await _load_owned_property(session, property_id, user, "upload")

        uploads = await _upload_batch(
            [content for content, _ in files],
            "properties",
            "property",
            property_id,
            cloudinary_service.upload_image,
        )
        for index, upload in enumerate(uploads):
            upload["caption"] = captions[index] if index < len(captions) else ""

        added = prop.add_images(uploads)
        await session.commit()

        images = [serialize_image(image) for image in added]
        prop = await load_property(session, property_id)
        logger.info(f"Uploaded {len(images)} images to property {property_id}")
        return {"images": images, "total_images": len(prop.images)}


async def update_property_image(
    property_id: str,
    image_id: str,
    user: dict,
    caption: Optional[str] = None,
    is_primary: Optional[bool] = None,
) -> Dict:
    async with AsyncSessionLocal() as session:
        prop = await _load_owned_property(session, property_id, user, "update")

        image = prop.update_image(image_id, caption=caption, is_primary=is_primary)
        if image is None:
            raise NotFoundError("Image")

        await session.commit()
        return serialize_image(image)


async def delete_property_image(property_id: str, image_id: str, user: dict) -> Dict:
    """Remove an image; a Cloudinary failure does not block the database delete"""
    async with AsyncSessionLocal() as session:
        prop = await _load_owned_property(session, property_id, user, "delete")

        image = prop.remove_image(image_id)
        if image is None:
            raise NotFoundError("Image")

        if not await asyncio.to_thread(cloudinary_service.delete_image, image.public_id):
            logger.warning(f"Image {image.public_id} may remain on Cloudinary")

        await session.commit()

        logger.info(f"Image {image_id} removed from property {property_id}")
        return {"remaining_images": len(prop.images)}


async def _load_user(session, user_id: str) -> Optional[User]:
    stmt = (
        select(User)
        .options(selectinload(User.agent_profile).selectinload(AgentProfile.verification_documents))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def _profile_image_holder(user: User):
    """Agents keep their picture on the agent profile, everyone else on the user row"""
    if user.is_agent and user.agent_profile is not None:
        return user.agent_profile
    return user


async def upload_profile_image(user_id: str, content: bytes, content_type: Optional[str]) -> Dict:
    validate_files([(content, content_type)], 1)

    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user:
            raise NotFoundError("User")

        upload = await asyncio.to_thread(
            cloudinary_service.upload_image,
            content,
            "profiles",
            cloudinary_service.build_public_id("profile", user_id),
        )

        holder = _profile_image_holder(user)
        previous_public_id = holder.profile_image_public_id
        holder.profile_image_public_id = upload["public_id"]
        holder.profile_image_url = upload["url"]
        await session.commit()

        if previous_public_id and previous_public_id != upload["public_id"]:
            await asyncio.to_thread(cloudinary_service.delete_image, previous_public_id)

        user = await _load_user(session, user_id)
        return {"image": upload, "user": serialize_user(user)}


async def delete_profile_image(user_id: str) -> None:
    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user:
            raise NotFoundError("User")

        holder = _profile_image_holder(user)
        if not holder.profile_image_public_id:
            raise NotFoundError("Profile image")

        if not await asyncio.to_thread(cloudinary_service.delete_image, holder.profile_image_public_id):
            logger.warning(f"Profile image {holder.profile_image_public_id} may remain on Cloudinary")

        holder.profile_image_public_id = None
        holder.profile_image_url = None
        await session.commit()


async def upload_verification_documents(
    user_id: str,
    files: List[Tuple[bytes, Optional[str], Optional[str]]],
    types: Optional[List[str]] = None,
) -> Dict:
    """files: (content, content_type, file_name) triples"""
    validate_files(
        [(content, content_type) for content, content_type, _ in files],
        settings.MAX_DOCUMENT_FILES,
        allow_documents=True,
        empty_message="No documents uploaded",
    )
    types = types or []
    invalid = [t for t in types if t not in DOCUMENT_TYPES]
    if invalid:
        raise ValidationError(
            "Validation errors",
            field_errors=[{"field": "types", "message": f"Invalid document type: {', '.join(invalid)}"}],
        )

    async with AsyncSessionLocal() as session:
        user = await _load_user(session, user_id)
        if not user or user.agent_profile is None:
            raise ForbiddenError("Access denied. Agent privileges required.")

        uploads = await _upload_batch(
            [content for content, _, _ in files],
            "documents",
            "doc",
            user_id,
            cloudinary_service.upload_file,
        )

        profile = user.agent_profile
        added = []
        for index, upload in enumerate(uploads):
            document = VerificationDocument(
                id=str(uuid.uuid4()),
                document_type=types[index] if index < len(types) else "other",
                file_name=files[index][2],
                cloudinary_public_id=upload["public_id"],
                cloudinary_url=upload["url"],
            )
            profile.verification_documents.append(document)
            added.append(document)
        await session.commit()

        documents = [serialize_document(doc) for doc in added]
        user = await _load_user(session, user_id)
        logger.info(f"Agent {user_id} uploaded {len(documents)} verification documents")
        return {
            "documents": documents,
            "total_documents": len(user.agent_profile.verification_documents),
        }
