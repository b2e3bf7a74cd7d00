import logging
import time
import cloudinary
import cloudinary.uploader
from app.config import settings
from app.utils.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

_cloudinary_configured = False

IMAGE_TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]


def _ensure_cloudinary_configured():
    """Configure the SDK once from settings"""
    global _cloudinary_configured
    if not _cloudinary_configured:
        if not settings.CLOUDINARY_CLOUD_NAME or not settings.CLOUDINARY_API_KEY or not settings.CLOUDINARY_API_SECRET:
            raise UpstreamServiceError("Cloudinary credentials not configured")
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        _cloudinary_configured = True


def build_public_id(prefix: str, owner_id: str, index=None) -> str:
    """e.g. property_<id>_<millis>_<n>; the folder is passed separately"""
    stamp = int(time.time() * 1000)
    name = f"{prefix}_{owner_id}_{stamp}"
    return name if index is None else f"{name}_{index}"


def upload_image(file_content: bytes, folder: str, public_id: str) -> dict:
    """
    Upload an image (resized to fit 1200x800) to Cloudinary.
    Blocking; run it in a worker thread from async code.
    Returns: {"public_id": "folder/name", "url": "https://..."}
    """
    _ensure_cloudinary_configured()
    try:
        result = cloudinary.uploader.upload(
            file_content,
            resource_type="image",
            folder=folder,
            public_id=public_id,
            transformation=IMAGE_TRANSFORMATION,
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed for {folder}/{public_id}: {str(e)}")
        raise UpstreamServiceError(f"Failed to upload file to Cloudinary: {str(e)}")

    return {
        "public_id": result["public_id"],
        "url": result["secure_url"],
    }


def upload_file(file_content: bytes, folder: str, public_id: str) -> dict:
    """Upload any file type (verification documents may be PDFs)"""
    _ensure_cloudinary_configured()
    try:
        result = cloudinary.uploader.upload(
            file_content,
            resource_type="auto",
            folder=folder,
            public_id=public_id,
        )
    except Exception as e:
        logger.error(f"Cloudinary upload failed for {folder}/{public_id}: {str(e)}")
        raise UpstreamServiceError(f"Failed to upload file to Cloudinary: {str(e)}")

    return {
        "public_id": result["public_id"],
        "url": result["secure_url"],
    }


def delete_image(public_id: str) -> bool:
    """Delete an image; failures are logged and reported as False, never raised"""
    try:
        _ensure_cloudinary_configured()
        result = cloudinary.uploader.destroy(public_id)
        return result.get("result") == "ok"
    except Exception as e:
        logger.warning(f"Error deleting {public_id} from Cloudinary: {str(e)}")
        return False
