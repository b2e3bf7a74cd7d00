from pydantic import BaseModel
from typing import Optional, List
from app.schemas.auth import UserResponse
from app.schemas.property import PropertyImageResponse


class ImageUpdateRequest(BaseModel):
    caption: Optional[str] = None
    is_primary: Optional[bool] = None


class ImagesUploadedResponse(BaseModel):
    success: bool = True
    message: str
    images: List[PropertyImageResponse]
    total_images: int


class ImageUpdatedResponse(BaseModel):
    success: bool = True
    message: str
    image: PropertyImageResponse


class ImageDeletedResponse(BaseModel):
    success: bool = True
    message: str
    remaining_images: int


class UploadedImage(BaseModel):
    public_id: str
    url: str


class ProfileImageUploadedResponse(BaseModel):
    success: bool = True
    message: str
    image: UploadedImage
    user: UserResponse


class DocumentResponse(BaseModel):
    id: str
    type: str
    file_name: Optional[str] = None
    url: str
    uploaded_at: Optional[str] = None


class DocumentsUploadedResponse(BaseModel):
    success: bool = True
    message: str
    documents: List[DocumentResponse]
    total_documents: int
