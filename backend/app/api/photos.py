"""
Photos API endpoints: upload, list, delete.
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime

from app.core.database import get_db
from app.core.exceptions import InvalidInputError, PayloadTooLargeError
from app.core.config import settings
from app.api.auth import get_current_user_id
from app.models.photo import Photo
from app.schemas.album import to_naive_utc
from app.schemas.photo import PhotoResponse
from app.services.photo_service import PhotoUpload, delete_photo, get_owned_album, upload_photo
from app.services.storage_factory import get_storage
from app.services.storage_interface import StorageInterface

router = APIRouter()


async def read_upload(file: UploadFile) -> bytes:
    """Read at most one byte past the cap so oversize bodies are rejected without buffering them."""
    data = await file.read(settings.max_upload_size_bytes + 1)
    if len(data) > settings.max_upload_size_bytes:
        raise PayloadTooLargeError(
            f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB} MB upload limit"
        )
    return data


@router.post("", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def create_photo(
    file: Optional[UploadFile] = File(None),
    album_id: Optional[str] = Form(None),
    caption: Optional[str] = Form(None),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    taken_at: Optional[datetime] = Form(None),
    current_user_id: str = Depends(get_current_user_id),
    storage: StorageInterface = Depends(get_storage),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload a photo into one of the caller's albums.
    The first photo of an album becomes its cover.
    """
    if file is None or not album_id:
        raise InvalidInputError("File and album_id are required")

    data = await read_upload(file)
    upload = PhotoUpload(
        data=data,
        filename=file.filename,
        content_type=file.content_type,
        caption=caption,
        latitude=latitude,
        longitude=longitude,
        taken_at=to_naive_utc(taken_at),
    )
    return await upload_photo(db, storage, album_id, current_user_id, upload)


@router.get("", response_model=List[PhotoResponse])
async def list_photos(
    album_id: Optional[str] = Query(None),
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """List photos of one album, or every photo the caller owns."""
    query = select(Photo)
    if album_id:
        album = await get_owned_album(db, album_id, current_user_id)
        query = query.where(Photo.album_id == album.id)
    else:
        query = query.where(Photo.user_id == current_user_id)

    result = await db.execute(query.order_by(Photo.uploaded_at))
    return result.scalars().all()


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_photo(
    photo_id: str,
    current_user_id: str = Depends(get_current_user_id),
    storage: StorageInterface = Depends(get_storage),
    db: AsyncSession = Depends(get_db)
):
    """Delete a photo and, best effort, its stored file."""
    await delete_photo(db, storage, photo_id, current_user_id)
