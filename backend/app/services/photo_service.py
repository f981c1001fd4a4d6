"""
Photo lifecycle: upload, delete and album teardown.

Blob writes and row writes are never in one transaction. Ordering keeps the
stores individually consistent:
  upload  -> put blob, then insert row (a failed put leaves no row)
  delete  -> delete row, then best-effort delete blob (a failed delete leaves
             an orphan blob, which is accepted)
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from urllib.parse import unquote

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PayloadTooLargeError,
    StorageError,
)
from app.models.album import Album
from app.models.photo import Photo
from app.services.storage_interface import StorageInterface

logger = logging.getLogger(__name__)


@dataclass
class PhotoUpload:
    """Raw upload payload as received from the client."""
    data: bytes
    filename: str
    content_type: str
    caption: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    taken_at: Optional[datetime] = None


def sanitize_filename(filename: Optional[str]) -> str:
    """Keep only the basename so a filename can never add key segments."""
    name = (filename or "").replace("\\", "/").split("/")[-1].strip()
    return name or "upload"


def build_storage_key(owner_id: str, album_id: str, photo_id: str, filename: str) -> str:
    """{owner}/{album}/{photo}-{filename}: unique per upload, scoped per owner and album."""
    return f"{owner_id}/{album_id}/{photo_id}-{filename}"


def resolve_storage_key(photo: Photo, storage: StorageInterface) -> Optional[str]:
    """
    Find the blob key for a photo.
    Rows written before storage_key existed only kept the url; for those, strip
    the store's base url, or fall back to locating the owner/album/photo prefix.
    """
    if photo.storage_key:
        return photo.storage_key

    key = storage.key_from_url(photo.url)
    if key:
        return key

    marker = f"{photo.user_id}/{photo.album_id}/{photo.id}-"
    index = photo.url.find(marker)
    if index == -1:
        return None
    return unquote(photo.url[index:])


def validate_upload(upload: PhotoUpload) -> None:
    if not upload.data:
        raise InvalidInputError("File is empty")
    if len(upload.data) > settings.max_upload_size_bytes:
        raise PayloadTooLargeError(
            f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB} MB upload limit"
        )
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in settings.allowed_image_types_list:
        raise InvalidInputError(f"Unsupported file type: {upload.content_type or 'unknown'}")


async def get_owned_album(db: AsyncSession, album_id: str, user_id: str) -> Album:
    """Album lookup that does not reveal whether another user's album exists."""
    result = await db.execute(
        select(Album).where(Album.id == album_id, Album.user_id == user_id)
    )
    album = result.scalar_one_or_none()
    if not album:
        raise NotFoundError("Album not found")
    return album


async def upload_photo(
    db: AsyncSession,
    storage: StorageInterface,
    album_id: str,
    user_id: str,
    upload: PhotoUpload,
) -> Photo:
    """
    Store a photo in an album the caller owns.
    The first photo of an album becomes its cover.
    """
    validate_upload(upload)
    album = await get_owned_album(db, album_id, user_id)

    photo_id = str(uuid.uuid4())
    filename = sanitize_filename(upload.filename)
    key = build_storage_key(user_id, album.id, photo_id, filename)

    # StorageError propagates: nothing has been written to the database yet
    await run_in_threadpool(storage.put, key, upload.data, upload.content_type)

    photo = Photo(
        id=photo_id,
        album_id=album.id,
        user_id=user_id,
        url=storage.public_url(key),
        storage_key=key,
        content_type=upload.content_type,
        caption=upload.caption,
        latitude=upload.latitude,
        longitude=upload.longitude,
        taken_at=upload.taken_at,
        uploaded_at=datetime.utcnow(),
    )
    db.add(photo)

    # Conditional update so a concurrent first upload cannot overwrite a cover
    await db.execute(
        update(Album)
        .where(Album.id == album.id, Album.cover_photo_url.is_(None))
        .values(cover_photo_url=photo.url)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(photo)
    await db.refresh(album)

    logger.info(f"Uploaded photo {photo.id} to album {album.id} ({len(upload.data)} bytes)")
    return photo


async def _delete_blob_best_effort(storage: StorageInterface, key: Optional[str], photo_id: str) -> bool:
    if not key:
        logger.warning(f"Could not derive storage key for photo {photo_id}; blob left in storage")
        return False
    try:
        await run_in_threadpool(storage.delete, key)
    except StorageError as e:
        logger.warning(f"Orphaned blob {key} for deleted photo {photo_id}: {e.reason}")
        return False
    return True


async def delete_photo(
    db: AsyncSession,
    storage: StorageInterface,
    photo_id: str,
    user_id: str,
) -> None:
    """Delete a photo row, reconcile the album cover, then remove the blob."""
    result = await db.execute(select(Photo).where(Photo.id == photo_id))
    photo = result.scalar_one_or_none()
    if not photo:
        raise NotFoundError("Photo not found")
    if photo.user_id != user_id:
        raise ForbiddenError("You do not own this photo")

    key = resolve_storage_key(photo, storage)
    album_id = photo.album_id
    url = photo.url

    await db.delete(photo)
    await db.execute(
        update(Album)
        .where(Album.id == album_id, Album.cover_photo_url == url)
        .values(cover_photo_url=None)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    # Row is gone and committed; the blob is cleanup only
    await _delete_blob_best_effort(storage, key, photo_id)
    logger.info(f"Deleted photo {photo_id} from album {album_id}")


async def delete_album(
    db: AsyncSession,
    storage: StorageInterface,
    album_id: str,
    user_id: str,
) -> int:
    """
    Delete an album with its photos, stories and share links, then reclaim blobs.
    Returns the number of blobs that could not be removed.
    """
    album = await get_owned_album(db, album_id, user_id)

    result = await db.execute(select(Photo).where(Photo.album_id == album.id))
    photos: List[Photo] = list(result.scalars().all())
    keys = [(photo.id, resolve_storage_key(photo, storage)) for photo in photos]

    await db.delete(album)
    await db.commit()

    orphaned = 0
    for photo_id, key in keys:
        if not await _delete_blob_best_effort(storage, key, photo_id):
            orphaned += 1

    logger.info(f"Deleted album {album_id} with {len(keys)} photos ({orphaned} orphaned blobs)")
    return orphaned
