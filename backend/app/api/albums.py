"""
Albums API endpoints for CRUD operations.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List
from datetime import datetime

from app.core.database import get_db
from app.core.exceptions import InvalidInputError
from app.api.auth import get_current_user_id
from app.models.album import Album
from app.models.photo import Photo
from app.schemas.album import AlbumCreate, AlbumUpdate, AlbumResponse, AlbumListItem
from app.services.photo_service import delete_album, get_owned_album
from app.services.storage_factory import get_storage
from app.services.storage_interface import StorageInterface

router = APIRouter()


def _validate_date_range(start_date, end_date):
    if start_date and end_date and end_date < start_date:
        raise InvalidInputError("end_date must not be before start_date")


# Create album
@router.post("", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    album_data: AlbumCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a new album. Albums start without a cover."""
    _validate_date_range(album_data.start_date, album_data.end_date)

    new_album = Album(
        user_id=current_user_id,
        title=album_data.title,
        description=album_data.description,
        location=album_data.location,
        start_date=album_data.start_date,
        end_date=album_data.end_date,
    )

    db.add(new_album)
    await db.commit()
    await db.refresh(new_album)
    return new_album


# List albums
@router.get("", response_model=List[AlbumListItem])
async def list_albums(
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get all albums for current user, with a display cover for albums that have none."""
    result = await db.execute(
        select(Album).where(Album.user_id == current_user_id)
        .order_by(Album.updated_at.desc())
    )
    albums = result.scalars().all()

    album_responses = []
    for album in albums:
        count_result = await db.execute(
            select(func.count(Photo.id)).where(Photo.album_id == album.id)
        )
        photo_count = count_result.scalar() or 0

        display_cover_url = album.cover_photo_url
        if not display_cover_url and photo_count:
            latest_result = await db.execute(
                select(Photo.url)
                .where(Photo.album_id == album.id)
                .order_by(Photo.uploaded_at.desc())
                .limit(1)
            )
            display_cover_url = latest_result.scalar_one_or_none()

        item = AlbumListItem.model_validate(album)
        item.display_cover_url = display_cover_url
        item.photo_count = photo_count
        album_responses.append(item)

    return album_responses


# Get album details
@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(
    album_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get album details."""
    return await get_owned_album(db, album_id, current_user_id)


# Update album
@router.put("/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: str,
    album_data: AlbumUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Update album metadata. Only fields that are provided change."""
    album = await get_owned_album(db, album_id, current_user_id)

    if album_data.cover_photo_url is not None:
        # The cover must stay one of this album's photos
        cover_result = await db.execute(
            select(Photo.id).where(
                Photo.album_id == album.id,
                Photo.url == album_data.cover_photo_url
            )
        )
        if not cover_result.first():
            raise InvalidInputError("cover_photo_url must be the url of a photo in this album")
        album.cover_photo_url = album_data.cover_photo_url

    # Update fields if provided
    if album_data.title is not None:
        album.title = album_data.title
    if album_data.description is not None:
        album.description = album_data.description
    if album_data.location is not None:
        album.location = album_data.location
    if album_data.start_date is not None:
        album.start_date = album_data.start_date
    if album_data.end_date is not None:
        album.end_date = album_data.end_date
    _validate_date_range(album.start_date, album.end_date)

    album.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(album)
    return album


# Delete album
@router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_album(
    album_id: str,
    current_user_id: str = Depends(get_current_user_id),
    storage: StorageInterface = Depends(get_storage),
    db: AsyncSession = Depends(get_db)
):
    """Delete an album with its photos, stories and share links, and reclaim stored files."""
    await delete_album(db, storage, album_id, current_user_id)
