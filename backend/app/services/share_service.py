"""
Share links: owner-issued tokens granting anonymous read access to one album.
"""
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import GoneError, InvalidInputError, NotFoundError
from app.models.album import Album
from app.models.photo import Photo
from app.models.share_link import ShareLink
from app.models.story import Story
from app.services.photo_service import get_owned_album

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32

# 100 years, in either direction
MAX_TTL_SECONDS = 100 * 365 * 24 * 60 * 60


@dataclass
class SharedAlbumBundle:
    album: Album
    photos: List[Photo] = field(default_factory=list)
    stories: List[Story] = field(default_factory=list)


def generate_share_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


async def create_share_link(
    db: AsyncSession,
    album_id: str,
    user_id: str,
    ttl_seconds: Optional[int] = None,
    now: Optional[datetime] = None,
) -> ShareLink:
    """
    Issue a share link for an owned album.
    ttl_seconds=None never expires; zero or negative values yield an already-expiring link.
    """
    album = await get_owned_album(db, album_id, user_id)
    now = now or datetime.utcnow()

    expires_at = None
    if ttl_seconds is not None:
        if abs(ttl_seconds) > MAX_TTL_SECONDS:
            raise InvalidInputError(f"expires_in must be between -{MAX_TTL_SECONDS} and {MAX_TTL_SECONDS} seconds")
        try:
            expires_at = now + timedelta(seconds=ttl_seconds)
        except (OverflowError, ValueError) as e:
            raise InvalidInputError(f"expires_in is out of range: {e}") from e

    link = ShareLink(
        album_id=album.id,
        user_id=user_id,
        token=generate_share_token(),
        expires_at=expires_at,
        created_at=now,
    )
    db.add(link)
    await db.commit()
    await db.refresh(link)

    logger.info(f"Created share link {link.id} for album {album.id} (expires_at={expires_at})")
    return link


async def list_share_links(db: AsyncSession, user_id: str, album_id: Optional[str] = None) -> List[ShareLink]:
    query = select(ShareLink).where(ShareLink.user_id == user_id)
    if album_id:
        await get_owned_album(db, album_id, user_id)
        query = query.where(ShareLink.album_id == album_id)
    result = await db.execute(query.order_by(ShareLink.created_at.desc()))
    return list(result.scalars().all())


async def revoke_share_link(db: AsyncSession, token: str, user_id: str) -> None:
    """Delete a link the caller issued. Other users' links look absent."""
    result = await db.execute(
        select(ShareLink).where(ShareLink.token == token, ShareLink.user_id == user_id)
    )
    link = result.scalar_one_or_none()
    if not link:
        raise NotFoundError("Share link not found")

    await db.delete(link)
    await db.commit()
    logger.info(f"Revoked share link {link.id} for album {link.album_id}")


async def resolve_share_link(
    db: AsyncSession,
    token: str,
    now: Optional[datetime] = None,
) -> SharedAlbumBundle:
    """
    Anonymous read of a shared album.
    The link itself is the authorization: photos and stories are not filtered by owner.
    """
    result = await db.execute(select(ShareLink).where(ShareLink.token == token))
    link = result.scalar_one_or_none()
    if not link:
        raise NotFoundError("Share link not found")

    now = now or datetime.utcnow()
    if link.is_expired(now):
        logger.info(f"Share link {link.id} expired at {link.expires_at}")
        raise GoneError("Share link has expired")

    album_result = await db.execute(select(Album).where(Album.id == link.album_id))
    album = album_result.scalar_one_or_none()
    if not album:
        raise NotFoundError("Album not found")

    photos_result = await db.execute(
        select(Photo).where(Photo.album_id == album.id).order_by(Photo.uploaded_at)
    )
    stories_result = await db.execute(
        select(Story).where(Story.album_id == album.id).order_by(Story.created_at)
    )

    return SharedAlbumBundle(
        album=album,
        photos=list(photos_result.scalars().all()),
        stories=list(stories_result.scalars().all()),
    )
