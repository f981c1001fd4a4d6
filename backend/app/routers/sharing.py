from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.config import settings
from app.core.database import get_db
from app.api.auth import get_current_user_id
from app.models.share_link import ShareLink
from app.schemas.sharing import ShareLinkCreate, ShareLinkResponse, SharedAlbumView
from app.services.share_service import (
    create_share_link,
    list_share_links,
    resolve_share_link,
    revoke_share_link,
)

router = APIRouter()


def build_share_url(request: Request, token: str) -> str:
    base = settings.SHARE_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}/share/{token}"


def to_response(request: Request, link: ShareLink) -> ShareLinkResponse:
    response = ShareLinkResponse.model_validate(link)
    response.share_url = build_share_url(request, link.token)
    return response


@router.post("/share", response_model=ShareLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    share_data: ShareLinkCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id)
):
    """Create a new share link for an album"""
    link = await create_share_link(db, share_data.album_id, current_user_id, share_data.expires_in)
    return to_response(request, link)


@router.get("/share", response_model=List[ShareLinkResponse])
async def get_share_links(
    request: Request,
    album_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id)
):
    """Get the caller's share links, optionally for one album"""
    links = await list_share_links(db, current_user_id, album_id)
    return [to_response(request, link) for link in links]


@router.delete("/share/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_link(
    token: str,
    db: AsyncSession = Depends(get_db),
    current_user_id: str = Depends(get_current_user_id)
):
    """Revoke a share link"""
    await revoke_share_link(db, token, current_user_id)


@router.get("/shared/{token}", response_model=SharedAlbumView)
async def view_shared_album(
    token: str,
    db: AsyncSession = Depends(get_db)
):
    """Public endpoint to view a shared album. No authentication: the token is the grant."""
    bundle = await resolve_share_link(db, token)
    return SharedAlbumView.model_validate(bundle, from_attributes=True)
