from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.schemas.album import AlbumResponse
from app.schemas.photo import PhotoResponse
from app.schemas.story import StoryResponse
from app.services.share_service import MAX_TTL_SECONDS


class ShareLinkCreate(BaseModel):
    album_id: str
    # Seconds until expiry; omitted or null means the link never expires
    expires_in: Optional[int] = Field(None, ge=-MAX_TTL_SECONDS, le=MAX_TTL_SECONDS)

    class Config:
        json_schema_extra = {
            "example": {"album_id": "7b1f0c8e-2c1d-4c7e-9a55-0d5f3b8e2a10", "expires_in": 604800}
        }


class ShareLinkResponse(BaseModel):
    id: str
    album_id: str
    token: str
    expires_at: Optional[datetime] = None
    created_at: datetime
    share_url: Optional[str] = None  # Helper field for frontend

    class Config:
        from_attributes = True


class SharedAlbumView(BaseModel):
    """Schema for public view of an album"""
    album: AlbumResponse
    photos: List[PhotoResponse]
    stories: List[StoryResponse]
