from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class AlbumCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Lisbon, spring",
                "description": "Four days of trams and tiles",
                "location": "Lisbon, Portugal",
                "start_date": "2025-04-02T00:00:00",
                "end_date": "2025-04-06T00:00:00"
            }
        }


class AlbumUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    cover_photo_url: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class AlbumResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    cover_photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AlbumListItem(AlbumResponse):
    # cover_photo_url, or the latest upload when no cover is set
    display_cover_url: Optional[str] = None
    photo_count: int = 0
