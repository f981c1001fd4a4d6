from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class PhotoResponse(BaseModel):
    id: str
    album_id: str
    user_id: str
    url: str
    caption: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    taken_at: Optional[datetime] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True
