from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class StoryCreate(BaseModel):
    album_id: str
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class StoryUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)


class StoryResponse(BaseModel):
    id: str
    album_id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
