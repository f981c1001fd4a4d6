"""
Stories API endpoints: written narratives attached to an album.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from datetime import datetime

from app.core.database import get_db
from app.core.exceptions import ForbiddenError, NotFoundError
from app.api.auth import get_current_user_id
from app.models.story import Story
from app.schemas.story import StoryCreate, StoryUpdate, StoryResponse
from app.services.photo_service import get_owned_album

router = APIRouter()


async def get_owned_story(db: AsyncSession, story_id: str, user_id: str) -> Story:
    result = await db.execute(select(Story).where(Story.id == story_id))
    story = result.scalar_one_or_none()
    if not story:
        raise NotFoundError("Story not found")
    if story.user_id != user_id:
        raise ForbiddenError("You do not own this story")
    return story


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    story_data: StoryCreate,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    album = await get_owned_album(db, story_data.album_id, current_user_id)

    story = Story(
        album_id=album.id,
        user_id=current_user_id,
        title=story_data.title,
        content=story_data.content,
    )
    db.add(story)
    await db.commit()
    await db.refresh(story)
    return story


@router.get("", response_model=List[StoryResponse])
async def list_stories(
    album_id: Optional[str] = Query(None),
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """List stories of one album, or all of the caller's stories."""
    query = select(Story)
    if album_id:
        album = await get_owned_album(db, album_id, current_user_id)
        query = query.where(Story.album_id == album.id)
    else:
        query = query.where(Story.user_id == current_user_id)

    result = await db.execute(query.order_by(Story.created_at))
    return result.scalars().all()


@router.put("/{story_id}", response_model=StoryResponse)
async def update_story(
    story_id: str,
    story_data: StoryUpdate,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    story = await get_owned_story(db, story_id, current_user_id)

    if story_data.title is not None:
        story.title = story_data.title
    if story_data.content is not None:
        story.content = story_data.content
    story.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(story)
    return story


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story(
    story_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    story = await get_owned_story(db, story_id, current_user_id)
    await db.delete(story)
    await db.commit()
