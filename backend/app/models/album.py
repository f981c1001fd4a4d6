"""
Album model for organizing photos and stories into collections.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.models.user import generate_id


class Album(Base):
    """
    Album owned by a single user.

    cover_photo_url is either NULL or the url of one of this album's photos.
    It is claimed by the first upload and cleared when that photo is deleted.
    """
    __tablename__ = "albums"
    __table_args__ = (
        Index('idx_albums_user_updated', 'user_id', 'updated_at'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    cover_photo_url = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="albums")
    photos = relationship("Photo", back_populates="album", cascade="all, delete-orphan", passive_deletes=True)
    stories = relationship("Story", back_populates="album", cascade="all, delete-orphan", passive_deletes=True)
    share_links = relationship("ShareLink", back_populates="album", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Album {self.title} ({self.id})>"
