"""
Photo model. Each row points at exactly one blob in the configured store.
"""
from sqlalchemy import Column, String, Float, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.models.user import generate_id


class Photo(Base):
    """Photo belonging to one album and, redundantly, to its owner."""

    __tablename__ = "photos"
    __table_args__ = (
        Index('idx_photos_album_uploaded', 'album_id', 'uploaded_at'),
        Index('idx_photos_user', 'user_id'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    album_id = Column(String(36), ForeignKey('albums.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # Storage location
    # storage_key is NULL for legacy rows that only kept the public url
    url = Column(Text, nullable=False)
    storage_key = Column(Text, nullable=True)
    content_type = Column(String(100), nullable=True)

    caption = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    taken_at = Column(DateTime, nullable=True)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    album = relationship("Album", back_populates="photos")

    def __repr__(self):
        return f"<Photo {self.id} in Album {self.album_id}>"
