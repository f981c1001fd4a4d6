"""
Story model: a short written narrative attached to an album.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.models.user import generate_id


class Story(Base):
    __tablename__ = "stories"

    id = Column(String(36), primary_key=True, default=generate_id)
    album_id = Column(String(36), ForeignKey('albums.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    album = relationship("Album", back_populates="stories")

    def __repr__(self):
        return f"<Story {self.title} ({self.id})>"
