"""
ShareLink model for sharing albums via secure links.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base
from app.models.user import generate_id


class ShareLink(Base):
    """
    Anonymous read grant for one album.
    Existence plus non-expiry is the whole authorization check.
    """
    __tablename__ = "shared_links"

    id = Column(String(36), primary_key=True, default=generate_id)
    album_id = Column(String(36), ForeignKey('albums.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # The secure token used in the URL
    token = Column(String(64), unique=True, nullable=False, index=True)

    # NULL means the link never expires
    expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    album = relationship("Album", back_populates="share_links")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def __repr__(self):
        return f"<ShareLink {self.token} for Album {self.album_id}>"
