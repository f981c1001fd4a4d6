"""Models module initialization - import all models here."""
from app.models.user import User
from app.models.album import Album
from app.models.photo import Photo
from app.models.story import Story
from app.models.share_link import ShareLink

__all__ = ["User", "Album", "Photo", "Story", "ShareLink"]
