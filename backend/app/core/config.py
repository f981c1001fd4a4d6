"""
Core configuration for the Keepsake application.
Loads settings from environment variables.
"""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    APP_NAME: str = "Keepsake"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    SHARE_BASE_URL: str = ""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./keepsake.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10

    # JWT (issued by the identity provider, only verified here)
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Storage Provider
    STORAGE_PROVIDER: str = "s3"  # "s3" or "bucket"
    PHOTOS_BUCKET_URL: str = ""

    # S3 Compatible (R2, AWS, MinIO)
    R2_ACCOUNT_ID: str = ""
    S3_ENDPOINT_URL: str = ""
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_BUCKET_NAME: str = "love-you-photos"
    S3_REGION_NAME: str = "auto"

    # Backblaze B2 bucket handle
    B2_APPLICATION_KEY_ID: str = ""
    B2_APPLICATION_KEY: str = ""
    B2_BUCKET_NAME: str = ""

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 5
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/gif,image/webp,image/heic,image/avif"

    # Client-side image compression defaults
    IMAGE_JPEG_QUALITY: float = 0.7
    IMAGE_MAX_WIDTH: int = 1920

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def allowed_image_types_list(self) -> List[str]:
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert max upload size to bytes."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def s3_endpoint(self) -> str:
        """Explicit endpoint, or the R2 endpoint derived from the account id."""
        if self.S3_ENDPOINT_URL:
            return self.S3_ENDPOINT_URL
        if self.R2_ACCOUNT_ID:
            return f"https://{self.R2_ACCOUNT_ID}.r2.cloudflarestorage.com"
        return ""

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
