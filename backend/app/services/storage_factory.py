import logging

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.services.storage_interface import StorageInterface
from app.services.storage_providers.b2_bucket_service import BucketStorageService
from app.services.storage_providers.s3_service import S3Service

logger = logging.getLogger(__name__)

_storage_instances = {}

PROVIDERS = {
    "s3": S3Service,
    "bucket": BucketStorageService,
}


def validate_storage_settings(provider: str) -> None:
    if provider not in PROVIDERS:
        raise ConfigurationError(
            f"Unknown STORAGE_PROVIDER '{provider}', expected one of: {', '.join(sorted(PROVIDERS))}"
        )
    if not settings.PHOTOS_BUCKET_URL:
        raise ConfigurationError("PHOTOS_BUCKET_URL is not configured")
    if "r2.cloudflarestorage.com" in settings.PHOTOS_BUCKET_URL:
        logger.warning(
            "PHOTOS_BUCKET_URL points at the R2 S3 API endpoint; photo links will not be publicly "
            "fetchable. Use the public bucket URL (e.g. https://pub-xyz.r2.dev) or a custom domain."
        )
    if provider == "s3" and not (settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY and settings.s3_endpoint):
        raise ConfigurationError(
            "Missing S3 credentials (S3_ACCESS_KEY_ID, S3_SECRET_ACCESS_KEY and S3_ENDPOINT_URL or R2_ACCOUNT_ID)"
        )
    if provider == "bucket" and not (settings.B2_APPLICATION_KEY_ID and settings.B2_APPLICATION_KEY and settings.B2_BUCKET_NAME):
        raise ConfigurationError(
            "Missing bucket credentials (B2_APPLICATION_KEY_ID, B2_APPLICATION_KEY, B2_BUCKET_NAME)"
        )


def get_storage_service(provider: str = None) -> StorageInterface:
    """
    Get the storage provider instance for this process.
    If provider is not specified, uses the default from settings.
    """
    if not provider:
        provider = settings.STORAGE_PROVIDER.lower()

    if provider in _storage_instances:
        return _storage_instances[provider]

    validate_storage_settings(provider)
    logger.info(f"Initializing Storage Provider: {provider}")

    instance = PROVIDERS[provider]()
    _storage_instances[provider] = instance
    return instance


def get_storage() -> StorageInterface:
    """FastAPI dependency wrapper so tests can override the store."""
    return get_storage_service()
