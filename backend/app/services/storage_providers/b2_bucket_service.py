import logging
from typing import Optional

from b2sdk.v2 import B2Api, InMemoryAccountInfo
from b2sdk.v2.exception import B2Error, FileNotPresent

from app.core.config import settings
from app.core.exceptions import StorageError
from app.services.storage_interface import build_public_url, key_from_public_url

logger = logging.getLogger(__name__)


def open_b2_bucket():
    """Authorize against B2 and return a bucket handle for the configured bucket."""
    info = InMemoryAccountInfo()
    api = B2Api(info)
    api.authorize_account(
        "production",
        settings.B2_APPLICATION_KEY_ID,
        settings.B2_APPLICATION_KEY
    )
    return api.get_bucket_by_name(settings.B2_BUCKET_NAME)


class BucketStorageService:
    """
    Storage provider backed by a direct, pre-authorized bucket handle.

    Used when the service runs next to the bucket and does not need to sign
    requests itself. The handle is opened lazily so that importing the module
    (and building the app) never touches the network.
    """

    def __init__(self, bucket=None, public_base_url: Optional[str] = None):
        self._bucket = bucket
        self.public_base_url = public_base_url if public_base_url is not None else settings.PHOTOS_BUCKET_URL

    def get_bucket(self):
        if self._bucket is None:
            try:
                self._bucket = open_b2_bucket()
            except B2Error as e:
                raise StorageError(settings.B2_BUCKET_NAME, f"bucket authorization failed: {e}") from e
        return self._bucket

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        bucket = self.get_bucket()
        try:
            bucket.upload_bytes(
                data_bytes=data,
                file_name=key,
                content_type=content_type
            )
        except B2Error as e:
            logger.error(f"Bucket upload failed for {key}: {e}")
            raise StorageError(key, str(e)) from e
        logger.info(f"Bucket upload complete: {key} ({len(data)} bytes)")

    def delete(self, key: str) -> None:
        """Remove every stored version so the key stops resolving."""
        bucket = self.get_bucket()
        try:
            for version in bucket.list_file_versions(key):
                if version.file_name != key:
                    continue
                try:
                    bucket.delete_file_version(version.id_, version.file_name)
                except FileNotPresent:
                    logger.debug(f"Version {version.id_} of {key} already gone")
        except B2Error as e:
            logger.error(f"Bucket delete failed for {key}: {e}")
            raise StorageError(key, str(e)) from e
        logger.info(f"Bucket delete complete: {key}")

    def public_url(self, key: str) -> str:
        return build_public_url(self.public_base_url, key)

    def key_from_url(self, url: str) -> Optional[str]:
        return key_from_public_url(self.public_base_url, url)
