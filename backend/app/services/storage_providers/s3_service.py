import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.exceptions import StorageError
from app.services.storage_interface import build_public_url, key_from_public_url

logger = logging.getLogger(__name__)

# S3-compatible stores disagree on whether a missing key is an error on delete
_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Service:
    """
    S3 Compatible Storage Service (R2, AWS, MinIO).
    Implements StorageInterface through boto3's signed-request client.
    Credentials come from settings; a preconfigured client can be injected.
    """

    def __init__(self, client=None, bucket_name: Optional[str] = None, public_base_url: Optional[str] = None):
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.public_base_url = public_base_url if public_base_url is not None else settings.PHOTOS_BUCKET_URL

        if client is None:
            self.session = boto3.session.Session()
            client = self.session.client(
                's3',
                endpoint_url=settings.s3_endpoint or None,
                aws_access_key_id=settings.S3_ACCESS_KEY_ID,
                aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
                region_name=settings.S3_REGION_NAME,
                config=Config(signature_version='s3v4', retries={'total_max_attempts': 1})
            )
        self.s3_client = client

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """Single PutObject; S3 never exposes a partially written object."""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise StorageError(key, str(e)) from e
        logger.info(f"S3 upload complete: {key} ({len(data)} bytes)")

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_KEY_CODES:
                logger.debug(f"S3 delete of missing key {key} treated as success")
                return
            logger.error(f"S3 delete failed for {key}: {e}")
            raise StorageError(key, str(e)) from e
        except BotoCoreError as e:
            logger.error(f"S3 delete failed for {key}: {e}")
            raise StorageError(key, str(e)) from e
        logger.info(f"S3 delete complete: {key}")

    def public_url(self, key: str) -> str:
        return build_public_url(self.public_base_url, key)

    def key_from_url(self, url: str) -> Optional[str]:
        return key_from_public_url(self.public_base_url, url)
