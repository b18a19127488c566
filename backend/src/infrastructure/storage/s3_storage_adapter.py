"""S3 storage adapter used when purging archives.

Archived documents keep the storage key of their file (file_url). Once an
archive's retention window has elapsed, DocumentsClosureChecker deletes those
objects through this adapter. Works with AWS S3, MinIO and other
S3-compatible services.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from config import Settings

logger = logging.getLogger(__name__)

# Error codes meaning the object is already gone
MISSING_OBJECT_CODES = ("NoSuchKey", "404")


class StorageError(Exception):
    """Object storage could not complete an operation."""
    pass


class S3StorageAdapter:
    """Deletes archived document files from one bucket.

    Example:
        storage = S3StorageAdapter.from_settings(get_settings())
        if storage:
            storage.delete_object("org-id/2026/03/contract.pdf")
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        """
        Args:
            endpoint_url: None for AWS S3, the service URL for MinIO
            access_key: Access key ID
            secret_key: Secret access key
            bucket_name: Bucket holding document files
            region: Bucket region

        Raises:
            StorageError: If the client cannot be created
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

        self.bucket_name = bucket_name
        self.region = region
        logger.info(f"Object storage ready: bucket={bucket_name}, endpoint={endpoint_url or 'AWS S3'}")

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["S3StorageAdapter"]:
        """Adapter for the configured bucket, or None when S3_BUCKET_NAME is unset."""
        if not settings.S3_BUCKET_NAME:
            return None
        return cls(
            endpoint_url=settings.S3_ENDPOINT_URL,
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
        )

    def delete_object(self, storage_key: str) -> bool:
        """Delete one stored file.

        Returns:
            True if deleted, False if the store reported it missing

        Raises:
            StorageError: Any other failure; the purge retries the archive later
        """
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=storage_key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in MISSING_OBJECT_CODES:
                logger.debug(f"Stored file already gone: {storage_key}")
                return False

            logger.error(f"Deleting stored file {storage_key} failed: {code}")
            raise StorageError(f"Failed to delete {storage_key}: {code}")

        logger.debug(f"Deleted stored file: {storage_key}")
        return True
