"""Unit tests for S3 Storage Adapter using moto

This module tests the S3StorageAdapter implementation using moto to mock AWS S3.
Tests cover object deletion for purged archives, missing-object handling and
construction from application settings.
"""

import pytest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError
from moto import mock_aws
import boto3

from config import Settings
from infrastructure.storage.s3_storage_adapter import (
    S3StorageAdapter,
    StorageError,
)


# Test constants
TEST_BUCKET = "test-workspace-bucket"
TEST_REGION = "us-east-1"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"
TEST_KEY = "a1b2c3d4-e5f6-7890-abcd-ef1234567890/2026/03/contract.pdf"


@pytest.fixture
def s3_setup():
    """Set up mock S3 environment with bucket and adapter"""
    with mock_aws():
        s3_client = boto3.client(
            "s3",
            region_name=TEST_REGION,
            aws_access_key_id=TEST_ACCESS_KEY,
            aws_secret_access_key=TEST_SECRET_KEY,
        )
        s3_client.create_bucket(Bucket=TEST_BUCKET)

        adapter = S3StorageAdapter(
            endpoint_url=None,
            access_key=TEST_ACCESS_KEY,
            secret_key=TEST_SECRET_KEY,
            bucket_name=TEST_BUCKET,
            region=TEST_REGION,
        )

        yield s3_client, adapter


class TestDeleteObject:
    """Test object deletion"""

    def test_delete_existing_object(self, s3_setup):
        s3_client, adapter = s3_setup
        s3_client.put_object(Bucket=TEST_BUCKET, Key=TEST_KEY, Body=b"%PDF-1.4")

        assert adapter.delete_object(TEST_KEY) is True

        listed = s3_client.list_objects_v2(Bucket=TEST_BUCKET)
        assert listed.get("KeyCount", 0) == 0

    def test_delete_missing_object_is_idempotent(self, s3_setup):
        """S3 deletes are idempotent; a missing key is not an error"""
        _, adapter = s3_setup

        adapter.delete_object(TEST_KEY)
        adapter.delete_object(TEST_KEY)

    def test_no_such_key_returns_false(self):
        """S3-compatible stores that report NoSuchKey yield False"""
        with mock_aws():
            adapter = S3StorageAdapter(None, TEST_ACCESS_KEY, TEST_SECRET_KEY, TEST_BUCKET, TEST_REGION)
        adapter.s3_client = MagicMock()
        adapter.s3_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "Not Found"}}, "DeleteObject"
        )

        assert adapter.delete_object(TEST_KEY) is False

    def test_other_errors_raise_storage_error(self):
        with mock_aws():
            adapter = S3StorageAdapter(None, TEST_ACCESS_KEY, TEST_SECRET_KEY, TEST_BUCKET, TEST_REGION)
        adapter.s3_client = MagicMock()
        adapter.s3_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Forbidden"}}, "DeleteObject"
        )

        with pytest.raises(StorageError, match="AccessDenied"):
            adapter.delete_object(TEST_KEY)


class TestFromSettings:

    def test_no_bucket_means_no_adapter(self):
        assert S3StorageAdapter.from_settings(Settings(S3_BUCKET_NAME=None)) is None

    def test_adapter_built_from_settings(self):
        settings = Settings(
            S3_BUCKET_NAME=TEST_BUCKET,
            S3_ENDPOINT_URL="http://localhost:9000",
            S3_REGION="eu-central-1",
        )

        adapter = S3StorageAdapter.from_settings(settings)

        assert adapter.bucket_name == TEST_BUCKET
        assert adapter.region == "eu-central-1"
