"""Test configuration and fixtures for oss-objstore."""

import boto3
import pytest
from moto import mock_aws

from oss_objstore.core import settings
from oss_objstore.schemas import ConnectionConfig

TEST_BUCKET = "test-bucket"
TEST_ENDPOINT = "https://s3.amazonaws.com"


@pytest.fixture
def connection_config():
    """A complete configuration pointing at the mocked S3 endpoint."""
    return ConnectionConfig(
        bucket=TEST_BUCKET,
        endpoint=TEST_ENDPOINT,
        access_id="test_key",
        access_key="test_secret",
    )


@pytest.fixture
def s3_backend():
    """Mocked S3 service with an empty test bucket."""
    with mock_aws():
        client = boto3.client(
            "s3",
            aws_access_key_id="test_key",
            aws_secret_access_key="test_secret",
            region_name="us-east-1",
        )
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    """Route upload scratch files into a per-test directory."""
    directory = tmp_path / "scratch"
    directory.mkdir()
    monkeypatch.setattr(settings, "scratch_dir", str(directory))
    return directory
