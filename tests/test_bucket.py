"""Tests for the bucket handle against mocked S3."""

import io
import os
import threading

import pytest

from oss_objstore.core import settings
from oss_objstore.core.exceptions import (
    BackendError,
    BucketConnectionError,
    ConfigError,
    InvalidRangeError,
    ObjectNotFoundError,
    OperationCancelledError,
    ValidationError,
)
from oss_objstore.objectstorage.bucket import OSSBucket, new_bucket, open_bucket
from oss_objstore.schemas import ConnectionConfig

CONTENT = b"0123456789abcdef"


@pytest.fixture
def bucket(s3_backend, connection_config, scratch_dir, monkeypatch):
    """Open handle on the mocked test bucket with small upload chunks."""
    monkeypatch.setattr(settings, "upload_chunk_size", 4)
    bkt = open_bucket(connection_config, component="test")
    yield bkt
    bkt.close()


class TestOpenBucket:
    """Test handle construction."""

    def test_open_bucket_name(self, bucket):
        """Test the bound bucket name is returned verbatim."""
        assert isinstance(bucket, OSSBucket)
        assert bucket.name == "test-bucket"

    def test_open_missing_bucket(self, s3_backend):
        """Test binding to an absent bucket fails."""
        config = ConnectionConfig(
            bucket="no-such-bucket",
            endpoint="https://s3.amazonaws.com",
            access_id="test_key",
            access_key="test_secret",
        )
        with pytest.raises(BucketConnectionError, match="no-such-bucket"):
            open_bucket(config)

    def test_open_incomplete_config(self):
        """Test incomplete configuration fails before any client is built."""
        with pytest.raises(ConfigError, match="access_key"):
            open_bucket(
                ConnectionConfig(bucket="b", endpoint="http://e", access_id="id")
            )

    def test_open_invalid_endpoint(self):
        """Test an unusable endpoint URL fails to connect."""
        config = ConnectionConfig(
            bucket="b", endpoint="not a url", access_id="id", access_key="key"
        )
        with pytest.raises(BucketConnectionError, match="initialize oss client"):
            open_bucket(config, verify=False)

    def test_closed_handle_rejects_calls(self, bucket):
        """Test operations on a closed handle fail instead of reconnecting."""
        bucket.close()

        with pytest.raises(BucketConnectionError, match="closed"):
            bucket.exists("obj")
        with pytest.raises(BucketConnectionError, match="closed"):
            bucket.iter("", lambda entry: None)

    def test_close_is_idempotent(self, bucket):
        """Test closing twice is allowed."""
        bucket.close()
        bucket.close()

    def test_new_bucket_from_yaml(self, s3_backend):
        """Test parsing and opening in one call."""
        payload = (
            b"bucket: test-bucket\n"
            b"endpoint: https://s3.amazonaws.com\n"
            b"access_id: test_key\n"
            b"access_key: test_secret\n"
        )
        with new_bucket(payload, component="compactor") as bkt:
            assert bkt.name == "test-bucket"
            assert bkt.exists("anything") is False


class TestUploadAndGet:
    """Test writing and reading objects."""

    @pytest.mark.parametrize(
        "data", [b"", b"abc", CONTENT, bytes(range(256)) * 10]
    )
    def test_round_trip(self, bucket, data):
        """Test uploaded bytes read back identically."""
        bucket.upload("obj/data.bin", io.BytesIO(data))

        body = bucket.get("obj/data.bin")
        try:
            assert body.read() == data
        finally:
            body.close()

    def test_upload_leaves_no_scratch_files(self, bucket, scratch_dir):
        """Test the scratch directory is empty after an upload."""
        bucket.upload("obj", io.BytesIO(CONTENT))
        assert os.listdir(scratch_dir) == []

    def test_upload_overwrites(self, bucket):
        """Test a second upload replaces the object."""
        bucket.upload("obj", io.BytesIO(b"first"))
        bucket.upload("obj", io.BytesIO(b"second"))
        assert bucket.get("obj").read() == b"second"

    def test_upload_cancelled(self, bucket):
        """Test a cancelled upload writes nothing."""
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(OperationCancelledError):
            bucket.upload("obj", io.BytesIO(CONTENT), cancel=cancel)
        assert bucket.exists("obj") is False

    def test_get_range(self, bucket):
        """Test an explicit range returns exactly those bytes."""
        bucket.upload("obj", io.BytesIO(CONTENT))
        assert bucket.get_range("obj", 2, 5).read() == b"23456"

    def test_get_range_to_end(self, bucket):
        """Test an open-ended range reads through the end."""
        bucket.upload("obj", io.BytesIO(CONTENT))
        assert bucket.get_range("obj", 10, -1).read() == b"abcdef"

    def test_get_range_whole_object(self, bucket):
        """Test offset 0 to end matches get."""
        bucket.upload("obj", io.BytesIO(CONTENT))
        assert bucket.get_range("obj", 0, -1).read() == bucket.get("obj").read()

    @pytest.mark.parametrize("offset,length", [(0, 0), (0, -2), (-1, 4)])
    def test_get_range_invalid(self, bucket, offset, length):
        """Test invalid ranges are rejected."""
        with pytest.raises(InvalidRangeError):
            bucket.get_range("obj", offset, length)

    def test_get_missing(self, bucket):
        """Test reading an absent object is classified as not found."""
        with pytest.raises(ObjectNotFoundError) as exc_info:
            bucket.get("missing")

        assert bucket.is_obj_not_found_err(exc_info.value)

    def test_empty_name(self, bucket):
        """Test empty object names are rejected."""
        with pytest.raises(ValidationError, match="should not be empty"):
            bucket.get("")


class TestDeleteAndExists:
    """Test deletion and existence checks."""

    def test_exists(self, bucket):
        """Test existence before and after upload."""
        assert bucket.exists("obj") is False
        bucket.upload("obj", io.BytesIO(b"x"))
        assert bucket.exists("obj") is True

    def test_delete(self, bucket):
        """Test a deleted object no longer exists."""
        bucket.upload("obj", io.BytesIO(b"x"))
        bucket.delete("obj")
        assert bucket.exists("obj") is False

    def test_delete_missing(self, bucket):
        """Test deleting an absent object reports not found."""
        with pytest.raises(BackendError) as exc_info:
            bucket.delete("missing")

        assert isinstance(exc_info.value, ObjectNotFoundError)
        assert bucket.is_obj_not_found_err(exc_info.value)

    def test_generic_error_not_not_found(self, bucket):
        """Test a plain backend error is not classified as not found."""
        assert not bucket.is_obj_not_found_err(BackendError("connection reset"))


class TestIter:
    """Test directory-style iteration through the handle."""

    def test_iter_directory(self, bucket, monkeypatch):
        """Test keys and prefixes under a directory across pages."""
        monkeypatch.setattr(settings, "list_page_size", 2)
        for key in ("dir/a", "dir/b", "dir/c", "dir/sub/d", "other/e"):
            bucket.upload(key, io.BytesIO(b"x"))

        visited = []
        bucket.iter("dir", visited.append)

        assert visited == ["dir/a", "dir/b", "dir/c", "dir/sub/"]

    def test_iter_keys_before_prefixes(self, bucket):
        """Test object keys come before common prefixes that sort earlier."""
        for key in ("dir/x", "dir/y", "dir/a/nested", "dir/b/nested"):
            bucket.upload(key, io.BytesIO(b"x"))

        visited = []
        bucket.iter("dir/", visited.append)

        assert visited == ["dir/x", "dir/y", "dir/a/", "dir/b/"]

    def test_iter_root(self, bucket):
        """Test the bucket root lists top-level entries."""
        for key in ("top", "dir/a", "other/e"):
            bucket.upload(key, io.BytesIO(b"x"))

        visited = []
        bucket.iter("", visited.append)

        assert visited == ["top", "dir/", "other/"]
