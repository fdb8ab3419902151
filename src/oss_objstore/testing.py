"""Helpers for running integration tests against a real bucket.

Tests must never write into a bucket that holds data. A bucket named by
``OSS_BUCKET`` is only used when ``OSS_ALLOW_EXISTING_BUCKET_USE`` is also set,
and only if it is empty.
"""

import os
from typing import Callable

from oss_objstore.config_resolver import config_from_env, validate_config
from oss_objstore.core import get_logger
from oss_objstore.core.exceptions import ValidationError
from oss_objstore.objectstorage.bucket import OSSBucket, open_bucket

logger = get_logger(__name__)

ALLOW_EXISTING_BUCKET_ENV = "OSS_ALLOW_EXISTING_BUCKET_USE"


class BucketNotEmptyError(ValidationError):
    """Raised when a test bucket already contains objects."""

    pass


def _refuse_non_empty(entry: str) -> None:
    raise BucketNotEmptyError(f"bucket is not empty, found '{entry}'")


def new_test_bucket(component: str = "oss-objstore-test") -> tuple[OSSBucket, Callable[[], None]]:
    """Open the bucket configured through ``OSS_*`` environment variables.

    Returns:
        The bucket handle and a cleanup callable that closes it

    Raises:
        ConfigError: If the environment configuration is incomplete
        ValidationError: If reuse of the bucket is not explicitly allowed
        BucketNotEmptyError: If the bucket holds any object
    """
    config = config_from_env()
    validate_config(config)

    if not os.environ.get(ALLOW_EXISTING_BUCKET_ENV):
        raise ValidationError(
            "OSS_BUCKET is defined. Tests would run against that bucket; set "
            f"{ALLOW_EXISTING_BUCKET_ENV}=true to allow it. The bucket must be "
            "empty and needs manual cleanup afterwards."
        )

    bucket = open_bucket(config, component=component)
    try:
        bucket.iter("", _refuse_non_empty)
    except Exception:
        bucket.close()
        raise

    logger.warning(
        "Reusing bucket for tests, manual cleanup afterwards is required",
        bucket=bucket.name,
    )
    return bucket, bucket.close
