"""Uniform bucket adapter for S3-compatible object stores.

This package exposes a single bucket of an S3-compatible service (Alibaba
OSS, MinIO, AWS S3) through a small capability set so that a larger system
can treat object stores interchangeably.

Key Features:
    - Directory-style, fully paginated listing by prefix
    - Whole-object and byte-range reads
    - Bounded-memory uploads of arbitrarily large streams
    - Structured not-found classification

Recommended Usage:

    >>> from oss_objstore import new_bucket
    >>> bkt = new_bucket(open("bucket.yaml", "rb").read())
    >>> bkt.exists("blocks/01/meta.json")
    True
"""

__version__ = "0.1.0"

from .config_resolver import config_from_env, parse_config, validate_config
from .core.exceptions import (
    BackendError,
    BucketConnectionError,
    ConfigError,
    InvalidRangeError,
    LocalIOError,
    ObjectNotFoundError,
    ObjstoreError,
    OperationCancelledError,
    ValidationError,
)
from .objectstorage import (
    ByteRange,
    OSSBucket,
    is_not_found,
    new_bucket,
    open_bucket,
)
from .schemas import ConnectionConfig

__all__ = [
    # Configuration
    "ConnectionConfig",
    "config_from_env",
    "parse_config",
    "validate_config",
    # Bucket handle
    "ByteRange",
    "OSSBucket",
    "is_not_found",
    "new_bucket",
    "open_bucket",
    # Errors
    "BackendError",
    "BucketConnectionError",
    "ConfigError",
    "InvalidRangeError",
    "LocalIOError",
    "ObjectNotFoundError",
    "ObjstoreError",
    "OperationCancelledError",
    "ValidationError",
]
