"""Object storage operations for S3-compatible services."""

from .bucket import OSSBucket, new_bucket, open_bucket
from .clients import S3ClientManager
from .errors import is_not_found
from .listing import ListPage, iter_prefix, normalize_prefix
from .ranges import ByteRange, range_header
from .uploads import upload_stream

__all__ = [
    "ByteRange",
    "ListPage",
    "OSSBucket",
    "S3ClientManager",
    "is_not_found",
    "iter_prefix",
    "new_bucket",
    "normalize_prefix",
    "open_bucket",
    "range_header",
    "upload_stream",
]
