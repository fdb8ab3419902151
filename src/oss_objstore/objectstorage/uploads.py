"""Stage-then-upload of arbitrarily large streams.

The reader is copied into a private scratch file in fixed-size chunks, so
memory use is bounded by ``chunk_size`` whatever the object size. The staged
file is then handed to boto3's managed transfer, which switches to multipart
upload once the file crosses ``multipart_threshold``.
"""

import os
import tempfile
import threading
from typing import Any, BinaryIO, Optional

from boto3.exceptions import S3UploadFailedError
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError

from oss_objstore.core import get_logger
from oss_objstore.core.exceptions import (
    BackendError,
    LocalIOError,
    OperationCancelledError,
)

logger = get_logger(__name__)

SCRATCH_PREFIX = "oss-objstore-upload-"


def stage_stream(
    reader: BinaryIO,
    scratch: BinaryIO,
    chunk_size: int,
    cancel: Optional[threading.Event] = None,
) -> int:
    """Copy ``reader`` into ``scratch`` chunk by chunk until EOF.

    Returns:
        Number of bytes staged

    Raises:
        LocalIOError: If reading the input or writing the scratch file fails
        OperationCancelledError: If ``cancel`` is set between chunks
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    total = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelledError(f"upload cancelled after {total} bytes")
        try:
            chunk = reader.read(chunk_size)
        except (OSError, ValueError) as e:
            # Closed streams raise ValueError rather than OSError
            raise LocalIOError(f"read upload input after {total} bytes: {e}") from e
        if chunk is None:
            raise LocalIOError(
                f"read upload input after {total} bytes: non-blocking reader has no data"
            )
        if not chunk:
            break
        try:
            scratch.write(chunk)
        except (OSError, ValueError) as e:
            raise LocalIOError(f"write upload scratch file: {e}") from e
        total += len(chunk)

    try:
        scratch.flush()
    except (OSError, ValueError) as e:
        raise LocalIOError(f"flush upload scratch file: {e}") from e
    return total


def _remove_scratch(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.warning("Failed to remove upload scratch file", path=path, error=str(e))


def upload_stream(
    client: Any,
    bucket: str,
    name: str,
    reader: BinaryIO,
    chunk_size: int,
    multipart_threshold: int,
    scratch_dir: Optional[str] = None,
    cancel: Optional[threading.Event] = None,
) -> int:
    """Upload everything ``reader`` yields as object ``name``.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        name: Object key
        reader: Binary stream read until EOF
        chunk_size: Bytes read per chunk while staging
        multipart_threshold: Size above which the backend upload goes multipart
        scratch_dir: Directory for the scratch file, system default if None
        cancel: Checked between chunk reads

    Returns:
        Number of bytes uploaded

    Raises:
        LocalIOError: If the input or the scratch file fails
        BackendError: If the backend upload fails
        OperationCancelledError: If ``cancel`` is set while staging
    """
    try:
        fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX, dir=scratch_dir)
    except OSError as e:
        raise LocalIOError(f"create upload scratch file for '{name}': {e}") from e

    try:
        with os.fdopen(fd, "wb") as scratch:
            size = stage_stream(reader, scratch, chunk_size, cancel)
        logger.debug("Upload staged", bucket=bucket, name=name, size=size, path=path)

        transfer_config = TransferConfig(
            multipart_threshold=multipart_threshold,
            multipart_chunksize=max(chunk_size, 5 * 1024 * 1024),
        )
        try:
            client.upload_file(path, bucket, name, Config=transfer_config)
        except (S3UploadFailedError, BotoCoreError, ClientError) as e:
            error_msg = f"upload oss object '{name}' to bucket '{bucket}': {e}"
            logger.error(error_msg, error=str(e))
            raise BackendError(error_msg) from e
    finally:
        _remove_scratch(path)

    return size
