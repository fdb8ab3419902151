"""Paginated, directory-style listing under a key prefix."""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from oss_objstore.core import get_logger
from oss_objstore.core.exceptions import BackendError, OperationCancelledError

logger = get_logger(__name__)

DIR_DELIMITER = "/"


@dataclass(frozen=True)
class ListPage:
    """One page of a delimited listing."""

    keys: tuple[str, ...]
    prefixes: tuple[str, ...]
    next_cursor: Optional[str]
    truncated: bool

    @property
    def entries(self) -> tuple[str, ...]:
        """Keys first, then common prefixes, each in backend order."""
        return self.keys + self.prefixes


def normalize_prefix(prefix: str, delimiter: str = DIR_DELIMITER) -> str:
    """Make a non-empty prefix end with the delimiter.

    A single trailing delimiter is replaced, so ``"a"`` and ``"a/"`` both
    become ``"a/"`` while ``"a//"`` keeps its empty segment.

    The empty prefix is left alone so that it lists the bucket root.
    """
    if not prefix or not delimiter:
        return prefix
    if prefix.endswith(delimiter):
        prefix = prefix[: -len(delimiter)]
    return prefix + delimiter


def fetch_page(
    client: Any,
    bucket: str,
    prefix: str,
    delimiter: str,
    cursor: Optional[str],
    page_size: int,
) -> ListPage:
    """Request a single ``ListObjectsV2`` page starting at ``cursor``.

    Raises:
        BackendError: If the request fails
    """
    kwargs: dict[str, Any] = {
        "Bucket": bucket,
        "Prefix": prefix,
        "Delimiter": delimiter,
        "MaxKeys": page_size,
    }
    if cursor:
        kwargs["ContinuationToken"] = cursor

    try:
        response = client.list_objects_v2(**kwargs)
    except (BotoCoreError, ClientError) as e:
        error_msg = f"list oss objects under '{prefix}' in bucket '{bucket}': {e}"
        logger.error(error_msg, error=str(e))
        raise BackendError(error_msg) from e

    return ListPage(
        keys=tuple(obj["Key"] for obj in response.get("Contents", [])),
        prefixes=tuple(p["Prefix"] for p in response.get("CommonPrefixes", [])),
        next_cursor=response.get("NextContinuationToken"),
        truncated=bool(response.get("IsTruncated", False)),
    )


def iter_prefix(
    client: Any,
    bucket: str,
    prefix: str,
    visitor: Callable[[str], None],
    delimiter: str = DIR_DELIMITER,
    page_size: int = 1000,
    cancel: Optional[threading.Event] = None,
) -> None:
    """Call ``visitor`` for each entry directly under ``prefix``.

    This is a non-recursive, directory-style listing. For objects:
    - data/file1.txt
    - data/2023/file2.txt

    Iterating ``data`` visits ``data/file1.txt`` and then ``data/2023/``.
    Within a page every object key is visited before any common prefix.

    The visitor stops the iteration by raising; its exception propagates
    unchanged and no further entries are visited.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        prefix: Directory-like prefix; "" lists the bucket root
        visitor: Called with each full key or common prefix
        delimiter: Grouping character for common prefixes
        page_size: Maximum entries requested per page
        cancel: Checked between pages

    Raises:
        BackendError: If a page request fails
        OperationCancelledError: If ``cancel`` is set between pages
    """
    prefix = normalize_prefix(prefix, delimiter)
    logger.debug("Iterating oss prefix", bucket=bucket, prefix=prefix)

    cursor: Optional[str] = None
    pages = 0
    visited = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise OperationCancelledError(
                f"iter '{prefix}' in bucket '{bucket}' cancelled after {pages} pages"
            )

        page = fetch_page(client, bucket, prefix, delimiter, cursor, page_size)
        pages += 1

        for entry in page.entries:
            visitor(entry)
            visited += 1

        if not page.truncated:
            break
        if not page.next_cursor:
            raise BackendError(
                f"list oss objects under '{prefix}' in bucket '{bucket}': "
                "truncated page without a continuation token"
            )
        cursor = page.next_cursor

    logger.debug(
        "Oss prefix iterated",
        bucket=bucket,
        prefix=prefix,
        pages=pages,
        entries=visited,
    )
