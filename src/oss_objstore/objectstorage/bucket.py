"""Bucket handle exposing the object store capability set.

Typical use::

    from oss_objstore import new_bucket

    with new_bucket(config_yaml, component="compactor") as bkt:
        bkt.upload("blocks/01/meta.json", io.BytesIO(payload))
        bkt.iter("blocks", print)
        body = bkt.get_range("blocks/01/index", 0, 1024)
"""

import threading
from typing import Any, BinaryIO, Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from oss_objstore.config_resolver import parse_config, validate_config
from oss_objstore.core import get_logger, get_tracer, settings
from oss_objstore.core.exceptions import BucketConnectionError, ValidationError
from oss_objstore.objectstorage.clients import S3ClientManager
from oss_objstore.objectstorage.errors import is_not_found, wrap_backend_error
from oss_objstore.objectstorage.listing import DIR_DELIMITER, iter_prefix
from oss_objstore.objectstorage.ranges import ByteRange
from oss_objstore.objectstorage.uploads import upload_stream
from oss_objstore.schemas import ConnectionConfig

logger = get_logger(__name__)
tracer = get_tracer(__name__)


def _require_name(name: str) -> None:
    if not name:
        raise ValidationError("given object name should not be empty")


class OSSBucket:
    """A client session bound to one named bucket.

    The bucket name is fixed at construction. The handle holds no other
    mutable state, so its methods may be called from several threads.
    """

    def __init__(
        self,
        client_manager: S3ClientManager,
        name: str,
        component: str = "",
    ):
        self._client_manager = client_manager
        self._name = name
        self._log = logger.bind(bucket=name, component=component or None)

    @property
    def name(self) -> str:
        """The bucket name, verbatim from configuration."""
        return self._name

    @property
    def _client(self) -> Any:
        return self._client_manager.client

    def upload(
        self,
        name: str,
        reader: BinaryIO,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Upload the contents of ``reader`` as object ``name``."""
        _require_name(name)
        with tracer.start_as_current_span("oss.upload") as span:
            span.set_attribute("oss.object", name)
            size = upload_stream(
                self._client,
                self._name,
                name,
                reader,
                chunk_size=settings.upload_chunk_size,
                multipart_threshold=settings.multipart_threshold,
                scratch_dir=settings.scratch_dir,
                cancel=cancel,
            )
            span.set_attribute("oss.size", size)
        self._log.info("Object uploaded", name=name, size=size)

    def delete(self, name: str) -> None:
        """Remove object ``name``.

        Raises:
            ObjectNotFoundError: If the object does not exist
            BackendError: For any other failure
        """
        _require_name(name)
        with tracer.start_as_current_span("oss.delete") as span:
            span.set_attribute("oss.object", name)
            try:
                # S3 deletes succeed on absent keys; report those as not found
                self._client.head_object(Bucket=self._name, Key=name)
                self._client.delete_object(Bucket=self._name, Key=name)
            except (BotoCoreError, ClientError) as e:
                raise wrap_backend_error(e, f"delete oss object '{name}'") from e
        self._log.info("Object deleted", name=name)

    def iter(
        self,
        prefix: str,
        visitor: Callable[[str], None],
        cancel: Optional[threading.Event] = None,
    ) -> None:
        """Call ``visitor`` with each entry directly under ``prefix``.

        Entries are full object keys and common prefixes (ending in "/").
        An exception raised by the visitor stops iteration and propagates.
        """
        with tracer.start_as_current_span("oss.iter") as span:
            span.set_attribute("oss.prefix", prefix)
            iter_prefix(
                self._client,
                self._name,
                prefix,
                visitor,
                delimiter=DIR_DELIMITER,
                page_size=settings.list_page_size,
                cancel=cancel,
            )

    def get(self, name: str) -> BinaryIO:
        """Return a reader for the whole object ``name``."""
        return self.get_range(name, 0, -1)

    def get_range(self, name: str, offset: int, length: int) -> BinaryIO:
        """Return a reader for ``length`` bytes of ``name`` from ``offset``.

        ``length == -1`` reads through the end of the object. The returned
        stream must be closed by the caller.

        Raises:
            InvalidRangeError: If the range is invalid, before any request
            ObjectNotFoundError: If the object does not exist
            BackendError: For any other failure
        """
        _require_name(name)
        byte_range = ByteRange(offset, length)
        kwargs: dict[str, Any] = {"Bucket": self._name, "Key": name}
        header = byte_range.to_header()
        if header is not None:
            kwargs["Range"] = header

        with tracer.start_as_current_span("oss.get") as span:
            span.set_attribute("oss.object", name)
            span.set_attribute("oss.range", header or "")
            try:
                response = self._client.get_object(**kwargs)
            except (BotoCoreError, ClientError) as e:
                raise wrap_backend_error(
                    e, f"get oss object '{name}' range {header or 'all'}"
                ) from e
        return response["Body"]

    def exists(self, name: str) -> bool:
        """Check whether object ``name`` exists."""
        _require_name(name)
        with tracer.start_as_current_span("oss.exists") as span:
            span.set_attribute("oss.object", name)
            try:
                self._client.head_object(Bucket=self._name, Key=name)
            except (BotoCoreError, ClientError) as e:
                if is_not_found(e):
                    return False
                raise wrap_backend_error(e, f"check oss object '{name}' exists") from e
        return True

    def is_obj_not_found_err(self, error: BaseException) -> bool:
        """Return True if ``error`` means the object is not found."""
        return is_not_found(error)

    def close(self) -> None:
        """Release the underlying client session.

        Closing twice is allowed; any other call afterwards raises
        ``BucketConnectionError``.
        """
        self._client_manager.close()
        self._log.debug("Bucket handle closed")

    def __enter__(self) -> "OSSBucket":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"OSSBucket(name={self._name!r})"


def open_bucket(
    config: ConnectionConfig,
    component: str = "",
    verify: bool = True,
) -> OSSBucket:
    """Open a handle on the configured bucket.

    Args:
        config: Connection configuration
        component: Name of the calling component, added to log context
        verify: Check the bucket with a HEAD request before returning

    Raises:
        ConfigError: If the configuration is incomplete, before any network call
        BucketConnectionError: If the client or bucket binding fails
    """
    validate_config(config)
    client_manager = S3ClientManager(config)
    client_manager.client  # create eagerly so endpoint errors surface here
    if verify:
        try:
            client_manager.bind_bucket(config.bucket)
        except BucketConnectionError:
            client_manager.close()
            raise
    return OSSBucket(client_manager, config.bucket, component=component)


def new_bucket(payload: bytes, component: str = "") -> OSSBucket:
    """Parse a YAML configuration payload and open its bucket."""
    config = parse_config(payload)
    return open_bucket(config, component=component)
