"""S3 client creation for S3-compatible object stores.

This module builds boto3 clients for a validated :class:`ConnectionConfig`.
Alibaba OSS, MinIO and AWS S3 all speak the same API; the endpoint URL
selects the service, and ``addressing_style`` selects virtual-hosted
(``bucket.endpoint``, required by OSS) or path-style requests.

Each manager creates its client from its own ``boto3.session.Session``.
boto3 sessions are not thread-safe but the clients they produce are, so a
single manager can be shared by concurrent callers once the client exists.
"""

import threading

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from oss_objstore.core import get_logger, settings
from oss_objstore.core.exceptions import BucketConnectionError
from oss_objstore.schemas import ConnectionConfig

logger = get_logger(__name__)


class S3ClientManager:
    """Manages an S3 client for one connection configuration."""

    def __init__(self, config: ConnectionConfig):
        """Initialize S3 client manager.

        Args:
            config: Validated connection configuration
        """
        self.config = config
        self._client = None
        self._lock = threading.Lock()
        self._closed = False
        logger.info(
            "S3 client manager initialized",
            endpoint=config.endpoint,
            region=config.region,
        )

    @property
    def client(self):
        """Get or create S3 client instance.

        Raises:
            BucketConnectionError: If the manager has been closed
        """
        with self._lock:
            if self._closed:
                raise BucketConnectionError(
                    f"oss client for '{self.config.bucket}' is closed"
                )
            if self._client is None:
                self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create boto3 S3 client with the configured settings."""
        client_config = Config(
            region_name=self.config.region,
            signature_version="s3v4",
            s3={"addressing_style": settings.addressing_style},
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            retries={"total_max_attempts": 1},
        )

        try:
            session = boto3.session.Session()
            client = session.client(
                "s3",
                endpoint_url=self.config.endpoint,
                aws_access_key_id=self.config.access_id,
                aws_secret_access_key=self.config.access_key.get_secret_value(),
                config=client_config,
            )
        except (BotoCoreError, ValueError) as e:
            error_msg = f"initialize oss client for '{self.config.endpoint}': {e}"
            logger.error(error_msg)
            raise BucketConnectionError(error_msg) from e

        logger.info("S3 client created with explicit credentials")
        return client

    def bind_bucket(self, bucket: str) -> None:
        """Check that the bucket exists and is reachable with these credentials.

        Raises:
            BucketConnectionError: If the bucket cannot be reached
        """
        try:
            self.client.head_bucket(Bucket=bucket)
            logger.info("S3 bucket bound", bucket=bucket)
        except (BotoCoreError, ClientError) as e:
            error_msg = f"new bucket '{bucket}': {e}"
            logger.error(error_msg)
            raise BucketConnectionError(error_msg) from e

    def close(self) -> None:
        """Release the client's connection pool; later use raises."""
        with self._lock:
            client, self._client = self._client, None
            self._closed = True
        if client is not None:
            client.close()
            logger.debug("S3 client closed")
