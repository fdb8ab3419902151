"""S3 client management for S3-compatible object stores."""

from .s3_client import S3ClientManager

__all__ = ["S3ClientManager"]
