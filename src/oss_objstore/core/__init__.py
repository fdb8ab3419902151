"""Core utilities and shared components for oss-objstore."""

from .config import settings
from .exceptions import ObjstoreError, ValidationError
from .observability import get_logger, get_tracer

__all__ = ["settings", "ObjstoreError", "ValidationError", "get_logger", "get_tracer"]
