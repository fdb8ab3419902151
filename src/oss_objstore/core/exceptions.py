"""Exception hierarchy for oss-objstore."""


class ObjstoreError(Exception):
    """Base exception for all oss-objstore errors."""

    pass


class ValidationError(ObjstoreError):
    """Raised when caller input fails validation."""

    pass


class ConfigError(ValidationError):
    """Raised when a bucket configuration is malformed or incomplete."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing = missing


class InvalidRangeError(ValidationError):
    """Raised when a byte range cannot be expressed as a range request."""

    pass


class BucketConnectionError(ObjstoreError):
    """Raised when the client session cannot be created or bound to a bucket."""

    pass


class LocalIOError(ObjstoreError):
    """Raised when local reads or scratch storage fail during an upload."""

    pass


class BackendError(ObjstoreError):
    """Raised when the object store rejects a request or cannot be reached."""

    pass


class ObjectNotFoundError(BackendError):
    """Raised when the named object does not exist in the bucket."""

    pass


class OperationCancelledError(ObjstoreError):
    """Raised when an operation is cancelled between pages or chunks."""

    pass
