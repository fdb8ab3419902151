"""Classify object store failures.

boto3 surfaces service errors as ``botocore.exceptions.ClientError`` with a
parsed ``Error.Code`` and the HTTP status in ``ResponseMetadata``. Not-found
detection works on those structured fields; HEAD requests carry no body, so
a missing object there shows up as code ``"404"`` or ``"NotFound"`` instead of
``"NoSuchKey"``.
"""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from oss_objstore.core.exceptions import (
    BackendError,
    ObjectNotFoundError,
    ObjstoreError,
)

OBJECT_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "404"})

# A 404 for these codes means something other than the object is missing
_NOT_OBJECT_CODES = frozenset({"NoSuchBucket", "NoSuchUpload", "NoSuchVersion"})

_NOT_FOUND_TEXT = ("StatusCode=404", "NoSuchKey")


def client_error_code(error: ClientError) -> str:
    """Return the service error code of a botocore client error."""
    return str(error.response.get("Error", {}).get("Code", ""))


def client_error_status(error: ClientError) -> Optional[int]:
    """Return the HTTP status of a botocore client error, if reported."""
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def _is_missing_object(error: ClientError) -> bool:
    code = client_error_code(error)
    if code in OBJECT_NOT_FOUND_CODES:
        return True
    if code in _NOT_OBJECT_CODES:
        return False
    return not code and client_error_status(error) == 404


def _text_says_not_found(error: BaseException) -> bool:
    # Last resort for errors raised outside botocore that only carry a message
    message = str(error)
    return any(marker in message for marker in _NOT_FOUND_TEXT)


def is_not_found(error: Optional[BaseException]) -> bool:
    """Return True only if ``error`` means the named object does not exist.

    The exception and its ``__cause__`` chain are inspected, so errors
    wrapped by this package classify the same as the raw botocore error.
    """
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        if isinstance(error, ObjectNotFoundError):
            return True
        if isinstance(error, ClientError):
            return _is_missing_object(error)
        if isinstance(error, BotoCoreError):
            return False
        if not isinstance(error, ObjstoreError) and _text_says_not_found(error):
            return True
        error = error.__cause__
    return False


def wrap_backend_error(error: Exception, message: str) -> BackendError:
    """Wrap a backend failure, promoting missing-object errors to not-found."""
    if isinstance(error, ClientError) and _is_missing_object(error):
        return ObjectNotFoundError(f"{message}: object not found")
    return BackendError(f"{message}: {error}")
