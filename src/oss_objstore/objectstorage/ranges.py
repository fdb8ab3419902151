"""Translate logical byte ranges into HTTP range requests."""

from dataclasses import dataclass
from typing import Optional

from oss_objstore.core.exceptions import InvalidRangeError

TO_END = -1


@dataclass(frozen=True)
class ByteRange:
    """A logical read window; ``length == -1`` reads through the end."""

    offset: int
    length: int = TO_END

    def __post_init__(self):
        if self.offset < 0:
            raise InvalidRangeError(f"Invalid range: negative offset {self.offset}")
        if self.length != TO_END and self.length <= 0:
            raise InvalidRangeError(
                f"Invalid range: length must be positive or -1, got {self.length}"
            )

    @property
    def is_whole_object(self) -> bool:
        return self.offset == 0 and self.length == TO_END

    def to_header(self) -> Optional[str]:
        """Return the ``Range`` header value, or None for the whole object.

        >>> ByteRange(2, 5).to_header()
        'bytes=2-6'
        >>> ByteRange(10).to_header()
        'bytes=10-'
        """
        if self.is_whole_object:
            return None
        if self.length == TO_END:
            return f"bytes={self.offset}-"
        return f"bytes={self.offset}-{self.offset + self.length - 1}"


def range_header(offset: int, length: int) -> Optional[str]:
    """Map ``(offset, length)`` onto a range header value.

    Raises:
        InvalidRangeError: If offset is negative, or length is 0 or below -1
    """
    return ByteRange(offset, length).to_header()
