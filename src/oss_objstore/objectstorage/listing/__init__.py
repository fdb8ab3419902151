"""Object storage listing operations."""

from .prefix_contents import (
    DIR_DELIMITER,
    ListPage,
    fetch_page,
    iter_prefix,
    normalize_prefix,
)

__all__ = ["DIR_DELIMITER", "ListPage", "fetch_page", "iter_prefix", "normalize_prefix"]
