"""
Helpers for walking paginated list endpoints.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger: logging.Logger = logging.getLogger(__name__)

# Number of items to request per page. 100 is the maximum the REST API allows,
# which keeps the number of requests down.
PER_PAGE: Final[int] = 100

T = TypeVar("T")


def fetch_all_pages(fetch_page: Callable[[int, int], Sequence[T] | None], *, per_page: int = PER_PAGE) -> list[T]:
    """Collect every item of a paginated listing.

    Args:
        fetch_page: Called with (page, per_page); pages start at 1
        per_page: Page size passed to every call

    Returns:
        All items in page order. Fetching stops at the first missing or empty page.
    """
    items: list[T] = []
    page = 1
    while True:
        batch = fetch_page(page, per_page)
        if not batch:
            break
        items.extend(batch)
        page += 1
    logger.debug(f"Fetched {len(items)} items in {page - 1} page(s)")
    return items
