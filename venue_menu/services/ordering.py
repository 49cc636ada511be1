"""
Helpers shared by the category and item services for dense sibling ordering.
"""
import logging
import sqlite3
from typing import Callable, Optional, TypeVar

from venue_menu.core.config import settings
from venue_menu.core.exceptions import OrderConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fragments SQLite puts in the message when a sibling-order index rejects a row.
_ORDER_INDEX_MARKERS = ("sibling_order", "display_order")


def next_display_order(max_order: Optional[int]) -> int:
    """Append position after the current maximum of a sibling group (0 when empty)."""
    return 0 if max_order is None else max_order + 1


def is_order_conflict(exc: sqlite3.IntegrityError) -> bool:
    message = str(exc)
    return "UNIQUE" in message and any(m in message for m in _ORDER_INDEX_MARKERS)


def append_with_retry(
    read_max: Callable[[], Optional[int]],
    write: Callable[[int], T],
    what: str,
    retries: Optional[int] = None,
) -> T:
    """
    Run the "read max, write at max + 1" sequence, retrying when a concurrent
    writer took the same position first.

    Raises OrderConflictError once the retries are used up. Integrity errors
    unrelated to ordering propagate unchanged.
    """
    attempts = 1 + (settings.ORDER_CONFLICT_RETRIES if retries is None else retries)
    for attempt in range(1, attempts + 1):
        display_order = next_display_order(read_max())
        try:
            return write(display_order)
        except sqlite3.IntegrityError as exc:
            if not is_order_conflict(exc):
                raise
            logger.warning(
                "Display order %s for %s taken concurrently (attempt %s/%s)",
                display_order, what, attempt, attempts,
            )
    raise OrderConflictError(
        f"Could not assign a display order for {what}; please retry"
    )
