"""Cursor-driven page reading for DynamoDB Query Tool."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from .utils import debug_print


@dataclass(frozen=True)
class Page:
    """One page of items plus the cursor to the next, if any."""

    items: Sequence[Dict[str, Any]]
    cursor: Optional[Dict[str, Any]] = None

    @property
    def has_more(self) -> bool:
        return bool(self.cursor)


def read_all(
    execute_request: Callable[[Optional[Dict[str, Any]]], Page],
    on_page: Callable[[Sequence[Dict[str, Any]]], None],
    confirm_more: Callable[[], bool] = lambda: True,
) -> int:
    """Read pages until the store runs out or the operator stops.

    Args:
        execute_request: Called with the continuation cursor (None first)
        on_page: Receives each page's items for display
        confirm_more: Asked after every page that has a continuation cursor

    Returns:
        Number of pages read

    Errors raised by execute_request propagate unchanged.
    """
    cursor = None
    pages_read = 0
    while True:
        page = execute_request(cursor)
        pages_read += 1
        debug_print(
            f"Page {pages_read}: {len(page.items)} item(s), more={page.has_more}"
        )  # pragma: no mutate
        on_page(page.items)

        if not page.has_more:
            break
        if not confirm_more():
            debug_print("Operator stopped pagination")  # pragma: no mutate
            break
        cursor = page.cursor

    return pages_read
