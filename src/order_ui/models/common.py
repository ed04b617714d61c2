"""
Common state models shared by the synchronization engine and the view layer.

This module defines the immutable snapshots each engine component publishes
through its ``changed`` signal:

- PaginationState: Cursor and totals of a paginated list
- ListSnapshot: Phase, resident items and pagination of a list synchronizer
- DetailSnapshot: Phase and resident order of the detail loader

Snapshots are plain frozen dataclasses so the view layer can compare,
serialize and fingerprint them without reaching into component internals.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from order_ui.lib import objects
from order_ui.models.order import OrderDetail

T = TypeVar("T")


class ListPhase(str, Enum):
    """Lifecycle phase of a list synchronizer."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERROR = "error"


class DetailPhase(str, Enum):
    """Lifecycle phase of the detail loader."""

    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class PaginationState:
    """
    Tracks pagination state for a paginated list.

    Attributes:
        current_page: Last page applied to the list (1-indexed, 0 before the
            first successful load).
        page_size: Number of items per page.
        total: Total number of items reported by the server.
        has_more: Server-reported flag for further pages.
    """

    current_page: int = 0
    page_size: int = 20
    total: int = 0
    has_more: bool = False

    def next_page(self) -> int:
        """Return the next page number."""
        return self.current_page + 1


@dataclass(frozen=True)
class ListSnapshot(Generic[T]):
    """
    Observable state of a list synchronizer.

    Attributes:
        phase: Current lifecycle phase.
        items: Resident items in server order.
        pagination: Pagination of the resident items.
        term: Search term the resident items were fetched with.
        requested_term: Most recently requested search term.
        error: Message of the last failure, cleared on the next success.
    """

    phase: ListPhase = ListPhase.IDLE
    items: tuple[T, ...] = ()
    pagination: PaginationState = field(default_factory=PaginationState)
    term: str = ""
    requested_term: str = ""
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is ListPhase.LOADING

    @property
    def is_fetching_more(self) -> bool:
        return self.phase is ListPhase.LOADING_MORE

    @property
    def has_more(self) -> bool:
        return self.pagination.has_more

    @property
    def is_empty(self) -> bool:
        return not self.is_loading and not self.items

    def fingerprint(self) -> str:
        """Stable digest of the resident data (items and pagination)."""
        return objects.fingerprint(
            {"items": self.items, "pagination": self.pagination, "term": self.term}
        )


@dataclass(frozen=True)
class DetailSnapshot:
    """
    Observable state of the detail loader.

    Attributes:
        phase: Current lifecycle phase.
        requested_id: Id passed to the most recent ``load``.
        detail: Resident order, only ever one whose id is ``requested_id``.
        error: Message of the last failure.
    """

    phase: DetailPhase = DetailPhase.EMPTY
    requested_id: str | None = None
    detail: OrderDetail | None = None
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is DetailPhase.LOADING

    def fingerprint(self) -> str:
        """Stable digest of the resident order."""
        return objects.fingerprint({"detail": self.detail})
