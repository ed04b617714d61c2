"""
Paginated, searchable list synchronization.

ListSynchronizer owns one paginated collection (the order list, or the
payment history of the selected order) and its PaginationState. It exposes
three triggers:

- reset_and_load(term): replace the list with page 1 for a new term
- load_next(): append the next page (infinite scroll)
- refresh() / refresh_entry(id): reload from page 1 with the current term

Single-flight rules:
- At most one reset fetch is in flight. Resets requested meanwhile are
  queued, and only the newest queued one is issued.
- At most one append fetch is in flight; load_next() is a no-op while an
  append or any reset is pending, or when the server reported no more pages.

Every fetch is issued with a token from a TokenSource. A response is applied
only if its token is still the latest minted one, so a reset issued while an
append is in flight makes the append's late response a silent no-op.
"""

import asyncio
from dataclasses import replace
from operator import attrgetter
from typing import Any, Awaitable, Callable, Generic, Hashable, TypeVar

from order_ui.errors import OrderUIError
from order_ui.lib import logs
from order_ui.lib.signals import Signal
from order_ui.models.common import ListPhase, ListSnapshot, PaginationState
from order_ui.models.order import Page
from order_ui.sync.tokens import TokenSource

LOG = logs.logger(__file__)

T = TypeVar("T")

# fetch_page(page, page_size, term) -> Page
PageFetcher = Callable[[int, int, str], Awaitable[Page[T]]]


class ListSynchronizer(Generic[T]):
    """
    Owns a paginated list and keeps it consistent under concurrent fetches.

    Attributes:
        name: Label used in log messages.
        page_size: Requested items per page.
        changed: Signal emitted with the new ListSnapshot on every change.
        error_occurred: Signal emitted with a message when a fetch fails.
    """

    def __init__(
        self,
        fetch_page: PageFetcher[T],
        page_size: int = 20,
        name: str = "list",
        key: Callable[[T], Hashable] = attrgetter("id"),
    ) -> None:
        """
        Initialize an empty synchronizer.

        Args:
            fetch_page: Coroutine function returning one page for
                ``(page, page_size, term)``; raises OrderUIError on failure.
            page_size: Items requested per page.
            name: Label used in log messages.
            key: Identity of an item, used to drop duplicates when appending.
        """
        self.name = name
        self.page_size = page_size
        self._fetch_page = fetch_page
        self._key = key
        self._tokens = TokenSource()
        self._reset_lock = asyncio.Lock()
        self._resets_pending = 0
        self._append_in_flight = False
        self._closed = False
        self._snapshot: ListSnapshot[T] = ListSnapshot(
            pagination=PaginationState(page_size=page_size)
        )
        self.changed = Signal()
        self.error_occurred = Signal()

    @property
    def snapshot(self) -> ListSnapshot[T]:
        return self._snapshot

    @property
    def items(self) -> tuple[T, ...]:
        return self._snapshot.items

    @property
    def pagination(self) -> PaginationState:
        return self._snapshot.pagination

    @property
    def is_busy(self) -> bool:
        """True while any reset or append fetch is pending."""
        return self._resets_pending > 0 or self._append_in_flight

    @property
    def closed(self) -> bool:
        return self._closed

    async def reset_and_load(self, term: str = "") -> bool:
        """
        Replace the list with page 1 of ``term``.

        On failure the previous items stay resident and the error is
        recorded. A reset superseded by a newer one returns without
        touching the list.

        Returns:
            True if this call's response was applied.
        """
        term = (term or "").strip()
        if self._closed:
            return False
        token = self._tokens.mint()
        self._resets_pending += 1
        self._update(phase=ListPhase.LOADING, requested_term=term, error=None)
        try:
            async with self._reset_lock:
                if not self._accepts(token):
                    LOG.debug("%s reset for %r superseded while queued", self.name, term)
                    return False
                return await self._run_reset(token, term)
        finally:
            self._resets_pending -= 1

    async def load_next(self) -> bool:
        """
        Append the next page.

        No-op (returns False) when the server reported no more pages, or
        when an append or reset is already pending.

        Returns:
            True if a page was appended.
        """
        pagination = self._snapshot.pagination
        if self._closed or not pagination.has_more:
            LOG.debug("%s load_next ignored - has_more:%s", self.name, pagination.has_more)
            return False
        if self.is_busy:
            LOG.debug("%s load_next ignored - fetch in flight", self.name)
            return False

        token = self._tokens.mint()
        page_number = pagination.next_page()
        term = self._snapshot.term
        self._append_in_flight = True
        self._update(phase=ListPhase.LOADING_MORE, error=None)
        LOG.info(
            "%s load_next started - page:%s length:%s",
            self.name,
            page_number,
            len(self._snapshot.items),
        )
        try:
            page = await self._fetch_page(page_number, self.page_size, term)
        except OrderUIError as exc:
            if self._accepts(token):
                self._fail(exc, "load more")
            return False
        finally:
            self._append_in_flight = False

        if not self._accepts(token):
            LOG.debug("%s discarded stale page %s", self.name, page_number)
            return False

        items = self._merge(self._snapshot.items, page.items)
        self._update(
            phase=ListPhase.LOADED,
            items=items,
            pagination=replace(
                self._snapshot.pagination,
                current_page=page_number,
                total=page.total,
                has_more=page.has_more,
            ),
        )
        LOG.info(
            "%s load_next complete - has_more:%s length:%s",
            self.name,
            page.has_more,
            len(items),
        )
        return True

    async def refresh(self) -> bool:
        """Reload from page 1 with the most recently requested term."""
        return await self.reset_and_load(self._snapshot.requested_term)

    async def refresh_entry(self, entry_id: Any) -> bool:
        """
        Bring the entry ``entry_id`` up to date.

        The list is reloaded from page 1 with the current term rather than
        patching the single entry, so summaries are only ever replaced by
        server state.
        """
        LOG.info("%s refresh for entry %s - full reload", self.name, entry_id)
        return await self.refresh()

    def clear(self) -> None:
        """Drop the resident items and discard any in-flight response."""
        self._tokens.mint()
        self._update(
            phase=ListPhase.IDLE,
            items=(),
            pagination=PaginationState(page_size=self.page_size),
            term="",
            requested_term="",
            error=None,
        )

    def close(self) -> None:
        """Tear down; responses still in flight will be discarded."""
        self._closed = True
        self._tokens.mint()

    async def _run_reset(self, token: int, term: str) -> bool:
        LOG.info("%s reset started - term:%r", self.name, term)
        try:
            page = await self._fetch_page(1, self.page_size, term)
        except OrderUIError as exc:
            if self._accepts(token):
                self._fail(exc, "load")
            else:
                LOG.debug("%s ignored failure of superseded reset", self.name)
            return False

        if not self._accepts(token):
            LOG.debug("%s discarded stale reset for %r", self.name, term)
            return False

        self._update(
            phase=ListPhase.LOADED,
            items=self._merge((), page.items),
            pagination=PaginationState(
                current_page=1,
                page_size=page.per_page or self.page_size,
                total=page.total,
                has_more=page.has_more,
            ),
            term=term,
            error=None,
        )
        LOG.info(
            "%s reset complete - term:%r total:%s has_more:%s",
            self.name,
            term,
            page.total,
            page.has_more,
        )
        return True

    def _accepts(self, token: int) -> bool:
        return not self._closed and self._tokens.is_current(token)

    def _merge(self, resident: tuple[T, ...], incoming: tuple[T, ...]) -> tuple[T, ...]:
        """Append incoming items, skipping any whose key is already resident."""
        seen = {self._key(item) for item in resident}
        merged = list(resident)
        for item in incoming:
            item_key = self._key(item)
            if item_key in seen:
                LOG.debug("%s skipped duplicate entry %s", self.name, item_key)
                continue
            seen.add(item_key)
            merged.append(item)
        return tuple(merged)

    def _fail(self, exc: OrderUIError, action: str) -> None:
        LOG.error("%s failed to %s: %s", self.name, action, exc, exc_info=True)
        self._update(phase=ListPhase.ERROR, error=str(exc))
        self.error_occurred.emit(str(exc))

    def _update(self, **changes: Any) -> None:
        self._snapshot = replace(self._snapshot, **changes)
        self.changed.emit(self._snapshot)
