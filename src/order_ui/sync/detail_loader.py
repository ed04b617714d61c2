"""
Single-selection order detail loading.

DetailLoader owns the one resident OrderDetail. Only the most recently
initiated load may commit: every load mints a token and a response whose
token has been superseded (by another load, clear() or close()) is dropped.

A failed load clears the resident order. Showing nothing is preferred over
showing an order other than the one the user selected.
"""

from dataclasses import replace
from typing import Any, Awaitable, Callable

from order_ui.errors import OrderUIError, TransportError
from order_ui.lib import logs
from order_ui.lib.signals import Signal
from order_ui.models.common import DetailPhase, DetailSnapshot
from order_ui.models.order import OrderDetail
from order_ui.sync.tokens import TokenSource

LOG = logs.logger(__file__)


class DetailLoader:
    """
    Loads and holds the currently selected order.

    Attributes:
        changed: Signal emitted with the new DetailSnapshot on every change.
        error_occurred: Signal emitted with a message when a load fails.
    """

    def __init__(self, fetch_detail: Callable[[str], Awaitable[OrderDetail]]) -> None:
        self._fetch_detail = fetch_detail
        self._tokens = TokenSource()
        self._closed = False
        self._snapshot = DetailSnapshot()
        self.changed = Signal()
        self.error_occurred = Signal()

    @property
    def snapshot(self) -> DetailSnapshot:
        return self._snapshot

    @property
    def detail(self) -> OrderDetail | None:
        """The resident order, if it matches the latest requested id."""
        detail = self._snapshot.detail
        if detail is None or detail.id != self._snapshot.requested_id:
            return None
        return detail

    @property
    def requested_id(self) -> str | None:
        return self._snapshot.requested_id

    async def load(self, order_id: str) -> bool:
        """
        Fetch the full order and make it resident.

        While reloading the same order the current detail stays visible;
        selecting a different order hides the previous one immediately.

        Returns:
            True if this call's response was applied.
        """
        if self._closed:
            return False
        order_id = str(order_id)
        token = self._tokens.mint()
        self._update(
            phase=DetailPhase.LOADING,
            requested_id=order_id,
            detail=self.detail if self._snapshot.requested_id == order_id else None,
            error=None,
        )
        LOG.info("Detail load started - order:%s", order_id)

        try:
            detail = await self._fetch_detail(order_id)
            if detail.id != order_id:
                raise TransportError(
                    f"Received order {detail.id} while loading order {order_id}"
                )
        except OrderUIError as exc:
            if not self._accepts(token):
                LOG.debug("Ignored failure of superseded detail load %s", order_id)
                return False
            LOG.error("Failed to fetch order details: %s", exc, exc_info=True)
            self._update(phase=DetailPhase.ERROR, detail=None, error=str(exc))
            self.error_occurred.emit(str(exc))
            return False

        if not self._accepts(token):
            LOG.debug("Discarded stale detail for order %s", order_id)
            return False

        self._update(phase=DetailPhase.LOADED, detail=detail, error=None)
        LOG.info(
            "Detail load complete - order:%s line_items:%s",
            order_id,
            len(detail.line_items),
        )
        return True

    def clear(self) -> None:
        """Release the resident order and discard in-flight loads."""
        self._tokens.mint()
        self._snapshot = DetailSnapshot()
        self.changed.emit(self._snapshot)

    def close(self) -> None:
        """Tear down; responses still in flight will be discarded."""
        self._closed = True
        self.clear()

    def _accepts(self, token: int) -> bool:
        return not self._closed and self._tokens.is_current(token)

    def _update(self, **changes: Any) -> None:
        self._snapshot = replace(self._snapshot, **changes)
        self.changed.emit(self._snapshot)
