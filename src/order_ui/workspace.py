"""
Per-session wiring of the synchronization engine.

An OrderWorkspace holds everything one browser session needs: the order
list, the selected order, its payment history, the mutation coordinator,
the search debouncer and the infinite-scroll trigger. The view layer talks
to the workspace only through its components' snapshots and triggers.

WorkspaceRegistry keeps one workspace per client and closes the ones that
have been idle too long.
"""

import asyncio
import time
from typing import Callable

from order_ui.config import settings
from order_ui.errors import OrderUIError
from order_ui.lib import logs
from order_ui.models.order import OrderSummary, Page, Payment, PaymentMode
from order_ui.services.order_service import SalesOrderService
from order_ui.sync import (
    CallbackSensor,
    DetailLoader,
    ListSynchronizer,
    MutationCoordinator,
    NearEndSensor,
    SearchDebouncer,
    ViewportTrigger,
)

LOG = logs.logger(__file__)


class OrderWorkspace:
    """
    One session's order list, selection and pending changes.

    Attributes:
        orders: Paginated, searchable order summaries.
        detail: The selected order.
        payments: Payment history of the selected order (term is the order id).
        mutations: Coordinator for order changes.
        search: Debouncer feeding ``orders.reset_and_load``.
        viewport: Infinite-scroll trigger over ``orders``.
    """

    def __init__(
        self,
        service: SalesOrderService,
        page_size: int | None = None,
        payment_page_size: int | None = None,
        search_delay: float | None = None,
        sensor_factory: Callable[[str], NearEndSensor] = CallbackSensor,
    ) -> None:
        config = settings()
        self.service = service
        self.orders: ListSynchronizer[OrderSummary] = ListSynchronizer(
            self._fetch_orders,
            page_size=page_size or config.page_size,
            name="orders",
        )
        self.detail = DetailLoader(service.get_order)
        self.payments: ListSynchronizer[Payment] = ListSynchronizer(
            self._fetch_payments,
            page_size=payment_page_size or config.payment_page_size,
            name="payments",
        )
        self.mutations = MutationCoordinator(
            service, self.detail, self.orders, self.payments
        )
        self.search = SearchDebouncer(
            self.orders.reset_and_load,
            delay=config.search_debounce if search_delay is None else search_delay,
        )
        self.viewport = ViewportTrigger(self.orders, sensor_factory=sensor_factory)
        self._payment_modes: tuple[PaymentMode, ...] | None = None

    @property
    def selected_id(self) -> str | None:
        return self.detail.requested_id

    async def start(self) -> bool:
        """Load the first page of orders with an empty search."""
        LOG.info("Workspace start")
        return await self.orders.reset_and_load("")

    def type_search(self, text: str) -> None:
        """Feed one keystroke's worth of search input."""
        self.search.push(text)

    async def select(self, order_id: str) -> bool:
        """Show ``order_id``: load its detail and first page of payments."""
        order_id = str(order_id)
        loaded, _ = await asyncio.gather(
            self.detail.load(order_id), self.payments.reset_and_load(order_id)
        )
        return loaded

    def deselect(self) -> None:
        self.detail.clear()
        self.payments.clear()

    async def load_payment_modes(self) -> tuple[PaymentMode, ...]:
        """Return the payment modes, fetched once per workspace."""
        if self._payment_modes is None:
            try:
                self._payment_modes = await self.service.list_payment_modes()
            except OrderUIError as exc:
                LOG.error("Failed to load payment modes: %s", exc, exc_info=True)
                return ()
        return self._payment_modes

    def close(self) -> None:
        """Stop all triggers; responses still in flight are discarded."""
        LOG.info("Workspace close")
        self.viewport.unbind()
        self.search.cancel()
        self.orders.close()
        self.payments.close()
        self.detail.close()

    async def _fetch_orders(
        self, page: int, page_size: int, term: str
    ) -> Page[OrderSummary]:
        return await self.service.list_orders(page=page, page_size=page_size, search=term)

    async def _fetch_payments(
        self, page: int, page_size: int, order_id: str
    ) -> Page[Payment]:
        return await self.service.list_payments(order_id, page=page, page_size=page_size)


class WorkspaceRegistry:
    """
    Workspaces keyed by client, closed after a period without use.

    Every ``get`` marks its workspace as used and closes the others that
    have been idle longer than ``idle_timeout``. A client returning after
    eviction gets a fresh workspace.
    """

    def __init__(
        self,
        factory: Callable[[], OrderWorkspace],
        idle_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self.idle_timeout = (
            settings().session_idle_timeout if idle_timeout is None else idle_timeout
        )
        self._clock = clock
        self._entries: dict[str, tuple[OrderWorkspace, float]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> OrderWorkspace:
        """Return the workspace of ``key``, creating it on first use."""
        now = self._clock()
        self.evict_idle(now, keep=key)
        entry = self._entries.get(key)
        if entry is None:
            LOG.info("Creating workspace - client:%s", key)
            workspace = self._factory()
        else:
            workspace = entry[0]
        self._entries[key] = (workspace, now)
        return workspace

    def evict(self, key: str) -> bool:
        """Close and forget the workspace of ``key``."""
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        LOG.info("Closing workspace - client:%s", key)
        entry[0].close()
        return True

    def evict_idle(self, now: float | None = None, keep: str | None = None) -> int:
        """Close every workspace unused for longer than the idle timeout."""
        now = self._clock() if now is None else now
        idle = [
            key
            for key, (_, used) in self._entries.items()
            if key != keep and now - used > self.idle_timeout
        ]
        for key in idle:
            self.evict(key)
        return len(idle)

    def close_all(self) -> None:
        for key in list(self._entries):
            self.evict(key)
