"""
Reflex state management for the Sales Order UI.

This module bridges the browser session to an OrderWorkspace. Each client
token gets its own workspace; event handlers call the workspace triggers
and then copy the resulting snapshots into Reflex vars.

Handlers that wait on the network run as background events so a slow
fetch never blocks other events of the same session.
"""

import reflex as rx

from order_ui.config import settings
from order_ui.errors import OrderUIError
from order_ui.lib import logs
from order_ui.models.common import ListPhase
from order_ui.models.inputs import LineItemEdit, PaymentCapture
from order_ui.models.order import (
    serialize_order_detail,
    serialize_order_summary,
    serialize_payment,
)
from order_ui.models.reflex_models import (
    OptionModel,
    OrderDetailModel,
    OrderRowModel,
    PaymentModel,
    dict_to_order_detail,
    dict_to_order_row,
    dict_to_payment,
    status_options,
)
from order_ui.services import get_order_service
from order_ui.utils import parse_date
from order_ui.workspace import OrderWorkspace, WorkspaceRegistry

LOG = logs.logger(__file__)

# Branding configuration
APP_TITLE = "Order Search" if settings().generic_branding else "Sales Orders"
APP_SUBTITLE = (
    "Search and manage orders."
    if settings().generic_branding
    else "Track garments, trials, deliveries and payments for every order."
)

_WORKSPACES = WorkspaceRegistry(lambda: OrderWorkspace(get_order_service()))


def close_workspaces() -> None:
    """Tear down every browser session's workspace."""
    _WORKSPACES.close_all()


def _to_float(value: str | None) -> float | None:
    if value is None or str(value).strip() == "":
        return None
    return float(value)


def _to_int(value: str | None) -> int | None:
    if value is None or str(value).strip() == "":
        return None
    return int(value)


class OrderState(rx.State):
    """
    Main application state for the Sales Order UI.

    Handles the order list, search, infinite scroll, the selected order and
    the mutations applied to it.
    """

    # Order list
    orders: list[OrderRowModel] = []
    total: int = 0
    has_more: bool = False
    query: str = ""
    is_loading: bool = True
    list_error: str = ""

    # Selected order
    selected_id: str = ""
    detail: OrderDetailModel = OrderDetailModel()
    has_detail: bool = False
    detail_loading: bool = False
    detail_error: str = ""

    # Payment history of the selected order
    payments: list[PaymentModel] = []
    payments_total: int = 0
    payments_has_more: bool = False

    # Forms
    payment_modes: list[OptionModel] = []
    statuses: list[OptionModel] = status_options()
    saving: bool = False

    @rx.var
    def result_summary(self) -> str:
        """Generate summary text for search results."""
        noun = "order" if self.total == 1 else "orders"
        base = f"{self.total} {noun} found"
        if self.query and self.query.strip():
            return f'{base} for "{self.query.strip()}"'
        return base

    @rx.var
    def is_empty(self) -> bool:
        """Check if empty state should be shown."""
        return not self.is_loading and len(self.orders) == 0

    @rx.event(background=True)
    async def on_load(self):
        """Load the first page of orders and the payment modes."""
        async with self:
            workspace = self._workspace()
            self.is_loading = True
        await workspace.start()
        modes = await workspace.load_payment_modes()
        async with self:
            self.payment_modes = [
                OptionModel(value=mode.id, label=mode.mode_name) for mode in modes
            ]
            self._sync(workspace)

    @rx.event(background=True)
    async def search(self, query: str):
        """
        Event handler for search input changes.

        Every keystroke restarts the debounce timer; only the value that
        survives the quiet period reloads the list.
        """
        async with self:
            workspace = self._workspace()
            self.query = query
        workspace.type_search(query)
        await workspace.search.settled()
        async with self:
            self._sync(workspace)

    @rx.event(background=True)
    async def submit_search(self):
        """Commit the current search immediately (Enter key)."""
        async with self:
            workspace = self._workspace()
        await workspace.search.flush()
        async with self:
            self._sync(workspace)

    @rx.event(background=True)
    async def load_more(self):
        """
        Event handler for infinite scroll pagination.

        The scroll container reports that its last row came into view; the
        viewport trigger decides whether that crossing fetches a page.
        """
        async with self:
            workspace = self._workspace()
            last_key = self.orders[-1].id if self.orders else ""
        if workspace.orders.snapshot.phase is ListPhase.IDLE:
            # the session was evicted while idle
            await workspace.start()
        LOG.info(
            "Load Started - has_more: %s length:%s",
            workspace.orders.snapshot.has_more,
            len(workspace.orders.items),
        )
        sensor = workspace.viewport.bind(last_key)
        sensor.crossed()
        await workspace.viewport.settled()
        async with self:
            self._sync(workspace)
        LOG.info(
            "Load Complete - has_more: %s length:%s",
            workspace.orders.snapshot.has_more,
            len(workspace.orders.items),
        )

    @rx.event(background=True)
    async def select_order(self, order_id: str):
        """Show an order in the detail pane."""
        async with self:
            workspace = self._workspace()
            self.selected_id = order_id
            self.detail_loading = True
            self.has_detail = False
            self.detail_error = ""
        await workspace.select(order_id)
        async with self:
            self._sync(workspace)
            if self.detail_error:
                return rx.toast.error(self.detail_error)

    @rx.event(background=True)
    async def load_more_payments(self):
        async with self:
            workspace = self._workspace()
        await workspace.payments.load_next()
        async with self:
            self._sync(workspace)

    @rx.event
    def close_detail(self):
        """Hide the detail pane."""
        workspace = self._workspace()
        workspace.deselect()
        self._sync(workspace)

    @rx.event(background=True)
    async def update_item_status(self, line_item_id: str, status_id: str):
        """Move a line item of the selected order to another status."""
        async with self:
            workspace = self._workspace()
            order_id = self.selected_id
            self.saving = True
        try:
            await workspace.mutations.update_line_item_status(
                order_id, line_item_id, status_id
            )
        except OrderUIError as exc:
            return await self._failed(workspace, exc)
        return await self._saved(workspace, "Status updated")

    @rx.event(background=True)
    async def save_line_item(self, form_data: dict):
        """Save the edit form of one line item."""
        async with self:
            workspace = self._workspace()
            order_id = self.selected_id
            self.saving = True
        try:
            line_item_id = form_data.get("line_item_id", "")
            resident = workspace.detail.detail
            item = resident.line_item(line_item_id) if resident else None
            edit = LineItemEdit(
                order_id=order_id,
                material_master_id=item.material_master_id if item else None,
                measurement_main_id=item.measurement_main_id if item else None,
                trial_date=parse_date(form_data.get("trial_date")),
                delivery_date=parse_date(form_data.get("delivery_date")),
                item_amt=_to_float(form_data.get("item_amt")),
                ord_qty=_to_int(form_data.get("ord_qty")),
                description=form_data.get("description") or None,
                site_code=resident.customer.site_code if resident and resident.customer else None,
            )
            await workspace.mutations.update_line_item(order_id, line_item_id, edit)
        except ValueError:
            return await self._failed(workspace, "Amount and quantity must be numbers")
        except OrderUIError as exc:
            return await self._failed(workspace, exc)
        return await self._saved(workspace, "Line item saved")

    @rx.event(background=True)
    async def receive_payment(self, form_data: dict):
        """Capture a payment against the selected order."""
        async with self:
            workspace = self._workspace()
            order_id = self.selected_id
            self.saving = True
        try:
            payment = PaymentCapture(
                amount=_to_float(form_data.get("amount")) or 0.0,
                payment_date=parse_date(form_data.get("payment_date")),
                payment_mode_id=form_data.get("payment_mode_id") or None,
                reference=form_data.get("reference") or "",
            )
            await workspace.mutations.capture_payment(order_id, payment)
        except ValueError:
            return await self._failed(workspace, "Payment amount must be a number")
        except OrderUIError as exc:
            return await self._failed(workspace, exc)
        return await self._saved(workspace, "Payment recorded")

    @rx.event(background=True)
    async def mark_delivered(self, form_data: dict):
        async with self:
            workspace = self._workspace()
            order_id = self.selected_id
            self.saving = True
        try:
            quantity = _to_int(form_data.get("quantity"))
            await workspace.mutations.mark_delivered(order_id, quantity)
        except ValueError:
            return await self._failed(workspace, "Quantity must be a whole number")
        except OrderUIError as exc:
            return await self._failed(workspace, exc)
        return await self._saved(workspace, "Delivery recorded")

    @rx.event(background=True)
    async def mark_cancelled(self, form_data: dict):
        async with self:
            workspace = self._workspace()
            order_id = self.selected_id
            self.saving = True
        try:
            quantity = _to_int(form_data.get("quantity"))
            await workspace.mutations.mark_cancelled(order_id, quantity)
        except ValueError:
            return await self._failed(workspace, "Quantity must be a whole number")
        except OrderUIError as exc:
            return await self._failed(workspace, exc)
        return await self._saved(workspace, "Cancellation recorded")

    async def _saved(self, workspace: OrderWorkspace, message: str):
        async with self:
            self._sync(workspace)
        return rx.toast.success(message)

    async def _failed(self, workspace: OrderWorkspace, error: OrderUIError | str):
        async with self:
            self._sync(workspace)
        return rx.toast.error(str(error))

    def _workspace(self) -> OrderWorkspace:
        return _WORKSPACES.get(self.router.session.client_token)

    def _sync(self, workspace: OrderWorkspace) -> None:
        """Copy the workspace snapshots into Reflex vars."""
        orders = workspace.orders.snapshot
        self.orders = [
            dict_to_order_row(serialize_order_summary(order)) for order in orders.items
        ]
        self.total = orders.pagination.total
        self.has_more = orders.has_more
        self.is_loading = orders.is_loading
        self.list_error = orders.error or ""

        detail = workspace.detail.snapshot
        resident = workspace.detail.detail
        self.selected_id = detail.requested_id or ""
        self.has_detail = resident is not None
        self.detail = (
            dict_to_order_detail(serialize_order_detail(resident))
            if resident
            else OrderDetailModel()
        )
        self.detail_loading = detail.is_loading
        self.detail_error = detail.error or ""

        payments = workspace.payments.snapshot
        self.payments = [
            dict_to_payment(serialize_payment(payment)) for payment in payments.items
        ]
        self.payments_total = payments.pagination.total
        self.payments_has_more = payments.has_more

        self.saving = workspace.mutations.saving
