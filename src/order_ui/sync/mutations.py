"""
Pessimistic order mutations.

MutationCoordinator validates a change locally, sends it to the server and,
once the server confirms, refreshes the order list. The detail and payment
history are refreshed too while the changed order is still the selected
one; a newer selection keeps both panes. Local state is only ever replaced
by refetched server state, so a rejected mutation leaves every snapshot
untouched.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from order_ui.errors import OrderUIError, ValidationError
from order_ui.lib import logs
from order_ui.lib.signals import Signal
from order_ui.models.inputs import LineItemEdit, PaymentCapture
from order_ui.models.order import find_status
from order_ui.services import operations as ops
from order_ui.services.order_service import SalesOrderService
from order_ui.sync.detail_loader import DetailLoader
from order_ui.sync.list_sync import ListSynchronizer

LOG = logs.logger(__file__)


@dataclass(frozen=True)
class MutationOutcome:
    """
    Result of a confirmed mutation.

    Attributes:
        operation: Remote operation that was executed.
        order_id: Order the mutation applied to.
        result_id: Id the server returned (line item, payment or order).
        detail_refreshed: Whether the detail reload was applied, or None when
            another order was selected before the server confirmed.
        list_refreshed: Whether the order list reload was applied.
        payments_refreshed: Whether the payment history reload was applied,
            or None when the mutation does not affect payments or the order
            is no longer selected.
    """

    operation: str
    order_id: str
    result_id: str
    detail_refreshed: bool | None
    list_refreshed: bool
    payments_refreshed: bool | None = None


def validate_line_item_edit(line_item_id: str | None, edit: LineItemEdit) -> None:
    if not line_item_id:
        raise ValidationError("A line item must be selected", field="line_item_id")
    if not edit.order_id:
        raise ValidationError("Order is required", field="order_id")
    if not edit.material_master_id:
        raise ValidationError("Material is required", field="material_master_id")
    if edit.item_amt is not None and edit.item_amt < 0:
        raise ValidationError("Amount cannot be negative", field="item_amt")
    if edit.ord_qty is not None and edit.ord_qty < 0:
        raise ValidationError("Quantity cannot be negative", field="ord_qty")
    try:
        edit.to_input()
    except ValueError as exc:
        raise ValidationError("Order, material and measurement ids must be numeric") from exc


def validate_status_change(line_item_id: str | None, status_id: int | str | None) -> None:
    if not line_item_id:
        raise ValidationError("A line item must be selected", field="line_item_id")
    if status_id is None or find_status(status_id) is None:
        raise ValidationError(f"Unknown status: {status_id}", field="status_id")


def validate_payment(payment: PaymentCapture, amount_due: float | None = None) -> None:
    """
    Check a payment before it is sent.

    Args:
        payment: The payment to capture.
        amount_due: Outstanding amount of the order, when its detail is
            resident. None skips the amount-due checks.
    """
    if payment.amount is None or payment.amount <= 0:
        raise ValidationError("Payment amount must be greater than zero", field="amount")
    if not payment.payment_mode_id:
        raise ValidationError("Payment mode is required", field="payment_mode_id")
    if payment.payment_date is None:
        raise ValidationError("Payment date is required", field="payment_date")
    if amount_due is not None:
        if amount_due <= 0:
            raise ValidationError("This order has no amount due", field="amount")
        if payment.amount > amount_due:
            raise ValidationError(
                f"Payment of {payment.amount:.2f} exceeds the amount due of {amount_due:.2f}",
                field="amount",
            )


def validate_quantity(quantity: Any, field: str) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a whole number greater than zero", field=field)


class MutationCoordinator:
    """
    Sends order changes and refreshes the affected views.

    Attributes:
        changed: Signal emitted with the ``saving`` flag whenever it changes.
        error_occurred: Signal emitted with a message when a mutation fails.
    """

    def __init__(
        self,
        service: SalesOrderService,
        detail: DetailLoader,
        orders: ListSynchronizer,
        payments: ListSynchronizer | None = None,
    ) -> None:
        self.service = service
        self.detail = detail
        self.orders = orders
        self.payments = payments
        self._saving = 0
        self.changed = Signal()
        self.error_occurred = Signal()

    @property
    def saving(self) -> bool:
        """True while a mutation or its follow-up refreshes are pending."""
        return self._saving > 0

    async def update_line_item(
        self, order_id: str, line_item_id: str, edit: LineItemEdit
    ) -> MutationOutcome:
        self._validate(validate_line_item_edit, line_item_id, edit)
        return await self._run(
            ops.UPDATE_LINE_ITEM,
            order_id,
            lambda: self.service.update_line_item(line_item_id, edit),
        )

    async def update_line_item_status(
        self, order_id: str, line_item_id: str, status_id: int | str
    ) -> MutationOutcome:
        self._validate(validate_status_change, line_item_id, status_id)
        return await self._run(
            ops.UPDATE_LINE_ITEM_STATUS,
            order_id,
            lambda: self.service.update_line_item_status(line_item_id, int(status_id)),
        )

    async def capture_payment(
        self, order_id: str, payment: PaymentCapture
    ) -> MutationOutcome:
        resident = self.detail.detail
        amount_due = resident.amt_due if resident and resident.id == str(order_id) else None
        self._validate(validate_payment, payment, amount_due)
        return await self._run(
            ops.CAPTURE_PAYMENT,
            order_id,
            lambda: self.service.capture_payment(order_id, payment),
            refresh_payments=True,
        )

    async def mark_delivered(self, order_id: str, quantity: int) -> MutationOutcome:
        self._validate(validate_quantity, quantity, "delivered_qty")
        return await self._run(
            ops.MARK_DELIVERED,
            order_id,
            lambda: self.service.mark_delivered(order_id, quantity),
        )

    async def mark_cancelled(self, order_id: str, quantity: int) -> MutationOutcome:
        self._validate(validate_quantity, quantity, "cancelled_qty")
        return await self._run(
            ops.MARK_CANCELLED,
            order_id,
            lambda: self.service.mark_cancelled(order_id, quantity),
        )

    def _validate(self, check: Callable[..., None], *args: Any) -> None:
        try:
            check(*args)
        except ValidationError as exc:
            LOG.warning("Rejected mutation input: %s", exc)
            self.error_occurred.emit(str(exc))
            raise

    async def _run(
        self,
        operation: str,
        order_id: str,
        send: Callable[[], Awaitable[str]],
        refresh_payments: bool = False,
    ) -> MutationOutcome:
        order_id = str(order_id)
        self._set_saving(+1)
        try:
            LOG.info("Mutation started - operation:%s order:%s", operation, order_id)
            try:
                result_id = await send()
            except OrderUIError as exc:
                LOG.error("Mutation %s failed: %s", operation, exc, exc_info=True)
                self.error_occurred.emit(str(exc))
                raise

            # a newer selection owns the detail and payment panes
            selected = self.detail.requested_id == order_id
            if not selected:
                LOG.info(
                    "Order %s no longer selected - skipping detail refresh", order_id
                )
            refreshes = {"list": self.orders.refresh()}
            if selected:
                refreshes["detail"] = self.detail.load(order_id)
                if refresh_payments and self.payments is not None:
                    refreshes["payments"] = self.payments.reset_and_load(order_id)
            results = await asyncio.gather(*refreshes.values(), return_exceptions=True)
            applied = {}
            for name, result in zip(refreshes, results):
                if isinstance(result, BaseException):
                    LOG.error(
                        "Refresh after %s failed: %s", operation, result, exc_info=result
                    )
                applied[name] = result is True
            outcome = MutationOutcome(
                operation=operation,
                order_id=order_id,
                result_id=result_id,
                detail_refreshed=applied.get("detail"),
                list_refreshed=applied["list"],
                payments_refreshed=applied.get("payments"),
            )
            LOG.info(
                "Mutation complete - operation:%s order:%s detail:%s list:%s",
                operation,
                order_id,
                outcome.detail_refreshed,
                outcome.list_refreshed,
            )
            return outcome
        finally:
            self._set_saving(-1)

    def _set_saving(self, delta: int) -> None:
        self._saving += delta
        self.changed.emit(self.saving)
