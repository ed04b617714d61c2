"""
Demo implementation of OrderGateway using an in-memory order book.

This gateway is useful for:
- Local development without access to the order API
- Exercising the synchronization engine with realistic data
- Demonstrating the application without a backend

It answers the same operation names as the live API and returns the same
wire shapes, so responses go through the exact parsing path used in
production. Mutations update the in-memory book (amounts, quantities and
statuses are recomputed the way the server does).
"""

import asyncio
import copy
from typing import Any, Callable, Mapping

from benedict import benedict

from order_ui.data.demo_orders import (
    DEMO_PAYMENT_MODES,
    DEMO_STATUSES,
    build_demo_orders,
    build_demo_payments,
)
from order_ui.errors import TransportError
from order_ui.lib import logs
from order_ui.services import operations as ops
from order_ui.services.gateway import OrderGateway

LOG = logs.logger(__file__)

_PARTIAL_STATUS_ID = "6"

_EDITABLE_FIELDS = (
    "measurement_main_id",
    "material_master_id",
    "trial_date",
    "delivery_date",
    "item_amt",
    "ord_qty",
    "desc1",
)


class DemoGateway(OrderGateway):
    """
    In-memory order gateway backed by generated demo data.

    Attributes:
        latency: Simulated round-trip delay in seconds.
        calls: Log of executed (operation, variables) pairs.
    """

    def __init__(
        self,
        orders: list[dict] | None = None,
        payments: dict[str, list[dict]] | None = None,
        latency: float = 0.0,
    ) -> None:
        """
        Initialize with an order book.

        Args:
            orders: Orders in ``orderMain`` wire shape, or None for the
                generated demo book.
            payments: Payment history per order id, or None to derive it
                from the orders.
            latency: Simulated round-trip delay in seconds.
        """
        book = orders if orders is not None else build_demo_orders()
        self._orders: dict[str, dict] = {order["id"]: copy.deepcopy(order) for order in book}
        self._payments = (
            copy.deepcopy(payments) if payments is not None else build_demo_payments(book)
        )
        self._failures: dict[str, str] = {}
        self._next_payment = 1
        self.latency = latency
        self.calls: list[tuple[str, dict]] = []
        self._handlers: dict[str, Callable[[dict], dict]] = {
            ops.LIST_ORDERS: self._list_orders,
            ops.GET_ORDER: self._get_order,
            ops.UPDATE_LINE_ITEM: self._update_line_item,
            ops.UPDATE_LINE_ITEM_STATUS: self._update_line_item_status,
            ops.CAPTURE_PAYMENT: self._capture_payment,
            ops.MARK_DELIVERED: self._mark_delivered,
            ops.MARK_CANCELLED: self._mark_cancelled,
            ops.LIST_PAYMENTS: self._list_payments,
            ops.LIST_PAYMENT_MODES: self._list_payment_modes,
        }

    def fail_next(self, operation: str, message: str = "Service unavailable") -> None:
        """Make the next call of ``operation`` raise TransportError."""
        self._failures[operation] = message

    async def execute(
        self, operation: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        variables = dict(variables or {})
        self.calls.append((operation, variables))
        if self.latency:
            await asyncio.sleep(self.latency)
        else:
            await asyncio.sleep(0)

        if message := self._failures.pop(operation, None):
            LOG.info("Simulated failure - operation:%s message:%s", operation, message)
            raise TransportError(message, operation=operation)
        try:
            handler = self._handlers[operation]
        except KeyError as exc:
            raise TransportError(
                f"Unknown operation: {operation}", operation=operation
            ) from exc
        return copy.deepcopy(handler(variables))

    def _list_orders(self, variables: dict) -> dict:
        search = (variables.get("search") or "").strip().lower()
        matched = [
            _summary_fields(order)
            for order in self._orders.values()
            if not search or _matches(order, search)
        ]
        return {ops.LIST_ORDERS: _paginate(matched, variables)}

    def _get_order(self, variables: dict) -> dict:
        return {ops.GET_ORDER: self._orders.get(str(variables.get("id")))}

    def _update_line_item(self, variables: dict) -> dict:
        order, item = self._find_line_item(variables.get("id"))
        payload = variables.get("input") or {}
        for key in _EDITABLE_FIELDS:
            if key in payload:
                item[key] = payload[key]
        for key in ("measurement_main_id", "material_master_id"):
            if item.get(key) is not None:
                item[key] = str(item[key])
        _recompute_totals(order)
        return {ops.UPDATE_LINE_ITEM: {"id": item["id"]}}

    def _update_line_item_status(self, variables: dict) -> dict:
        order, item = self._find_line_item(variables.get("id"))
        status_id = str((variables.get("input") or {}).get("status_id"))
        if status_id not in DEMO_STATUSES:
            raise TransportError(
                f"Unknown status: {status_id}", operation=ops.UPDATE_LINE_ITEM_STATUS
            )
        item["orderStatus"] = {"id": status_id, "status_name": DEMO_STATUSES[status_id]}
        statuses = {line["orderStatus"]["id"] for line in order["orderDetails"]}
        order_status = statuses.pop() if len(statuses) == 1 else _PARTIAL_STATUS_ID
        order["orderStatus"] = {
            "id": order_status,
            "status_name": DEMO_STATUSES[order_status],
        }
        return {ops.UPDATE_LINE_ITEM_STATUS: {"id": item["id"]}}

    def _capture_payment(self, variables: dict) -> dict:
        order = self._find_order(variables.get("id"), ops.CAPTURE_PAYMENT)
        payload = variables.get("input") or {}
        amount = float(payload.get("payment_amt") or 0)
        if amount > order["amt_due"]:
            raise TransportError(
                "Payment exceeds the amount due", operation=ops.CAPTURE_PAYMENT
            )
        mode_id = str(payload.get("payment_mode_id"))
        mode = next((m for m in DEMO_PAYMENT_MODES if m["id"] == mode_id), None)
        payment_id = f"N{self._next_payment}"
        self._next_payment += 1
        self._payments.setdefault(order["id"], []).insert(
            0,
            {
                "id": payment_id,
                "docno": f"RCPT-{order['id']}-{payment_id}",
                "admsite_code": str(order["user"]["admsite_code"]),
                "payment_date": payload.get("payment_date"),
                "payment_ref": payload.get("payment_ref"),
                "payment_amt": amount,
                "payment_type": "Receipt",
                "paymentMode": dict(mode) if mode else None,
            },
        )
        order["amt_paid"] = round(order["amt_paid"] + amount, 2)
        order["amt_due"] = round(order["ord_amt"] - order["amt_paid"], 2)
        return {ops.CAPTURE_PAYMENT: {"id": payment_id}}

    def _mark_delivered(self, variables: dict) -> dict:
        order = self._find_order(variables.get("id"), ops.MARK_DELIVERED)
        quantity = int((variables.get("input") or {}).get("delivered_qty") or 0)
        self._check_open_quantity(order, quantity, ops.MARK_DELIVERED)
        order["delivered_qty"] += quantity
        return {ops.MARK_DELIVERED: {"id": order["id"]}}

    def _mark_cancelled(self, variables: dict) -> dict:
        order = self._find_order(variables.get("id"), ops.MARK_CANCELLED)
        quantity = int((variables.get("input") or {}).get("cancelled_qty") or 0)
        self._check_open_quantity(order, quantity, ops.MARK_CANCELLED)
        order["cancelled_qty"] += quantity
        return {ops.MARK_CANCELLED: {"id": order["id"]}}

    def _list_payments(self, variables: dict) -> dict:
        history = self._payments.get(str(variables.get("order_id")), [])
        return {ops.LIST_PAYMENTS: _paginate(history, variables)}

    def _list_payment_modes(self, variables: dict) -> dict:
        return {ops.LIST_PAYMENT_MODES: [dict(mode) for mode in DEMO_PAYMENT_MODES]}

    def _find_order(self, order_id: Any, operation: str) -> dict:
        try:
            return self._orders[str(order_id)]
        except KeyError as exc:
            raise TransportError(f"Order {order_id} not found", operation=operation) from exc

    def _find_line_item(self, line_item_id: Any) -> tuple[dict, dict]:
        for order in self._orders.values():
            for item in order["orderDetails"]:
                if item["id"] == str(line_item_id):
                    return order, item
        raise TransportError(f"Order item {line_item_id} not found")

    @staticmethod
    def _check_open_quantity(order: dict, quantity: int, operation: str) -> None:
        open_qty = order["ord_qty"] - order["delivered_qty"] - order["cancelled_qty"]
        if quantity > open_qty:
            raise TransportError(
                f"Only {open_qty} item(s) remain open on this order",
                operation=operation,
            )


def _matches(order: dict, search: str) -> bool:
    """Case-insensitive substring match over the searchable order fields."""
    b = benedict(order)
    fields = (
        b.get("docno"),
        b.get("user.fname"),
        b.get("desc1"),
        b.get("orderStatus.status_name"),
    )
    return any(search in str(value).lower() for value in fields if value)


def _summary_fields(order: dict) -> dict:
    return {key: value for key, value in order.items() if key != "orderDetails"}


def _paginate(rows: list[dict], variables: dict) -> dict:
    """Slice rows into a paginator response for ``first``/``page`` variables."""
    per_page = max(int(variables.get("first") or 1), 1)
    page = max(int(variables.get("page") or 1), 1)
    total = len(rows)
    start = (page - 1) * per_page
    data = rows[start : start + per_page]
    last_page = max((total + per_page - 1) // per_page, 1)
    return {
        "paginatorInfo": {
            "count": len(data),
            "currentPage": page,
            "lastPage": last_page,
            "perPage": per_page,
            "total": total,
            "hasMorePages": page < last_page,
        },
        "data": data,
    }


def _recompute_totals(order: dict) -> None:
    items = order["orderDetails"]
    order["ord_amt"] = round(
        sum(float(item["item_amt"] or 0) * int(item["ord_qty"] or 0) for item in items),
        2,
    )
    order["ord_qty"] = sum(int(item["ord_qty"] or 0) for item in items)
    order["amt_due"] = round(order["ord_amt"] - order["amt_paid"], 2)
