"""
Typed sales order service on top of an OrderGateway.

This module turns the gateway's ``execute(operation, variables)`` contract
into typed calls:

- Builds operation variables (``first``/``page``/``search``, ``id``/``input``)
- Parses wire payloads into frozen dataclasses
- Raises TransportError for missing or malformed payloads

Nested payloads are read with benedict keypaths so absent or null branches
fall back to defaults instead of raising KeyError.
"""

from typing import Any, Callable, TypeVar

from benedict import benedict

from order_ui.errors import TransportError
from order_ui.lib import logs
from order_ui.models.inputs import LineItemEdit, PaymentCapture
from order_ui.models.order import (
    CustomerRef,
    LineItem,
    MaterialRef,
    OrderDetail,
    OrderSummary,
    Page,
    Payment,
    PaymentMode,
    StatusRef,
)
from order_ui.services import operations as ops
from order_ui.services.gateway import OrderGateway
from order_ui.utils import parse_date

LOG = logs.logger(__file__)

T = TypeVar("T")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def _status(value: Any) -> StatusRef | None:
    if not value:
        return None
    return StatusRef(id=_text(value.get("id")), status_name=_text(value.get("status_name")))


def _customer(value: Any) -> CustomerRef | None:
    if not value:
        return None
    return CustomerRef(
        id=_text(value.get("id")),
        first_name=_text(value.get("fname")),
        site_code=_text(value.get("admsite_code")),
    )


def _parse_summary(b: benedict) -> OrderSummary:
    """Parse one ``orderMains.data`` row."""
    return OrderSummary(
        id=_text(b["id"]),
        docno=_text(b.get("docno")),
        customer=_customer(b.get("user")),
        order_date=parse_date(b.get("order_date")),
        ord_amt=float(b.get("ord_amt") or 0),
        amt_paid=float(b.get("amt_paid") or 0),
        amt_due=float(b.get("amt_due") or 0),
        ord_qty=int(b.get("ord_qty") or 0),
        delivered_qty=int(b.get("delivered_qty") or 0),
        cancelled_qty=int(b.get("cancelled_qty") or 0),
        tentative_delivery_date=parse_date(b.get("tentitive_delivery_date")),
        description=_optional_text(b.get("desc1")),
        status=_status(b.get("orderStatus")),
    )


def _parse_line_item(li: Any) -> LineItem:
    """Parse one ``orderDetails`` entry."""
    material = li.get("material")
    sites = [
        (job.get("adminSite") or {}).get("sitename")
        for job in li.get("jobOrderDetails") or []
    ]
    return LineItem(
        id=_text(li["id"]),
        order_id=_text(li.get("order_id")),
        material_master_id=_optional_text(li.get("material_master_id")),
        measurement_main_id=_optional_text(li.get("measurement_main_id")),
        image_urls=tuple(li.get("image_url") or ()),
        trial_date=parse_date(li.get("trial_date")),
        delivery_date=parse_date(li.get("delivery_date")),
        item_amt=float(li.get("item_amt") or 0),
        ord_qty=int(li.get("ord_qty") or 0),
        delivered_qty=int(li.get("delivered_qty") or 0),
        cancelled_qty=int(li.get("cancelled_qty") or 0),
        description=_optional_text(li.get("desc1")),
        ext=_optional_text(li.get("ext")),
        item_ref=_optional_text(li.get("item_ref")),
        status=_status(li.get("orderStatus")),
        material=(
            MaterialRef(id=_text(material.get("id")), name=_text(material.get("name")))
            if material
            else None
        ),
        assigned_sites=tuple(site for site in sites if site),
    )


def _parse_detail(b: benedict) -> OrderDetail:
    """Parse an ``orderMain`` payload including its line items."""
    return OrderDetail(
        id=_text(b["id"]),
        docno=_text(b.get("docno")),
        customer=_customer(b.get("user")),
        order_date=parse_date(b.get("order_date")),
        ord_amt=float(b.get("ord_amt") or 0),
        amt_paid=float(b.get("amt_paid") or 0),
        amt_due=float(b.get("amt_due") or 0),
        ord_qty=int(b.get("ord_qty") or 0),
        delivered_qty=int(b.get("delivered_qty") or 0),
        cancelled_qty=int(b.get("cancelled_qty") or 0),
        tentative_delivery_date=parse_date(b.get("tentitive_delivery_date")),
        delivery_date=parse_date(b.get("delivery_date")),
        description=_optional_text(b.get("desc1")),
        ext=_optional_text(b.get("ext")),
        status=_status(b.get("orderStatus")),
        line_items=tuple(_parse_line_item(li) for li in b.get("orderDetails") or []),
    )


def _parse_payment(b: benedict) -> Payment:
    """Parse one ``getOrderInfoByOrderId.data`` row."""
    mode = b.get("paymentMode")
    return Payment(
        id=_text(b["id"]),
        payment_amt=float(b.get("payment_amt") or 0),
        payment_date=parse_date(b.get("payment_date")),
        docno=_text(b.get("docno")),
        site_code=_text(b.get("admsite_code")),
        payment_ref=_optional_text(b.get("payment_ref")),
        payment_type=_optional_text(b.get("payment_type")),
        mode=(
            PaymentMode(id=_text(mode.get("id")), mode_name=_text(mode.get("mode_name")))
            if mode
            else None
        ),
    )


class SalesOrderService:
    """
    Typed access to the sales order API.

    Every method performs exactly one gateway round-trip and either returns
    parsed data or raises TransportError.
    """

    def __init__(self, gateway: OrderGateway) -> None:
        self.gateway = gateway

    async def list_orders(
        self, page: int = 1, page_size: int = 20, search: str | None = None
    ) -> Page[OrderSummary]:
        """
        Return one page of order summaries.

        Args:
            page: Page number (1-indexed).
            page_size: Number of orders per page.
            search: Optional free-text filter.
        """
        data = await self._execute(
            ops.LIST_ORDERS,
            {"first": page_size, "page": page, "search": search or None},
        )
        return self._parse_page(ops.LIST_ORDERS, data, _parse_summary)

    async def get_order(self, order_id: str) -> OrderDetail:
        """
        Return the full order graph.

        Raises:
            TransportError: When the order or its line items are missing.
        """
        data = await self._execute(ops.GET_ORDER, {"id": order_id})
        payload = data.get(ops.GET_ORDER)
        if not payload or payload.get("orderDetails") is None:
            raise TransportError(
                "Order details are missing from the response", operation=ops.GET_ORDER
            )
        return self._parse(ops.GET_ORDER, lambda: _parse_detail(benedict(payload)))

    async def update_line_item(self, line_item_id: str, edit: LineItemEdit) -> str:
        """Save the editable fields of a line item. Returns the line item id."""
        return await self._mutate(
            ops.UPDATE_LINE_ITEM, {"id": line_item_id, "input": edit.to_input()}
        )

    async def update_line_item_status(self, line_item_id: str, status_id: int) -> str:
        """Move a line item to another status. Returns the line item id."""
        return await self._mutate(
            ops.UPDATE_LINE_ITEM_STATUS,
            {"id": line_item_id, "input": {"status_id": int(status_id)}},
        )

    async def capture_payment(self, order_id: str, payment: PaymentCapture) -> str:
        """Record a payment against an order. Returns the payment id."""
        return await self._mutate(
            ops.CAPTURE_PAYMENT, {"id": order_id, "input": payment.to_input()}
        )

    async def mark_delivered(self, order_id: str, delivered_qty: int) -> str:
        """Record delivered pieces on an order. Returns the order id."""
        return await self._mutate(
            ops.MARK_DELIVERED,
            {"id": order_id, "input": {"delivered_qty": delivered_qty}},
        )

    async def mark_cancelled(self, order_id: str, cancelled_qty: int) -> str:
        """Record cancelled pieces on an order. Returns the order id."""
        return await self._mutate(
            ops.MARK_CANCELLED,
            {"id": order_id, "input": {"cancelled_qty": cancelled_qty}},
        )

    async def list_payments(
        self, order_id: str, page: int = 1, page_size: int = 20
    ) -> Page[Payment]:
        """Return one page of an order's payment history."""
        data = await self._execute(
            ops.LIST_PAYMENTS, {"order_id": order_id, "first": page_size, "page": page}
        )
        return self._parse_page(ops.LIST_PAYMENTS, data, _parse_payment)

    async def list_payment_modes(self) -> tuple[PaymentMode, ...]:
        """Return the payment modes offered by the payment form."""
        data = await self._execute(ops.LIST_PAYMENT_MODES, {})
        rows = data.get(ops.LIST_PAYMENT_MODES) or []
        return self._parse(
            ops.LIST_PAYMENT_MODES,
            lambda: tuple(
                PaymentMode(id=_text(row["id"]), mode_name=_text(row.get("mode_name")))
                for row in rows
            ),
        )

    async def _execute(self, operation: str, variables: dict) -> dict:
        data = await self.gateway.execute(operation, variables)
        if not isinstance(data, dict):
            raise TransportError("Order service returned no data", operation=operation)
        return data

    async def _mutate(self, operation: str, variables: dict) -> str:
        data = await self._execute(operation, variables)
        result = data.get(operation)
        if not result or result.get("id") is None:
            raise TransportError(
                "Order service did not confirm the change", operation=operation
            )
        LOG.info("%s confirmed - id:%s", operation, result["id"])
        return _text(result["id"])

    def _parse_page(
        self, operation: str, data: dict, parser: Callable[[benedict], T]
    ) -> Page[T]:
        payload = data.get(operation)
        if not payload:
            raise TransportError("Order service returned no page", operation=operation)

        def build() -> Page[T]:
            b = benedict(payload)
            return Page(
                items=tuple(parser(benedict(row)) for row in b.get("data") or []),
                current_page=int(b.get("paginatorInfo.currentPage") or 1),
                per_page=int(b.get("paginatorInfo.perPage") or 0),
                total=int(b.get("paginatorInfo.total") or 0),
                has_more=bool(b.get("paginatorInfo.hasMorePages")),
            )

        return self._parse(operation, build)

    @staticmethod
    def _parse(operation: str, build: Callable[[], T]) -> T:
        try:
            return build()
        except (KeyError, TypeError, ValueError) as exc:
            LOG.error("Malformed %s response: %s", operation, exc, exc_info=True)
            raise TransportError(
                "Order service returned an unexpected response", operation=operation
            ) from exc
