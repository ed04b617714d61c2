"""
Reflex-compatible models for the Sales Order UI.

These models extend rx.Base so they can be used with rx.foreach and
other Reflex reactive components. Display strings (dates, currency) are
formatted here because Reflex vars cannot call Python helpers at render time.
"""

import reflex as rx

from order_ui.models.order import ORDER_STATUSES, status_severity
from order_ui.utils import format_currency, format_date, parse_date


class OrderRowModel(rx.Base):
    """One row of the order list."""

    id: str = ""
    docno: str = ""
    customer_name: str = ""
    order_date: str = ""
    delivery_date: str = ""
    ord_amt: str = ""
    amt_due: str = ""
    ord_qty: int = 0
    status_name: str = "Unknown"
    severity: str = "info"
    description: str = ""


class LineItemModel(rx.Base):
    """Individual garment on the selected order."""

    id: str = ""
    order_id: str = ""
    material_master_id: str = ""
    measurement_main_id: str = ""
    material_name: str = ""
    item_ref: str = ""
    trial_date: str = ""
    trial_date_value: str = ""
    delivery_date: str = ""
    delivery_date_value: str = ""
    item_amt: float = 0.0
    item_amt_display: str = ""
    ord_qty: int = 0
    description: str = ""
    status_id: str = ""
    status_name: str = "Unknown"
    severity: str = "info"
    assigned_sites: list[str] = []
    image_urls: list[str] = []


class OrderDetailModel(rx.Base):
    """The selected order."""

    id: str = ""
    docno: str = ""
    customer_name: str = ""
    site_code: str = ""
    order_date: str = ""
    tentative_delivery_date: str = ""
    first_trial_date: str = ""
    ord_amt: str = ""
    amt_paid: str = ""
    amt_due: str = ""
    amt_due_value: float = 0.0
    ord_qty: int = 0
    delivered_qty: int = 0
    cancelled_qty: int = 0
    open_qty: int = 0
    description: str = ""
    status_name: str = "Unknown"
    severity: str = "info"
    line_items: list[LineItemModel] = []


class PaymentModel(rx.Base):
    """One payment in the order's payment history."""

    id: str = ""
    docno: str = ""
    payment_date: str = ""
    payment_amt: str = ""
    mode_name: str = ""
    payment_ref: str = ""


class OptionModel(rx.Base):
    """A value/label pair for select inputs."""

    value: str = ""
    label: str = ""


def _display_date(value: str | None, empty: str = "Not scheduled") -> str:
    return format_date(parse_date(value), empty)


def _input_date(value: str | None) -> str:
    parsed = parse_date(value)
    return parsed.strftime("%Y-%m-%d") if parsed else ""


def _status_fields(status: dict | None) -> dict:
    name = (status or {}).get("status_name") or "Unknown"
    return {
        "status_name": name,
        "severity": status_severity(name) or "info",
    }


def dict_to_order_row(data: dict) -> OrderRowModel:
    """
    Convert a serialized order summary to an OrderRowModel.

    Args:
        data: Output of ``serialize_order_summary``.
    """
    customer = data.get("customer") or {}
    return OrderRowModel(
        id=data.get("id", ""),
        docno=data.get("docno", ""),
        customer_name=customer.get("first_name", ""),
        order_date=_display_date(data.get("order_date"), ""),
        delivery_date=_display_date(data.get("tentative_delivery_date")),
        ord_amt=format_currency(data.get("ord_amt") or 0.0),
        amt_due=format_currency(data.get("amt_due") or 0.0),
        ord_qty=data.get("ord_qty") or 0,
        description=data.get("description") or "",
        **_status_fields(data.get("status")),
    )


def dict_to_line_item(data: dict) -> LineItemModel:
    """Convert a serialized line item to a LineItemModel."""
    status = data.get("status") or {}
    material = data.get("material") or {}
    return LineItemModel(
        id=data.get("id", ""),
        order_id=data.get("order_id", ""),
        material_master_id=data.get("material_master_id") or "",
        measurement_main_id=data.get("measurement_main_id") or "",
        material_name=material.get("name") or "Not Available",
        item_ref=data.get("item_ref") or "",
        trial_date=_display_date(data.get("trial_date")),
        trial_date_value=_input_date(data.get("trial_date")),
        delivery_date=_display_date(data.get("delivery_date")),
        delivery_date_value=_input_date(data.get("delivery_date")),
        item_amt=data.get("item_amt") or 0.0,
        item_amt_display=format_currency(data.get("item_amt") or 0.0),
        ord_qty=data.get("ord_qty") or 0,
        description=data.get("description") or "",
        status_id=status.get("id", ""),
        assigned_sites=data.get("assigned_sites", []),
        image_urls=data.get("image_urls", []),
        **_status_fields(status),
    )


def dict_to_order_detail(data: dict) -> OrderDetailModel:
    """
    Convert a serialized order detail to an OrderDetailModel.

    Args:
        data: Output of ``serialize_order_detail``.
    """
    customer = data.get("customer") or {}
    line_items = data.get("line_items", [])
    first_trial = next(
        (item.get("trial_date") for item in line_items if item.get("trial_date")), None
    )
    ord_qty = data.get("ord_qty") or 0
    delivered_qty = data.get("delivered_qty") or 0
    cancelled_qty = data.get("cancelled_qty") or 0
    return OrderDetailModel(
        id=data.get("id", ""),
        docno=data.get("docno", ""),
        customer_name=customer.get("first_name", ""),
        site_code=customer.get("site_code", ""),
        order_date=_display_date(data.get("order_date"), ""),
        tentative_delivery_date=_display_date(data.get("tentative_delivery_date")),
        first_trial_date=_display_date(first_trial),
        ord_amt=format_currency(data.get("ord_amt") or 0.0),
        amt_paid=format_currency(data.get("amt_paid") or 0.0),
        amt_due=format_currency(data.get("amt_due") or 0.0),
        amt_due_value=data.get("amt_due") or 0.0,
        ord_qty=ord_qty,
        delivered_qty=delivered_qty,
        cancelled_qty=cancelled_qty,
        open_qty=max(ord_qty - delivered_qty - cancelled_qty, 0),
        description=data.get("description") or "",
        line_items=[dict_to_line_item(item) for item in line_items],
        **_status_fields(data.get("status")),
    )


def dict_to_payment(data: dict) -> PaymentModel:
    """Convert a serialized payment to a PaymentModel."""
    mode = data.get("mode") or {}
    return PaymentModel(
        id=data.get("id", ""),
        docno=data.get("docno", ""),
        payment_date=_display_date(data.get("payment_date"), ""),
        payment_amt=format_currency(data.get("payment_amt") or 0.0),
        mode_name=mode.get("mode_name") or data.get("payment_type") or "Unknown",
        payment_ref=data.get("payment_ref") or "",
    )


def status_options() -> list[OptionModel]:
    """Return the status catalog as select options."""
    return [OptionModel(value=status.id, label=status.status_name) for status in ORDER_STATUSES]
