"""
Mutation input models.

These are the form payloads the view layer hands to the mutation
coordinator. Each one knows how to render itself as the ``input`` variable
of its remote mutation; validation lives in the coordinator.
"""

from dataclasses import dataclass
from datetime import date, datetime

from order_ui.models.order import LineItem
from order_ui.utils import format_datetime


def _to_int(value: str | int | None) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class LineItemEdit:
    """Editable scheduling, amount and note fields of a line item."""

    order_id: str | None
    material_master_id: str | None
    measurement_main_id: str | None = None
    trial_date: datetime | None = None
    delivery_date: datetime | None = None
    item_amt: float | None = None
    ord_qty: int | None = None
    description: str | None = None
    site_code: str | None = None

    @classmethod
    def from_line_item(cls, item: LineItem, site_code: str | None = None) -> "LineItemEdit":
        """Prefill an edit form from a resident line item."""
        return cls(
            order_id=item.order_id,
            material_master_id=item.material_master_id,
            measurement_main_id=item.measurement_main_id,
            trial_date=item.trial_date,
            delivery_date=item.delivery_date,
            item_amt=item.item_amt,
            ord_qty=item.ord_qty,
            description=item.description,
            site_code=site_code,
        )

    def to_input(self) -> dict:
        """Render as the ``UpdateOrderDetailInput`` payload."""
        return {
            "order_id": _to_int(self.order_id),
            "measurement_main_id": _to_int(self.measurement_main_id),
            "material_master_id": _to_int(self.material_master_id),
            "trial_date": format_datetime(self.trial_date),
            "delivery_date": format_datetime(self.delivery_date),
            "item_amt": self.item_amt,
            "ord_qty": self.ord_qty,
            "desc1": self.description,
            "admsite_code": self.site_code,
        }


@dataclass(frozen=True)
class PaymentCapture:
    """A payment received at the counter."""

    amount: float
    payment_date: date | datetime | None
    payment_mode_id: str | None
    reference: str = ""

    def to_input(self) -> dict:
        """Render as the ``CreateOrderPaymentInput`` payload."""
        return {
            "payment_amt": self.amount,
            "payment_date": format_datetime(self.payment_date),
            "payment_mode_id": _to_int(self.payment_mode_id),
            "payment_ref": self.reference or None,
        }
