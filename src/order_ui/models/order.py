"""
Order domain models and serialization helpers.

This module defines the order data structures returned by the sales order
API. The hierarchy is:

    OrderSummary (one row of the paginated order list)
    ├── CustomerRef
    └── StatusRef

    OrderDetail (the single selected order)
    ├── CustomerRef
    ├── StatusRef
    └── LineItem[] (garments with material, schedule, amounts, status)
        ├── MaterialRef
        └── StatusRef

    Payment (one row of an order's payment history)
    └── PaymentMode

All entities are frozen: a refetch replaces them wholesale rather than
patching fields in place. Serialization functions convert them to JSON
compatible dictionaries for the Reflex view models.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Severity labels used by the status tag in the UI
_STATUS_SEVERITY = {
    "Completed": "success",
    "In Progress": "info",
    "Pending": "warning",
    "Cancelled": "danger",
    "Partial": "warning",
    "Unknown": "info",
}


@dataclass(frozen=True, slots=True)
class StatusRef:
    """Reference to an order or line item status."""

    id: str
    status_name: str

    @property
    def severity(self) -> str | None:
        """Return the display severity for this status, if one is defined."""
        return status_severity(self.status_name)


@dataclass(frozen=True, slots=True)
class CustomerRef:
    """The customer an order belongs to."""

    id: str
    first_name: str
    site_code: str = ""


@dataclass(frozen=True, slots=True)
class MaterialRef:
    """The material (fabric/garment master) a line item is made from."""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class OrderSummary:
    """A denormalized order row as shown in the order list."""

    id: str
    docno: str
    customer: CustomerRef | None = None
    order_date: datetime | None = None
    ord_amt: float = 0.0
    amt_paid: float = 0.0
    amt_due: float = 0.0
    ord_qty: int = 0
    delivered_qty: int = 0
    cancelled_qty: int = 0
    tentative_delivery_date: datetime | None = None
    description: str | None = None
    status: StatusRef | None = None

    @property
    def customer_name(self) -> str:
        return self.customer.first_name if self.customer else ""

    @property
    def status_name(self) -> str:
        return self.status.status_name if self.status else "Unknown"


@dataclass(frozen=True, slots=True)
class LineItem:
    """An individual garment on an order."""

    id: str
    order_id: str
    material_master_id: str | None = None
    measurement_main_id: str | None = None
    image_urls: tuple[str, ...] = ()
    trial_date: datetime | None = None
    delivery_date: datetime | None = None
    item_amt: float = 0.0
    ord_qty: int = 0
    delivered_qty: int = 0
    cancelled_qty: int = 0
    description: str | None = None
    ext: str | None = None
    item_ref: str | None = None
    status: StatusRef | None = None
    material: MaterialRef | None = None
    assigned_sites: tuple[str, ...] = ()

    @property
    def material_name(self) -> str:
        return self.material.name if self.material else "Not Available"


@dataclass(frozen=True, slots=True)
class OrderDetail:
    """The full order graph for the selected order."""

    id: str
    docno: str
    customer: CustomerRef | None = None
    order_date: datetime | None = None
    ord_amt: float = 0.0
    amt_paid: float = 0.0
    amt_due: float = 0.0
    ord_qty: int = 0
    delivered_qty: int = 0
    cancelled_qty: int = 0
    tentative_delivery_date: datetime | None = None
    delivery_date: datetime | None = None
    description: str | None = None
    ext: str | None = None
    status: StatusRef | None = None
    line_items: tuple[LineItem, ...] = ()

    @property
    def customer_name(self) -> str:
        return self.customer.first_name if self.customer else ""

    @property
    def first_trial_date(self) -> datetime | None:
        """Return the trial date of the first line item that has one."""
        return next(
            (item.trial_date for item in self.line_items if item.trial_date), None
        )

    def line_item(self, line_item_id: str) -> LineItem | None:
        """Return the line item with the given id, if present."""
        return next((item for item in self.line_items if item.id == line_item_id), None)


@dataclass(frozen=True, slots=True)
class PaymentMode:
    """A payment method offered by the payment form (cash, card, UPI...)."""

    id: str
    mode_name: str


@dataclass(frozen=True, slots=True)
class Payment:
    """A payment received against an order."""

    id: str
    payment_amt: float
    payment_date: datetime | None = None
    docno: str = ""
    site_code: str = ""
    payment_ref: str | None = None
    payment_type: str | None = None
    mode: PaymentMode | None = None

    @property
    def mode_name(self) -> str:
        if self.mode:
            return self.mode.mode_name
        return self.payment_type or "Unknown"


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """
    A single page of a paginated collection.

    ``has_more`` is copied from the server's ``hasMorePages`` and is never
    derived from item counts on the client.
    """

    items: tuple[T, ...]
    current_page: int
    per_page: int
    total: int
    has_more: bool


ORDER_STATUSES: tuple[StatusRef, ...] = (
    StatusRef(id="1", status_name="Pending"),
    StatusRef(id="2", status_name="In Progress"),
    StatusRef(id="5", status_name="Ready for Trial"),
    StatusRef(id="3", status_name="Completed"),
    StatusRef(id="4", status_name="Cancelled"),
)


def find_status(status_id: int | str) -> StatusRef | None:
    """Return the catalog status with the given id."""
    key = str(status_id)
    return next((status for status in ORDER_STATUSES if status.id == key), None)


def status_severity(status_name: str | None) -> str | None:
    """Map a status name onto a display severity."""
    return _STATUS_SEVERITY.get(status_name or "")


def serialize_order_summary(order: OrderSummary) -> dict:
    """Convert an OrderSummary into a JSON serializable dictionary."""
    return _iso_dates(asdict(order))


def serialize_order_detail(order: OrderDetail) -> dict:
    """Convert an OrderDetail into a JSON serializable dictionary."""
    return _iso_dates(asdict(order))


def serialize_payment(payment: Payment) -> dict:
    """Convert a Payment into a JSON serializable dictionary."""
    return _iso_dates(asdict(payment))


def _iso_dates(value: Any) -> Any:
    """Recursively replace datetimes with ISO strings and tuples with lists."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _iso_dates(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_iso_dates(item) for item in value]
    return value
