"""
Data models and serialization helpers for the Sales Order UI.

This package provides:
- Order domain models (OrderSummary, OrderDetail, LineItem, Payment, etc.)
- Engine snapshots (ListSnapshot, DetailSnapshot, PaginationState)
- Mutation inputs (LineItemEdit, PaymentCapture)
- Serialization helpers for the Reflex view models

All models use Python dataclasses for type safety and IDE support.
"""

from order_ui.models.common import (
    DetailPhase,
    DetailSnapshot,
    ListPhase,
    ListSnapshot,
    PaginationState,
)
from order_ui.models.inputs import LineItemEdit, PaymentCapture
from order_ui.models.order import (
    ORDER_STATUSES,
    CustomerRef,
    LineItem,
    MaterialRef,
    OrderDetail,
    OrderSummary,
    Page,
    Payment,
    PaymentMode,
    StatusRef,
    find_status,
    serialize_order_detail,
    serialize_order_summary,
    serialize_payment,
    status_severity,
)

__all__ = [
    "CustomerRef",
    "DetailPhase",
    "DetailSnapshot",
    "LineItem",
    "LineItemEdit",
    "ListPhase",
    "ListSnapshot",
    "MaterialRef",
    "ORDER_STATUSES",
    "OrderDetail",
    "OrderSummary",
    "Page",
    "PaginationState",
    "Payment",
    "PaymentCapture",
    "PaymentMode",
    "StatusRef",
    "find_status",
    "serialize_order_detail",
    "serialize_order_summary",
    "serialize_payment",
    "status_severity",
]
