"""
Order list component.

Renders the paginated order list inside the infinite scroll container,
plus the loading and empty states. Clicking a row selects the order.
"""

import reflex as rx

from order_ui.components.infinite_scroll import infinite_list
from order_ui.models.reflex_models import OrderRowModel
from order_ui.state import OrderState


def order_results() -> rx.Component:
    """
    Build the order results container.

    Returns:
        The results container component.
    """
    return rx.box(
        rx.cond(
            OrderState.is_empty,
            _empty(),
            _results(),
        ),
        id="results-container",
        class_name="results-pane",
    )


def _results() -> rx.Component:
    return rx.box(
        rx.box(
            rx.text(OrderState.result_summary, class_name="muted"),
            class_name="results-summary",
        ),
        infinite_list(
            rx.foreach(OrderState.orders, order_row),
            data_length=OrderState.orders.length(),
            on_near_end=OrderState.load_more,
            has_more=OrderState.has_more,
            container_id="results-container",
        ),
        class_name="results",
    )


def order_row(order: OrderRowModel) -> rx.Component:
    """Build one clickable order row."""
    return rx.box(
        rx.box(
            rx.text(order.docno, class_name="order-number mono"),
            rx.text(order.customer_name, class_name="value"),
            class_name="order-row-main",
        ),
        rx.box(
            _info("Ordered", order.order_date),
            _info("Delivery", order.delivery_date),
            _info("Amount", order.ord_amt),
            _info("Due", order.amt_due),
            class_name="order-row-grid",
        ),
        rx.badge(order.status_name, class_name=f"status-tag {order.severity}"),
        on_click=OrderState.select_order(order.id),
        class_name=rx.cond(
            OrderState.selected_id == order.id,
            "card order-row selected",
            "card order-row",
        ),
        key=order.id,
    )


def _info(label: str, value: str) -> rx.Component:
    return rx.box(
        rx.text(label, class_name="label"),
        rx.text(value, class_name="value"),
        class_name="info-block",
    )


def _empty() -> rx.Component:
    """Build the empty state when no orders match."""
    return rx.box(
        rx.icon("package-x", class_name="empty-icon", size=60),
        rx.heading("No orders found", size="3", as_="h3"),
        rx.cond(
            OrderState.query != "",
            rx.text(
                rx.text.span('No results match "'),
                rx.text.span(OrderState.query),
                rx.text.span('". Try a different search term.'),
                class_name="muted",
            ),
            rx.text("No orders available.", class_name="muted"),
        ),
        class_name="card empty-state",
    )

