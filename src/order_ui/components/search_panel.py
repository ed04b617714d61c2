"""
Search panel component for the Sales Order UI.

Every keystroke is sent to OrderState.search; the workspace debouncer
decides when the list is actually reloaded. Enter commits immediately.
"""

import reflex as rx

from order_ui.state import OrderState


def search_panel() -> rx.Component:
    """
    Build the search panel.

    Returns:
        The search panel component.
    """
    return rx.box(
        rx.form(
            rx.box(
                rx.icon("search", class_name="input-icon"),
                rx.input(
                    placeholder="Search by order number, customer, note or status...",
                    value=OrderState.query,
                    on_change=OrderState.search,
                    class_name="search-input",
                ),
                rx.cond(
                    OrderState.is_loading,
                    rx.box(class_name="spinner small"),
                ),
                class_name="input-with-icon",
            ),
            on_submit=OrderState.submit_search,
            reset_on_submit=False,
        ),
        rx.cond(
            OrderState.list_error != "",
            rx.callout(
                OrderState.list_error,
                icon="triangle_alert",
                color_scheme="red",
                size="1",
            ),
        ),
        class_name="card search-card",
    )
