"""
Scroll-driven paging for long lists.

InfiniteScroll wraps react-infinite-scroll-component: it calls ``next``
when the last rendered row comes within ``scroll_threshold`` of the bottom
of ``scrollable_target``. The handler forwards that crossing to the
viewport trigger, which decides whether a page is actually fetched.
"""

import reflex as rx


class InfiniteScroll(rx.NoSSRComponent):
    """Wrapper for react-infinite-scroll-component."""

    library = "react-infinite-scroll-component"
    tag = "InfiniteScroll"
    is_default = True

    data_length: int
    next: rx.EventHandler
    has_more: bool

    loader: rx.Component | None = None
    end_message: rx.Component | None = None
    scrollable_target: str | None = None
    scroll_threshold: str | None = None


def infinite_list(
    rows: rx.Component,
    data_length,
    on_near_end,
    has_more,
    container_id: str,
    noun: str = "orders",
) -> rx.Component:
    """
    Build a paged list inside the scroll container ``container_id``.

    Args:
        rows: The rendered rows, usually an ``rx.foreach``.
        data_length: Var holding the number of resident rows.
        on_near_end: Event fired when the end of the list scrolls into view.
        has_more: Var holding the server's has-more flag.
        container_id: Id of the element that scrolls.
        noun: Plural name of the rows for the loading and end messages.
    """
    return InfiniteScroll.create(
        rows,
        data_length=data_length,
        next=on_near_end,
        has_more=has_more,
        loader=rx.box(
            rx.box(class_name="spinner"),
            rx.text(f"Loading {noun}...", class_name="muted"),
            class_name="loading-state",
        ),
        end_message=rx.box(
            rx.text(f"All {noun} loaded", class_name="muted"),
            class_name="end-message",
        ),
        scrollable_target=container_id,
        scroll_threshold="200px",
    )
