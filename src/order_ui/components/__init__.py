"""Reflex UI components for the Sales Order UI."""

from order_ui.components.order_detail import order_detail
from order_ui.components.order_results import order_results
from order_ui.components.search_panel import search_panel

__all__ = ["order_detail", "order_results", "search_panel"]
