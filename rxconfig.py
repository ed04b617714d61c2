"""Reflex configuration for the Sales Order UI application."""

import reflex as rx

config = rx.Config(
    app_name="order_ui",
    # Use the src directory structure
    app_module_import="order_ui.app",
)
