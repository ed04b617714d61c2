"""
Reflex application entry point for the Sales Order UI.

This module initializes the Reflex app and defines the main page layout:
search and the infinite order list on the left, the selected order on the
right.
"""

import contextlib

import reflex as rx

from order_ui.components import order_detail, order_results, search_panel
from order_ui.config import settings
from order_ui.lib import logs
from order_ui.services import get_order_gateway
from order_ui.state import APP_SUBTITLE, APP_TITLE, OrderState, close_workspaces

LOG = logs.logger(__file__)

LOG.info(
    "Order service: %s (page size %s)", settings().service, settings().page_size
)

# Font URLs for theming
_FONT_URL_GENERIC = "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&family=Fira+Code:wght@400;500&display=swap"
_FONT_URL_BRANDED = "https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500&family=Source+Sans+3:ital,wght@0,300;0,400;0,500;0,600;0,700;1,400&display=swap"
_FONT_URL = _FONT_URL_GENERIC if settings().generic_branding else _FONT_URL_BRANDED


def page_header() -> rx.Component:
    """Build the hero text area at the top of the page."""
    return rx.box(
        rx.heading(APP_TITLE, size="6", as_="h1"),
        rx.text(APP_SUBTITLE, class_name="muted"),
        class_name="page-header",
    )


def index() -> rx.Component:
    """
    Build the main page layout.

    Returns:
        The complete page component with header, search, list and detail.
    """
    return rx.box(
        rx.box(
            page_header(),
            rx.box(
                rx.box(
                    search_panel(),
                    order_results(),
                    class_name="list-column",
                ),
                order_detail(),
                class_name="workspace",
            ),
            class_name="app-container",
        ),
        class_name="app-shell",
    )


# Create the Reflex app
app = rx.App(
    theme=rx.theme(
        appearance="light",
        has_background=True,
        radius="large",
    ),
    stylesheets=[
        _FONT_URL,
        "/styles.css",
    ],
)

# Add the index page
app.add_page(
    index,
    title=APP_TITLE,
    on_load=OrderState.on_load,
)


@contextlib.asynccontextmanager
async def close_sessions():
    """Close every session and the gateway when the server stops."""
    yield
    LOG.info("Shutting down - closing sessions")
    close_workspaces()
    await get_order_gateway().aclose()


app.register_lifespan_task(close_sessions)


def main() -> None:
    """Entrypoint used by `order-ui`; in production use `reflex run`."""
    import subprocess
    import sys

    subprocess.run(
        [sys.executable, "-m", "reflex", "run", "--port", str(settings().app_port)]
    )


if __name__ == "__main__":
    main()
