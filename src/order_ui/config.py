"""
Environment configuration for the Sales Order UI.

All settings are read from environment variables once, when ``settings()``
is first called:

- ORDER_UI_SERVICE: Gateway kind, ``demo`` or ``graphql`` (default demo)
- ORDER_UI_GRAPHQL_URL: GraphQL endpoint for the live gateway
- ORDER_UI_API_TOKEN: Bearer token sent to the GraphQL endpoint
- ORDER_UI_TIMEOUT: HTTP timeout in seconds
- ORDER_UI_PAGE_SIZE: Orders per page
- ORDER_UI_PAYMENT_PAGE_SIZE: Payments per page in the payment history
- ORDER_UI_SEARCH_DEBOUNCE_MS: Quiet period before a search is committed
- ORDER_UI_DEMO_LATENCY_MS: Simulated round-trip delay of the demo gateway
- ORDER_UI_SESSION_IDLE_S: Idle seconds before a browser session is torn down
- APP_PORT: Port for the development server
"""

import functools
import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    service: str = "demo"
    graphql_url: str = "http://localhost:8080/graphql"
    api_token: str | None = None
    timeout: float = 30.0
    page_size: int = 20
    payment_page_size: int = 20
    search_debounce: float = 1.0
    demo_latency: float = 0.0
    session_idle_timeout: float = 1800.0
    app_port: int = 8000
    generic_branding: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            service=os.getenv("ORDER_UI_SERVICE", "demo").lower(),
            graphql_url=os.getenv("ORDER_UI_GRAPHQL_URL", cls.graphql_url),
            api_token=os.getenv("ORDER_UI_API_TOKEN") or None,
            timeout=float(os.getenv("ORDER_UI_TIMEOUT", str(cls.timeout))),
            page_size=_int_env("ORDER_UI_PAGE_SIZE", cls.page_size, 1),
            payment_page_size=_int_env(
                "ORDER_UI_PAYMENT_PAGE_SIZE", cls.payment_page_size, 1
            ),
            search_debounce=_int_env("ORDER_UI_SEARCH_DEBOUNCE_MS", 1000) / 1000,
            demo_latency=_int_env("ORDER_UI_DEMO_LATENCY_MS", 0) / 1000,
            session_idle_timeout=float(
                _int_env("ORDER_UI_SESSION_IDLE_S", int(cls.session_idle_timeout), 1)
            ),
            app_port=_int_env("APP_PORT", cls.app_port),
            generic_branding=os.getenv("ORDER_UI_GENERIC", "false").lower()
            in _TRUE_VALUES,
        )


def _int_env(key: str, default: int, minimum: int = 0) -> int:
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return max(int(value), minimum)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


@functools.cache
def settings() -> Settings:
    """Return the process-wide settings."""
    return Settings.from_env()
