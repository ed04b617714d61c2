"""
Service factory for the Sales Order UI.

This module provides the get_order_gateway() and get_order_service() factory
functions that return the configured transport and its typed wrapper.

Available Gateways:
- demo: In-memory order book (no backend required)
- graphql: Live GraphQL endpoint over HTTP

Gateways are cached at the module level, so the same instance is reused
across sessions. Configure via the ORDER_UI_SERVICE environment variable.
"""

from functools import cache
from typing import Callable, Dict

from order_ui.config import settings
from order_ui.lib import logs
from order_ui.services.demo_gateway import DemoGateway
from order_ui.services.gateway import OrderGateway
from order_ui.services.graphql_gateway import GraphQLGateway
from order_ui.services.order_service import SalesOrderService

LOG = logs.logger(__file__)

_GATEWAY_REGISTRY: Dict[str, Callable[[], OrderGateway]] = {
    "demo": lambda: DemoGateway(latency=settings().demo_latency),
    "graphql": lambda: GraphQLGateway(),
}


@cache
def get_order_gateway(kind: str | None = None) -> OrderGateway:
    """Return the configured order gateway implementation."""
    resolved_kind = (kind or settings().service).lower()
    LOG.info("get_order_gateway - kind:%s resolved_kind:%s", kind, resolved_kind)
    try:
        factory = _GATEWAY_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown order gateway kind: {resolved_kind}"
        raise ValueError(msg) from exc
    return factory()


def get_order_service(kind: str | None = None) -> SalesOrderService:
    """Return a SalesOrderService over the configured gateway."""
    return SalesOrderService(get_order_gateway(kind))


__all__ = [
    "DemoGateway",
    "GraphQLGateway",
    "OrderGateway",
    "SalesOrderService",
    "get_order_gateway",
    "get_order_service",
]
