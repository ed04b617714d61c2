"""Shared fixtures for the synchronization engine tests."""

import asyncio
from typing import Any

import pytest

from order_ui.models.order import (
    CustomerRef,
    LineItem,
    OrderDetail,
    OrderSummary,
    Page,
    StatusRef,
)
from order_ui.services import DemoGateway, SalesOrderService
from order_ui.services.gateway import OrderGateway


class ScriptedFetch:
    """
    Coroutine function whose responses are released by the test.

    Each call records its arguments and parks on a future; the test decides
    when (and in which order) calls complete with ``release`` or ``fail``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[tuple, asyncio.Future]] = []

    async def __call__(self, *args: Any) -> Any:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((args, future))
        return await future

    @property
    def args(self) -> list[tuple]:
        return [args for args, _ in self.calls]

    def release(self, index: int, value: Any) -> None:
        self.calls[index][1].set_result(value)

    def fail(self, index: int, exc: Exception) -> None:
        self.calls[index][1].set_exception(exc)


class CannedGateway(OrderGateway):
    """Gateway answering each operation with a fixed payload."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, dict]] = []

    async def execute(self, operation, variables=None):
        self.calls.append((operation, dict(variables or {})))
        return self.responses[operation]


async def drain(rounds: int = 5) -> None:
    """Let every runnable task advance to its next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_summaries(count: int, start: int = 1, prefix: str = "O") -> tuple[OrderSummary, ...]:
    return tuple(
        OrderSummary(
            id=f"{prefix}{index}",
            docno=f"SO-{prefix}{index}",
            customer=CustomerRef(id="11", first_name="John"),
            ord_amt=100.0,
            amt_due=100.0,
            status=StatusRef(id="1", status_name="Pending"),
        )
        for index in range(start, start + count)
    )


def make_page(
    items: tuple, page: int = 1, per_page: int = 20, total: int | None = None, has_more: bool = False
) -> Page:
    return Page(
        items=tuple(items),
        current_page=page,
        per_page=per_page,
        total=len(items) if total is None else total,
        has_more=has_more,
    )


def make_detail(order_id: str, amt_due: float = 500.0) -> OrderDetail:
    return OrderDetail(
        id=order_id,
        docno=f"SO-{order_id}",
        customer=CustomerRef(id="11", first_name="John", site_code="101"),
        ord_amt=500.0,
        amt_due=amt_due,
        ord_qty=1,
        line_items=(
            LineItem(
                id=f"{order_id}-1",
                order_id=order_id,
                material_master_id="201",
                item_amt=500.0,
                ord_qty=1,
            ),
        ),
    )


@pytest.fixture
def scripted() -> ScriptedFetch:
    return ScriptedFetch()


@pytest.fixture
def demo_gateway() -> DemoGateway:
    return DemoGateway()


@pytest.fixture
def demo_service(demo_gateway: DemoGateway) -> SalesOrderService:
    return SalesOrderService(demo_gateway)
