import asyncio

from order_ui.data.demo_orders import DEMO_ORDER_COUNT
from order_ui.services import operations as ops
from order_ui.workspace import OrderWorkspace, WorkspaceRegistry


def _workspace(service, **kwargs):
    options = {"page_size": 20, "payment_page_size": 5, "search_delay": 0.01}
    options.update(kwargs)
    return OrderWorkspace(service, **options)


def _list_calls(gateway):
    return [variables for operation, variables in gateway.calls if operation == ops.LIST_ORDERS]


class TestInfiniteScroll:
    def test_pages_until_server_reports_end(self, demo_service, demo_gateway):
        async def scenario():
            workspace = _workspace(demo_service)
            assert await workspace.start()
            assert len(workspace.orders.items) == 20
            assert workspace.orders.snapshot.has_more

            assert await workspace.orders.load_next()
            assert len(workspace.orders.items) == 40
            assert await workspace.orders.load_next()
            assert len(workspace.orders.items) == DEMO_ORDER_COUNT
            assert not workspace.orders.snapshot.has_more
            assert workspace.orders.pagination.current_page == 3

            assert await workspace.orders.load_next() is False
            assert [call["page"] for call in _list_calls(demo_gateway)] == [1, 2, 3]

        asyncio.run(scenario())

    def test_viewport_crossing_loads_next_page(self, demo_service):
        async def scenario():
            workspace = _workspace(demo_service)
            await workspace.start()
            last = workspace.orders.items[-1].id
            workspace.viewport.bind(last).crossed()
            await workspace.viewport.settled()
            assert len(workspace.orders.items) == 40

            # repeated reports from the same crossing do nothing
            workspace.viewport.sensor.report(True)
            await workspace.viewport.settled()
            assert len(workspace.orders.items) == 40

        asyncio.run(scenario())


class TestSearch:
    def test_typing_commits_once_and_resets(self, demo_service, demo_gateway):
        async def scenario():
            workspace = _workspace(demo_service)
            await workspace.start()
            await workspace.orders.load_next()
            await workspace.orders.load_next()
            assert workspace.orders.pagination.current_page == 3

            for text in ("j", "jo", "joh", "john"):
                workspace.type_search(text)
            await workspace.search.settled()

            searches = [call["search"] for call in _list_calls(demo_gateway)]
            assert searches == [None, None, None, "john"]
            assert workspace.orders.pagination.current_page == 1
            assert workspace.orders.snapshot.term == "john"
            assert {order.customer_name for order in workspace.orders.items} == {"John", "Johnny"}

        asyncio.run(scenario())

    def test_failed_search_is_retried_on_enter(self, demo_service, demo_gateway):
        async def scenario():
            workspace = _workspace(demo_service)
            await workspace.start()
            demo_gateway.fail_next(ops.LIST_ORDERS)
            workspace.type_search("john")
            await workspace.search.settled()
            assert workspace.orders.snapshot.error == "Service unavailable"
            assert workspace.orders.snapshot.term == ""

            assert await workspace.search.flush() is True
            assert workspace.orders.snapshot.term == "john"
            assert workspace.orders.snapshot.error is None
            assert {order.customer_name for order in workspace.orders.items} == {"John", "Johnny"}

        asyncio.run(scenario())


class TestSelection:
    def test_select_loads_detail_and_payments(self, demo_service):
        async def scenario():
            workspace = _workspace(demo_service)
            await workspace.start()
            assert await workspace.select("1056")

            assert workspace.selected_id == "1056"
            assert workspace.detail.detail.docno == "SO-1056"
            assert len(workspace.detail.detail.line_items) == 2
            assert [payment.payment_type for payment in workspace.payments.items] == ["Advance"]

            workspace.deselect()
            assert workspace.detail.detail is None
            assert workspace.payments.items == ()

        asyncio.run(scenario())

    def test_rapid_selection_shows_last_order(self, demo_service):
        async def scenario():
            workspace = _workspace(demo_service)
            first = asyncio.create_task(workspace.select("1057"))
            second = asyncio.create_task(workspace.select("1056"))
            results = await asyncio.gather(first, second)

            assert results[1] is True
            assert workspace.detail.detail.id == "1056"

        asyncio.run(scenario())

    def test_unknown_order_shows_nothing(self, demo_service):
        async def scenario():
            workspace = _workspace(demo_service)
            assert await workspace.select("9999") is False
            assert workspace.detail.detail is None
            assert workspace.detail.snapshot.error == "Order details are missing from the response"

        asyncio.run(scenario())


class TestPaymentModes:
    def test_modes_are_fetched_once(self, demo_service, demo_gateway):
        async def scenario():
            workspace = _workspace(demo_service)
            modes = await workspace.load_payment_modes()
            again = await workspace.load_payment_modes()
            assert [mode.mode_name for mode in modes] == ["Cash", "Card", "UPI", "Bank Transfer"]
            assert again is modes
            assert [op for op, _ in demo_gateway.calls] == [ops.LIST_PAYMENT_MODES]

        asyncio.run(scenario())

    def test_failure_returns_empty_and_retries_later(self, demo_service, demo_gateway):
        async def scenario():
            workspace = _workspace(demo_service)
            demo_gateway.fail_next(ops.LIST_PAYMENT_MODES)
            assert await workspace.load_payment_modes() == ()
            assert len(await workspace.load_payment_modes()) == 4

        asyncio.run(scenario())


class TestTeardown:
    def test_close_discards_in_flight_responses(self, demo_service):
        async def scenario():
            workspace = _workspace(demo_service)
            start = asyncio.create_task(workspace.start())
            select = asyncio.create_task(workspace.select("1057"))
            await asyncio.sleep(0)
            workspace.close()

            assert await start is False
            assert await select is False
            assert workspace.orders.items == ()
            assert workspace.detail.detail is None
            assert workspace.viewport.sensor is None

        asyncio.run(scenario())


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestWorkspaceRegistry:
    def test_same_client_gets_same_workspace(self, demo_service):
        registry = WorkspaceRegistry(lambda: _workspace(demo_service), idle_timeout=60)
        assert registry.get("a") is registry.get("a")
        assert registry.get("a") is not registry.get("b")
        assert len(registry) == 2

    def test_idle_sessions_are_closed(self, demo_service):
        async def scenario():
            clock = FakeClock()
            registry = WorkspaceRegistry(
                lambda: _workspace(demo_service), idle_timeout=60, clock=clock
            )
            idle = registry.get("idle")
            await idle.start()
            idle.viewport.bind(idle.orders.items[-1].id)
            idle.type_search("john")

            clock.now = 30
            active = registry.get("active")
            clock.now = 61
            assert registry.get("active") is active

            assert "idle" not in registry
            assert idle.orders.closed
            assert idle.viewport.sensor is None
            assert not idle.search.pending
            assert not active.orders.closed

            clock.now = 200
            fresh = registry.get("idle")
            assert fresh is not idle
            assert "active" not in registry
            assert active.orders.closed

        asyncio.run(scenario())

    def test_close_all_tears_down_every_session(self, demo_service):
        async def scenario():
            registry = WorkspaceRegistry(lambda: _workspace(demo_service), idle_timeout=60)
            first, second = registry.get("a"), registry.get("b")
            pending = asyncio.create_task(first.start())
            await asyncio.sleep(0)

            registry.close_all()

            assert await pending is False
            assert first.orders.items == ()
            assert first.orders.closed and second.orders.closed
            assert len(registry) == 0
            assert registry.evict("a") is False

        asyncio.run(scenario())
