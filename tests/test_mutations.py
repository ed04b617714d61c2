import asyncio
from dataclasses import replace
from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest
from conftest import ScriptedFetch, drain, make_detail, make_page, make_summaries

from order_ui.errors import TransportError, ValidationError
from order_ui.models.inputs import LineItemEdit, PaymentCapture
from order_ui.services import operations as ops
from order_ui.sync.detail_loader import DetailLoader
from order_ui.sync.list_sync import ListSynchronizer
from order_ui.sync.mutations import MutationCoordinator
from order_ui.workspace import OrderWorkspace


def _workspace(service):
    return OrderWorkspace(service, page_size=20, payment_page_size=5, search_delay=0.01)


async def _selected(service, order_id):
    workspace = _workspace(service)
    await workspace.start()
    assert await workspace.select(order_id)
    return workspace


def _calls(gateway, operation):
    return [call for call in gateway.calls if call[0] == operation]


async def _shown(fetch, order_id):
    """A detail loader that already shows ``order_id``."""
    detail = DetailLoader(fetch)
    task = asyncio.create_task(detail.load(order_id))
    await drain()
    fetch.release(len(fetch.calls) - 1, make_detail(order_id))
    assert await task
    return detail


class TestRefreshProtocol:
    def test_saving_clears_only_after_both_refreshes(self):
        async def scenario():
            list_fetch, detail_fetch = ScriptedFetch(), ScriptedFetch()
            orders = ListSynchronizer(list_fetch, page_size=20)
            detail = await _shown(detail_fetch, "O1")
            service = Mock()
            service.update_line_item_status = AsyncMock(return_value="O1-1")
            coordinator = MutationCoordinator(service, detail, orders)
            saving = []
            coordinator.changed.connect(saving.append)

            task = asyncio.create_task(
                coordinator.update_line_item_status("O1", "O1-1", "3")
            )
            await drain()
            assert coordinator.saving
            service.update_line_item_status.assert_awaited_once_with("O1-1", 3)
            assert detail_fetch.args == [("O1",), ("O1",)]
            assert list_fetch.args == [(1, 20, "")]

            detail_fetch.release(1, make_detail("O1"))
            await drain()
            assert coordinator.saving

            list_fetch.release(0, make_page(make_summaries(3)))
            outcome = await task
            assert not coordinator.saving
            assert saving == [True, False]
            assert outcome.detail_refreshed and outcome.list_refreshed
            assert outcome.payments_refreshed is None
            assert outcome.result_id == "O1-1"

        asyncio.run(scenario())

    def test_refreshes_fail_independently(self):
        async def scenario():
            list_fetch, detail_fetch = ScriptedFetch(), ScriptedFetch()
            orders = ListSynchronizer(list_fetch)
            detail = await _shown(detail_fetch, "O1")
            service = Mock()
            service.mark_delivered = AsyncMock(return_value="O1")
            coordinator = MutationCoordinator(service, detail, orders)

            task = asyncio.create_task(coordinator.mark_delivered("O1", 1))
            await drain()
            detail_fetch.fail(1, TransportError("Unable to reach the order service"))
            list_fetch.release(0, make_page(make_summaries(3)))
            outcome = await task

            assert outcome.detail_refreshed is False
            assert outcome.list_refreshed is True
            assert not coordinator.saving

        asyncio.run(scenario())

    def test_payment_refreshes_history(self, demo_service, demo_gateway):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            before = workspace.detail.detail
            assert len(workspace.payments.items) == 0

            outcome = await workspace.mutations.capture_payment(
                "1057",
                PaymentCapture(
                    amount=500.0,
                    payment_date=datetime(2024, 11, 10),
                    payment_mode_id="3",
                    reference="UPI-778",
                ),
            )

            assert outcome.payments_refreshed is True
            assert [payment.payment_ref for payment in workspace.payments.items] == ["UPI-778"]
            assert workspace.payments.items[0].mode_name == "UPI"
            after = workspace.detail.detail
            assert after.amt_paid == before.amt_paid + 500.0
            assert after.amt_due == before.amt_due - 500.0
            variables = _calls(demo_gateway, ops.CAPTURE_PAYMENT)[0][1]
            assert variables["input"] == {
                "payment_amt": 500.0,
                "payment_date": "2024-11-10 00:00:00",
                "payment_mode_id": 3,
                "payment_ref": "UPI-778",
            }

        asyncio.run(scenario())

    def test_status_change_updates_list_and_detail(self, demo_service):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            await workspace.mutations.update_line_item_status("1057", "10570", 3)

            assert workspace.detail.detail.line_items[0].status.status_name == "Completed"
            row = next(order for order in workspace.orders.items if order.id == "1057")
            assert row.status_name == "Completed"

        asyncio.run(scenario())

    def test_line_item_edit_recomputes_order_amount(self, demo_service):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            item = workspace.detail.detail.line_items[0]
            edit = replace(
                LineItemEdit.from_line_item(item, site_code="101"),
                item_amt=2000.0,
                ord_qty=2,
                description="Slim fit",
            )
            await workspace.mutations.update_line_item("1057", item.id, edit)

            detail = workspace.detail.detail
            assert detail.ord_amt == 4000.0
            assert detail.ord_qty == 2
            assert detail.line_items[0].description == "Slim fit"

        asyncio.run(scenario())


class TestSelectionDuringSave:
    def test_newer_selection_is_not_reloaded_over(self):
        async def scenario():
            list_fetch, detail_fetch = ScriptedFetch(), ScriptedFetch()
            orders = ListSynchronizer(list_fetch)
            detail = await _shown(detail_fetch, "O1")
            confirm = asyncio.get_running_loop().create_future()

            async def confirmed(*args):
                return await confirm

            service = Mock()
            service.update_line_item_status = AsyncMock(side_effect=confirmed)
            coordinator = MutationCoordinator(service, detail, orders)

            task = asyncio.create_task(
                coordinator.update_line_item_status("O1", "O1-1", "3")
            )
            await drain()
            select = asyncio.create_task(detail.load("O2"))
            await drain()
            confirm.set_result("O1-1")
            await drain()

            assert detail_fetch.args == [("O1",), ("O2",)]
            detail_fetch.release(1, make_detail("O2"))
            list_fetch.release(0, make_page(make_summaries(3)))
            outcome = await task

            assert await select
            assert detail.requested_id == "O2"
            assert detail.detail.id == "O2"
            assert outcome.detail_refreshed is None
            assert outcome.list_refreshed is True

        asyncio.run(scenario())

    def test_panes_stay_on_order_selected_mid_save(self, demo_service, demo_gateway):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            confirm = asyncio.Event()
            send = demo_service.capture_payment

            async def held(*args):
                await confirm.wait()
                return await send(*args)

            demo_service.capture_payment = held
            task = asyncio.create_task(
                workspace.mutations.capture_payment(
                    "1057", PaymentCapture(100.0, datetime(2024, 11, 10), "1")
                )
            )
            await drain()
            assert await workspace.select("1056")
            fetches = len(_calls(demo_gateway, ops.GET_ORDER))

            confirm.set()
            outcome = await task

            assert outcome.detail_refreshed is None
            assert outcome.payments_refreshed is None
            assert outcome.list_refreshed is True
            assert len(_calls(demo_gateway, ops.GET_ORDER)) == fetches
            assert workspace.selected_id == "1056"
            assert workspace.detail.detail.id == "1056"
            assert workspace.payments.snapshot.term == "1056"
            assert [payment.payment_type for payment in workspace.payments.items] == ["Advance"]

        asyncio.run(scenario())


class TestRejectedMutations:
    def test_remote_failure_leaves_snapshots_unchanged(self, demo_service, demo_gateway):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            errors = Mock()
            workspace.mutations.error_occurred.connect(errors)
            list_before = workspace.orders.snapshot.fingerprint()
            detail_before = workspace.detail.snapshot.fingerprint()
            fetches = len(_calls(demo_gateway, ops.GET_ORDER))

            demo_gateway.fail_next(ops.UPDATE_LINE_ITEM_STATUS, "Status change not allowed")
            with pytest.raises(TransportError, match="Status change not allowed"):
                await workspace.mutations.update_line_item_status("1057", "10570", 3)

            assert workspace.orders.snapshot.fingerprint() == list_before
            assert workspace.detail.snapshot.fingerprint() == detail_before
            assert len(_calls(demo_gateway, ops.GET_ORDER)) == fetches
            assert not workspace.mutations.saving
            errors.assert_called_once_with("Status change not allowed")

        asyncio.run(scenario())

    def test_server_side_quantity_check(self, demo_service):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            with pytest.raises(TransportError, match="remain open"):
                await workspace.mutations.mark_cancelled("1057", 5)

        asyncio.run(scenario())

    @pytest.mark.parametrize(
        "payment, message",
        [
            (PaymentCapture(0, datetime(2024, 11, 10), "1"), "greater than zero"),
            (PaymentCapture(-5, datetime(2024, 11, 10), "1"), "greater than zero"),
            (PaymentCapture(100, datetime(2024, 11, 10), None), "mode is required"),
            (PaymentCapture(100, None, "1"), "date is required"),
            (PaymentCapture(10_000_000, datetime(2024, 11, 10), "1"), "exceeds the amount due"),
        ],
    )
    def test_invalid_payment_is_not_sent(self, demo_service, demo_gateway, payment, message):
        async def scenario():
            workspace = await _selected(demo_service, "1057")
            sent = len(demo_gateway.calls)
            with pytest.raises(ValidationError, match=message):
                await workspace.mutations.capture_payment("1057", payment)
            assert len(demo_gateway.calls) == sent
            assert not workspace.mutations.saving

        asyncio.run(scenario())

    def test_payment_rejected_when_nothing_due(self):
        async def scenario():
            detail_fetch = ScriptedFetch()
            detail = DetailLoader(detail_fetch)
            task = asyncio.create_task(detail.load("O1"))
            await drain()
            detail_fetch.release(0, make_detail("O1", amt_due=0.0))
            await task
            service = Mock()
            service.capture_payment = AsyncMock()
            coordinator = MutationCoordinator(service, detail, ListSynchronizer(ScriptedFetch()))

            with pytest.raises(ValidationError, match="no amount due"):
                await coordinator.capture_payment(
                    "O1", PaymentCapture(10, datetime(2024, 11, 10), "1")
                )
            service.capture_payment.assert_not_awaited()

        asyncio.run(scenario())

    def test_invalid_status_and_quantities(self):
        async def scenario():
            service = Mock()
            coordinator = MutationCoordinator(
                service, DetailLoader(AsyncMock()), ListSynchronizer(AsyncMock())
            )
            errors = Mock()
            coordinator.error_occurred.connect(errors)

            with pytest.raises(ValidationError, match="Unknown status"):
                await coordinator.update_line_item_status("O1", "L1", 9)
            with pytest.raises(ValidationError, match="line item"):
                await coordinator.update_line_item_status("O1", "", 3)
            with pytest.raises(ValidationError) as raised:
                await coordinator.mark_delivered("O1", 0)
            assert raised.value.field == "delivered_qty"
            with pytest.raises(ValidationError):
                await coordinator.mark_cancelled("O1", 1.5)

            assert errors.call_count == 4
            assert service.mock_calls == []

        asyncio.run(scenario())

    @pytest.mark.parametrize(
        "edit, field",
        [
            (LineItemEdit(order_id=None, material_master_id="201"), "order_id"),
            (LineItemEdit(order_id="1057", material_master_id=None), "material_master_id"),
            (LineItemEdit(order_id="1057", material_master_id="201", item_amt=-1), "item_amt"),
            (LineItemEdit(order_id="1057", material_master_id="201", ord_qty=-2), "ord_qty"),
            (LineItemEdit(order_id="abc", material_master_id="201"), None),
        ],
    )
    def test_invalid_line_item_edit_is_not_sent(self, edit, field):
        async def scenario():
            service = Mock()
            coordinator = MutationCoordinator(
                service, DetailLoader(AsyncMock()), ListSynchronizer(AsyncMock())
            )
            with pytest.raises(ValidationError) as raised:
                await coordinator.update_line_item("1057", "10570", edit)
            assert raised.value.field == field
            assert service.mock_calls == []

        asyncio.run(scenario())
