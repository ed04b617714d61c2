import asyncio
import json

import httpx
import pytest

from order_ui.errors import TransportError
from order_ui.services import operations as ops
from order_ui.services.graphql_gateway import GraphQLGateway

URL = "https://orders.example.com/graphql"


def _gateway(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLGateway(url=URL, client=client)


class TestGraphQLGateway:
    def test_posts_document_and_variables(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {ops.GET_ORDER: {"id": "1057"}}})

        async def scenario():
            gateway = _gateway(handler)
            data = await gateway.execute(ops.GET_ORDER, {"id": "1057"})
            await gateway.aclose()
            return data

        data = asyncio.run(scenario())
        assert data == {ops.GET_ORDER: {"id": "1057"}}
        body = json.loads(requests[0].content)
        assert str(requests[0].url) == URL
        assert body["variables"] == {"id": "1057"}
        assert body["query"] == ops.DOCUMENTS[ops.GET_ORDER]

    def test_http_status_error(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        async def scenario():
            with pytest.raises(TransportError) as raised:
                await _gateway(handler).execute(ops.LIST_ORDERS, {"first": 20, "page": 1})
            assert raised.value.status_code == 503
            assert raised.value.operation == ops.LIST_ORDERS

        asyncio.run(scenario())

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def scenario():
            with pytest.raises(TransportError, match="Unable to reach"):
                await _gateway(handler).execute(ops.LIST_PAYMENT_MODES)

        asyncio.run(scenario())

    def test_graphql_errors_surface_first_message(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"errors": [{"message": "Order not found"}, {"message": "other"}], "data": None},
            )

        async def scenario():
            with pytest.raises(TransportError, match="Order not found"):
                await _gateway(handler).execute(ops.GET_ORDER, {"id": "1"})

        asyncio.run(scenario())

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway timeout</html>")

        async def scenario():
            with pytest.raises(TransportError, match="invalid response"):
                await _gateway(handler).execute(ops.GET_ORDER, {"id": "1"})

        asyncio.run(scenario())

    def test_missing_data(self):
        def handler(request):
            return httpx.Response(200, json={"data": None})

        async def scenario():
            with pytest.raises(TransportError, match="no data"):
                await _gateway(handler).execute(ops.GET_ORDER, {"id": "1"})

        asyncio.run(scenario())

    def test_unknown_operation_is_not_sent(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"data": {}})

        async def scenario():
            with pytest.raises(TransportError, match="Unknown operation"):
                await _gateway(handler).execute("dropOrders")

        asyncio.run(scenario())
        assert requests == []
