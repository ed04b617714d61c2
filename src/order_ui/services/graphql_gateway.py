"""
HTTP implementation of OrderGateway for a live GraphQL endpoint.

Documents are looked up by operation name in services.operations and posted
as ``{"query": ..., "variables": ...}``. Failures are normalized to
TransportError:

- Network errors and timeouts
- Non-2xx HTTP responses
- GraphQL ``errors`` blocks (the first message is surfaced to the user)

No retries are performed; retrying is a user action.
"""

from typing import Any, Mapping

import httpx

from order_ui.config import settings
from order_ui.errors import TransportError
from order_ui.lib import logs
from order_ui.services.gateway import OrderGateway
from order_ui.services.operations import DOCUMENTS

LOG = logs.logger(__file__)


class GraphQLGateway(OrderGateway):
    """
    Order gateway backed by an ``httpx.AsyncClient``.

    Attributes:
        url: GraphQL endpoint.
    """

    def __init__(
        self,
        url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            url: GraphQL endpoint, defaults to ORDER_UI_GRAPHQL_URL.
            token: Bearer token, defaults to ORDER_UI_API_TOKEN.
            timeout: Request timeout in seconds, defaults to ORDER_UI_TIMEOUT.
            client: Preconfigured client (tests inject one with a mock
                transport).
        """
        config = settings()
        self.url = url or config.graphql_url
        headers = {"Content-Type": "application/json"}
        if token or config.api_token:
            headers["Authorization"] = f"Bearer {token or config.api_token}"
        self._client = client or httpx.AsyncClient(
            headers=headers, timeout=timeout or config.timeout
        )

    async def execute(
        self, operation: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            document = DOCUMENTS[operation]
        except KeyError as exc:
            raise TransportError(
                f"Unknown operation: {operation}", operation=operation
            ) from exc

        LOG.debug("execute - operation:%s variables:%s", operation, variables)
        try:
            response = await self._client.post(
                self.url,
                json={"query": document, "variables": dict(variables or {})},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOG.error("%s failed with HTTP %s", operation, status)
            raise TransportError(
                f"Server returned HTTP {status}",
                operation=operation,
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            LOG.error("%s failed: %s", operation, exc)
            raise TransportError(
                "Unable to reach the order service", operation=operation
            ) from exc
        except ValueError as exc:
            raise TransportError(
                "Order service returned an invalid response", operation=operation
            ) from exc

        if not isinstance(payload, dict):
            raise TransportError(
                "Order service returned an invalid response", operation=operation
            )
        if errors := payload.get("errors"):
            message = (errors[0] or {}).get("message") or "Request failed"
            LOG.warning("%s returned errors: %s", operation, errors)
            raise TransportError(message, operation=operation)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise TransportError(
                "Order service returned no data", operation=operation
            )
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
