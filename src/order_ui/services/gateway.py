"""
Abstract base class defining the transport gateway contract.

A gateway executes a named query or mutation against the sales order API
and returns the ``data`` payload of the response, keyed by the operation's
root field. Any failure (network, HTTP status, GraphQL ``errors`` block,
unknown operation) is raised as TransportError.

Implementations:
- DemoGateway: In-memory order book for development and testing
- GraphQLGateway: HTTP transport to a live GraphQL endpoint
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class OrderGateway(ABC):
    """
    Abstract base class for the order API transport.

    Subclasses must implement execute(). The gateway is the only component
    that performs I/O; everything above it only awaits its results.
    """

    @abstractmethod
    async def execute(
        self, operation: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Execute a named operation.

        Args:
            operation: Operation name (see services.operations).
            variables: Operation variables.

        Returns:
            The response ``data`` mapping, e.g. ``{"orderMain": {...}}``.

        Raises:
            TransportError: When the operation could not be completed.
        """

    async def aclose(self) -> None:
        """Release transport resources. Default implementation does nothing."""
