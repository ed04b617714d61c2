"""
Error types raised by the Sales Order UI engine.

- ValidationError: a local, pre-flight check failed; nothing was sent.
- TransportError: the gateway could not complete an operation.

Stale responses are not errors. They are dropped silently by the loaders.
"""


class OrderUIError(Exception):
    """Base class for errors surfaced to the view layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(OrderUIError):
    """
    Raised when a mutation input fails local validation.

    Attributes:
        field: Name of the offending input field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class TransportError(OrderUIError):
    """
    Raised when a remote operation fails.

    Attributes:
        operation: Name of the gateway operation that failed.
        status_code: HTTP status code, when the failure came from HTTP.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
