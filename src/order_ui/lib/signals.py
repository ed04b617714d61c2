"""
Observer callbacks for snapshot change notifications.

Each engine component owns a ``changed`` signal (emitted with its new
snapshot) and an ``error_occurred`` signal (emitted with a user-facing
message). The view layer connects to these instead of polling.
"""

from typing import Any, Callable

from order_ui.lib import logs

LOG = logs.logger(__file__)


class Signal:
    """
    Ordered list of handlers invoked on ``emit``.

    Everything runs on a single event loop thread, so no locking is done.
    A handler that raises is logged and skipped so the remaining handlers
    still run.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable[..., Any]] = []

    def connect(self, handler: Callable[..., Any]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def disconnect(self, handler: Callable[..., Any]) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                LOG.error("Signal handler %r failed: %s", handler, exc, exc_info=True)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
