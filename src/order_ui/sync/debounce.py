"""Cancel-and-reschedule debouncing of search input."""

import asyncio
from typing import Any, Awaitable, Callable

from order_ui.lib import logs

LOG = logs.logger(__file__)


class SearchDebouncer:
    """
    Commits search text after a quiet period.

    Every keystroke cancels the pending timer and schedules a new one, so
    intermediate values never reach ``on_commit``. A commit is only issued
    when the stripped text differs from the last committed value. A commit
    whose ``on_commit`` does not return True is rolled back, so the same
    text can be retried.
    """

    def __init__(
        self,
        on_commit: Callable[[str], Awaitable[Any]],
        delay: float = 1.0,
        initial: str = "",
    ) -> None:
        """
        Args:
            on_commit: Coroutine function called with the committed text,
                returning True once the text has been applied.
            delay: Quiet period in seconds.
            initial: Value considered already committed.
        """
        self._on_commit = on_commit
        self.delay = delay
        self._text = initial
        self._committed = initial.strip()
        self._applied = self._committed
        self._timer: asyncio.Task | None = None
        self._committing: asyncio.Task | None = None

    @property
    def committed(self) -> str:
        return self._committed

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def push(self, text: str) -> None:
        """Record the latest input and restart the quiet period."""
        self._text = text or ""
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._wait())

    async def flush(self) -> bool:
        """Commit the latest input immediately."""
        self._cancel_timer()
        return await self._commit()

    async def settled(self) -> None:
        """Wait until no commit is pending or running."""
        while True:
            task = self._timer if self.pending else self._committing
            if task is None or task.done():
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    def cancel(self) -> None:
        """Drop the pending commit, if any."""
        self._cancel_timer()

    async def _wait(self) -> None:
        await asyncio.sleep(self.delay)
        # detach so a new keystroke cannot cancel a running commit
        if self._timer is asyncio.current_task():
            self._committing = self._timer
            self._timer = None
        await self._commit()

    async def _commit(self) -> bool:
        text = self._text.strip()
        if text == self._committed:
            LOG.debug("Search unchanged - term:%r", text)
            return False
        self._committed = text
        LOG.info("Search committed - term:%r", text)
        applied = await self._on_commit(text)
        if not applied:
            # let the same text be committed again
            if self._committed == text:
                self._committed = self._applied
            LOG.warning("Search not applied - term:%r", text)
            return False
        self._applied = text
        return True

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
