"""
Infinite-scroll trigger.

ViewportTrigger watches the last rendered row through a NearEndSensor and
asks its target list for the next page when the row comes into view. The
sensor is a capability so that tests and view layers can drive it without a
browser: CallbackSensor simply forwards what the view reports.
"""

import asyncio
from typing import Callable, Protocol

from order_ui.lib import logs

LOG = logs.logger(__file__)


class NearEndSensor(Protocol):
    """Reports whether the observed element is near the end of the viewport."""

    def on_near_end(self, callback: Callable[[bool], None]) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class PagedTarget(Protocol):
    """The list a ViewportTrigger extends."""

    @property
    def is_busy(self) -> bool: ...

    @property
    def snapshot(self): ...

    async def load_next(self) -> bool: ...


class CallbackSensor:
    """NearEndSensor fed by explicit ``report`` calls from the view."""

    def __init__(self, element_key: str) -> None:
        self.element_key = element_key
        self.active = False
        self._callback: Callable[[bool], None] | None = None

    def on_near_end(self, callback: Callable[[bool], None]) -> None:
        self._callback = callback

    def start(self) -> None:
        self.active = True

    def stop(self) -> None:
        self.active = False

    def report(self, intersecting: bool) -> None:
        """Forward an intersection change; ignored while stopped."""
        if self.active and self._callback is not None:
            self._callback(intersecting)

    def crossed(self) -> None:
        """Report a complete crossing: leave the boundary, then enter it."""
        self.report(False)
        self.report(True)


class ViewportTrigger:
    """
    Fires ``load_next`` on the target at most once per boundary crossing.

    Attributes:
        fired: Number of ``load_next`` calls issued.
    """

    def __init__(
        self,
        target: PagedTarget,
        sensor_factory: Callable[[str], NearEndSensor] = CallbackSensor,
    ) -> None:
        self.target = target
        self._sensor_factory = sensor_factory
        self._sensor: NearEndSensor | None = None
        self._element_key: str | None = None
        self._armed = False
        self._tasks: set[asyncio.Task] = set()
        self.fired = 0

    @property
    def sensor(self) -> NearEndSensor | None:
        return self._sensor

    @property
    def element_key(self) -> str | None:
        return self._element_key

    def bind(self, element_key: str) -> NearEndSensor:
        """Observe ``element_key``, replacing any previously observed element."""
        if self._sensor is not None and element_key == self._element_key:
            return self._sensor
        self.unbind()
        sensor = self._sensor_factory(element_key)
        sensor.on_near_end(lambda near_end: self._on_near_end(sensor, near_end))
        self._sensor = sensor
        self._element_key = element_key
        self._armed = True
        sensor.start()
        LOG.debug("Viewport bound - element:%s", element_key)
        return sensor

    def unbind(self) -> None:
        if self._sensor is None:
            return
        self._sensor.stop()
        LOG.debug("Viewport unbound - element:%s", self._element_key)
        self._sensor = None
        self._element_key = None
        self._armed = False

    async def settled(self) -> None:
        """Wait for every ``load_next`` issued so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_near_end(self, sensor: NearEndSensor, near_end: bool) -> None:
        if sensor is not self._sensor:
            return
        if not near_end:
            self._armed = True
            return
        if not self._armed:
            LOG.debug("Viewport crossing already handled")
            return
        self._armed = False
        if not self.target.snapshot.has_more:
            LOG.debug("Viewport crossing ignored - no more pages")
            return
        if self.target.is_busy:
            LOG.debug("Viewport crossing ignored - fetch in flight")
            return
        self.fired += 1
        task = asyncio.get_running_loop().create_task(self.target.load_next())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
