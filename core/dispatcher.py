"""Single-worker asynchronous signal dispatcher.

One thread consumes a FIFO queue of deliveries and runs every registered
handler for each message, one at a time, in registration order. A slow
handler therefore delays every message queued behind it. Handler failures
are contained per handler and never reach the emitter.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.registry import ConnectionRegistry, PartialHandler
from core.type_key import SignalTypeKey

logger = logging.getLogger("sigslot.dispatcher")

ErrorHook = Callable[[Any, PartialHandler, BaseException], None]


class DispatcherState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Delivery:
    """Queued request to deliver ``signal`` to the handlers of ``key``."""

    key: SignalTypeKey
    signal: Any


class _Stop:
    def __repr__(self) -> str:
        return "STOP"


STOP = _Stop()


class Dispatcher:
    """Owns the inbound queue and the worker thread that drains it."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        name: str = "signal-dispatcher",
        daemon: bool = True,
        error_hook: ErrorHook | None = None,
        log_failures: bool = True,
    ) -> None:
        self.registry = registry
        self.error_hook = error_hook
        self.log_failures = log_failures
        self.delivered_count = 0
        self.failure_count = 0
        self._queue: queue.Queue[Delivery | _Stop] = queue.Queue()
        self._state = DispatcherState.RUNNING
        self._stop_requested = False
        self._pending = 0
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._thread = threading.Thread(target=self._run, name=name, daemon=daemon)
        self._thread.start()

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def pending(self) -> int:
        """Messages accepted but not yet processed."""
        with self._lock:
            return self._pending

    def submit(self, key: SignalTypeKey, signal: Any) -> bool:
        """Queue one delivery. Returns False once the worker has stopped."""
        with self._lock:
            if self._state is DispatcherState.STOPPED:
                logger.debug("Dispatcher stopped; dropping %s", key)
                return False
            self._pending += 1
            self._queue.put(Delivery(key=key, signal=signal))
        return True

    def request_stop(self) -> None:
        """Queue the stop sentinel behind everything already accepted."""
        with self._lock:
            if self._state is DispatcherState.STOPPED or self._stop_requested:
                return
            self._stop_requested = True
            self._pending += 1
            self._queue.put(STOP)
        logger.debug("Stop requested for %s", self._thread.name)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every accepted message has been processed.

        Must not be called from a handler: the worker would wait on itself.
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread to exit; True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        logger.debug("Dispatcher %s running", self._thread.name)
        # Any exit from the loop leaves the dispatcher STOPPED.
        try:
            while True:
                message = self._queue.get()
                if message is STOP:
                    return
                try:
                    self._deliver(message)
                finally:
                    with self._idle:
                        self._pending -= 1
                        if self._pending == 0:
                            self._idle.notify_all()
        except BaseException:
            logger.exception("Dispatcher %s crashed", self._thread.name)
        finally:
            self._halt()

    def _halt(self) -> None:
        with self._idle:
            self._state = DispatcherState.STOPPED
            # Anything queued behind the sentinel is abandoned, not delivered.
            abandoned = self._queue.qsize()
            self._pending = 0
            self._idle.notify_all()
        logger.debug(
            "Dispatcher %s stopped (%d queued message(s) abandoned)",
            self._thread.name,
            abandoned,
        )

    def _deliver(self, delivery: Delivery) -> None:
        handlers = self.registry.handlers_for(delivery.key)
        if not handlers:
            return
        for handler in handlers:
            try:
                if not handler.is_defined_at(delivery.signal):
                    continue
                handler(delivery.signal)
                self.delivered_count += 1
            except BaseException as exc:
                # SystemExit included.
                self.failure_count += 1
                self._report(delivery, handler, exc)

    def _report(self, delivery: Delivery, handler: PartialHandler, exc: BaseException) -> None:
        if self.log_failures:
            logger.debug("Handler %r failed for %s: %s", handler, delivery.key, exc)
        if self.error_hook is None:
            return
        try:
            self.error_hook(delivery.signal, handler, exc)
        except BaseException as hook_exc:
            logger.debug("Error hook failed: %s", hook_exc)
