"""Connection registry keyed by signal type."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from core.type_key import SignalTypeKey

logger = logging.getLogger("sigslot.registry")

SignalPredicate = Callable[[Any], bool]


class PartialHandler:
    """A handler plus the guard that decides which signals it accepts.

    Every registration wraps its callable in a new ``PartialHandler``, so the
    same function connected twice yields two independent entries.
    """

    __slots__ = ("fn", "when")

    def __init__(self, fn: Callable[[Any], Any], when: SignalPredicate | None = None) -> None:
        if not callable(fn):
            raise TypeError(f"Handler must be callable, got {type(fn).__name__}.")
        if when is not None and not callable(when):
            raise TypeError(f"Guard must be callable, got {type(when).__name__}.")
        self.fn = fn
        self.when = when

    def is_defined_at(self, signal: Any) -> bool:
        return self.when is None or bool(self.when(signal))

    def __call__(self, signal: Any) -> Any:
        return self.fn(signal)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__qualname__", repr(self.fn))
        return f"<PartialHandler {name}{' (guarded)' if self.when else ''}>"


@dataclass(frozen=True, eq=False)
class Connection:
    """Handle returned by ``connect``; pass it to ``disconnect`` to unregister."""

    key: SignalTypeKey
    handler: PartialHandler


class ConnectionRegistry:
    """Thread-safe mapping of signal type key to handlers in registration order."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._handlers: dict[SignalTypeKey, list[PartialHandler]] = {}

    def connect(self, key: SignalTypeKey, handler: PartialHandler) -> Connection:
        with self._lock:
            self._handlers.setdefault(key, []).append(handler)
        logger.debug("Connected %r to %s", handler, key)
        return Connection(key=key, handler=handler)

    def disconnect(self, connection: Connection) -> bool:
        """Remove exactly the handler object referenced by ``connection``.

        Returns False when the key or the handler is no longer registered.
        """
        with self._lock:
            handlers = self._handlers.get(connection.key)
            if not handlers:
                return False
            for index, handler in enumerate(handlers):
                if handler is connection.handler:
                    del handlers[index]
                    break
            else:
                return False
            if not handlers:
                del self._handlers[connection.key]
        logger.debug("Disconnected %r from %s", connection.handler, connection.key)
        return True

    def handlers_for(self, key: SignalTypeKey) -> tuple[PartialHandler, ...]:
        """Snapshot of the handlers for ``key``; later mutations do not affect it."""
        with self._lock:
            return tuple(self._handlers.get(key, ()))

    def connection_count(self, key: SignalTypeKey | None = None) -> int:
        with self._lock:
            if key is not None:
                return len(self._handlers.get(key, ()))
            return sum(len(handlers) for handlers in self._handlers.values())

    def keys(self) -> list[SignalTypeKey]:
        with self._lock:
            return list(self._handlers)

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
