"""Signal hub: the registry and dispatcher pair behind connect/disconnect/emit/stop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from core.dispatcher import Dispatcher, DispatcherState, ErrorHook
from core.registry import Connection, ConnectionRegistry, PartialHandler, SignalPredicate
from core.settings import load_effective_config
from core.signal import Signal
from core.type_key import type_key
from governance.ownership import OwnershipToken, check_ownership

logger = logging.getLogger("sigslot.hub")


class SignalHub:
    """Type-keyed publish/subscribe facility with one dispatcher thread.

    The dispatcher starts on construction. Use the hub as a context manager,
    or call ``stop()`` and ``join()``, to shut it down.
    """

    def __init__(
        self,
        settings: dict[str, Any] | None = None,
        *,
        error_hook: ErrorHook | None = None,
    ) -> None:
        cfg = settings or {}
        dispatcher_cfg = cfg.get("dispatcher", {})
        self.settings = cfg
        self.registry = ConnectionRegistry()
        self.dispatcher = Dispatcher(
            self.registry,
            name=str(dispatcher_cfg.get("thread_name", "signal-dispatcher")),
            daemon=bool(dispatcher_cfg.get("daemon", True)),
            error_hook=error_hook,
            log_failures=bool(dispatcher_cfg.get("log_handler_failures", True)),
        )

    @classmethod
    def from_config(cls, root: Path | None = None, **kwargs: Any) -> SignalHub:
        """Build a hub from config/*.yaml under ``root``."""
        return cls(settings=load_effective_config(root), **kwargs)

    def __enter__(self) -> SignalHub:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
        self.join()

    @property
    def state(self) -> DispatcherState:
        return self.dispatcher.state

    def connect(
        self,
        signal_type: type[Signal],
        handler: Callable[[Any], Any],
        *,
        when: SignalPredicate | None = None,
    ) -> Connection:
        """Register ``handler`` for every emitted instance of ``signal_type``.

        ``when`` makes the handler partial: it is skipped for signals the
        predicate rejects.
        """
        if not (isinstance(signal_type, type) and issubclass(signal_type, Signal)):
            raise TypeError(f"Can only connect to Signal subclasses, got {signal_type!r}.")
        key = type_key(signal_type)
        return self.registry.connect(key, PartialHandler(handler, when))

    def disconnect(self, connection: Connection | None) -> bool:
        """Unregister a connection. ``None`` or a stale connection is a no-op."""
        if connection is None:
            return False
        return self.registry.disconnect(connection)

    def emit_signal(self, signal: Signal, owner: OwnershipToken) -> bool:
        """Queue ``signal`` for delivery if ``owner`` is the token it was built with.

        True means the message was accepted into the queue, not that any
        handler has run.
        """
        if not isinstance(signal, Signal):
            logger.debug("Emit rejected: %r is not a Signal", signal)
            return False
        decision = check_ownership(signal, owner)
        if not decision.allowed:
            logger.debug("Emit rejected: %s", decision.reason)
            return False
        return self.dispatcher.submit(type_key(signal), signal)

    def stop(self) -> None:
        """Ask the dispatcher to stop after the messages already queued."""
        self.dispatcher.request_stop()

    def wait_idle(self, timeout: float | None = None) -> bool:
        return self.dispatcher.wait_idle(timeout)

    def join(self, timeout: float | None = None) -> bool:
        return self.dispatcher.join(timeout)

    def stats(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "pending": self.dispatcher.pending,
            "delivered": self.dispatcher.delivered_count,
            "failures": self.dispatcher.failure_count,
            "connections": self.registry.connection_count(),
            "signal_types": len(self.registry.keys()),
        }


_default_hub: SignalHub | None = None
_default_lock = threading.Lock()


def default_hub() -> SignalHub:
    """Process-wide hub, created on first use."""
    global _default_hub
    with _default_lock:
        if _default_hub is None:
            _default_hub = SignalHub()
            logger.debug("Created default signal hub")
        return _default_hub


def reset_default_hub() -> None:
    """Stop the default hub; the next call to ``default_hub()`` creates a new one."""
    global _default_hub
    with _default_lock:
        hub, _default_hub = _default_hub, None
    if hub is not None:
        hub.stop()
        hub.join()


def connect(
    signal_type: type[Signal],
    handler: Callable[[Any], Any],
    *,
    when: SignalPredicate | None = None,
) -> Connection:
    return default_hub().connect(signal_type, handler, when=when)


def disconnect(connection: Connection | None) -> bool:
    return default_hub().disconnect(connection)


def stop() -> None:
    default_hub().stop()
