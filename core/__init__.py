"""Signal hub core: declare signals, connect handlers, emit asynchronously."""

from core.dispatcher import DispatcherState
from core.emitter import SignalEmitter
from core.registry import Connection, PartialHandler
from core.signal import Signal, declare_signal
from core.signal_hub import SignalHub, connect, default_hub, disconnect, stop
from core.type_key import SignalTypeKey, type_key

__all__ = [
    "Connection",
    "DispatcherState",
    "PartialHandler",
    "Signal",
    "SignalEmitter",
    "SignalHub",
    "SignalTypeKey",
    "connect",
    "declare_signal",
    "default_hub",
    "disconnect",
    "stop",
    "type_key",
]
