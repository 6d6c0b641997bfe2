"""Base class for entities that declare and emit signals."""

from __future__ import annotations

from core.signal import Signal
from core.signal_hub import SignalHub, default_hub
from governance.ownership import OwnershipToken


class SignalEmitter:
    """Holds the ownership token for the signals this entity declares.

    Subclasses build their signals with ``owner=self._owner`` and emit them
    with ``self.emit``. Code outside the entity never needs the token.
    """

    def __init__(self, *, hub: SignalHub | None = None, label: str | None = None) -> None:
        self._owner = OwnershipToken(label or type(self).__qualname__)
        self._hub = hub

    @property
    def hub(self) -> SignalHub:
        return self._hub if self._hub is not None else default_hub()

    def emit(self, signal: Signal) -> bool:
        """Emit a signal declared by this entity; False if it is not ours."""
        return self.hub.emit_signal(signal, self._owner)
