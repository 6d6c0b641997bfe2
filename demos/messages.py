"""String and int signal demo, including a disconnect."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from core.emitter import SignalEmitter
from core.signal import Signal
from core.signal_hub import SignalHub


class Chatter(SignalEmitter):
    """Emits text messages and running counts."""

    class Msg(Signal):
        text: str

    class Count(Signal):
        value: int

    def __init__(self, *, hub: SignalHub | None = None) -> None:
        super().__init__(hub=hub, label="chatter")
        self.sent = 0

    def say(self, text: str) -> bool:
        self.sent += 1
        accepted = self.emit(self.Msg(text=text, owner=self._owner))
        self.emit(self.Count(value=self.sent, owner=self._owner))
        return accepted


def run(hub: SignalHub, echo: Callable[[str], Any] = print) -> list[str]:
    """Send a few messages, dropping the shouting handler halfway."""
    lines: list[str] = []

    def out(line: str) -> None:
        lines.append(line)
        echo(line)

    chatter = Chatter(hub=hub)
    hub.connect(Chatter.Msg, lambda s: out(f"got message: {s.text}"))
    shout = hub.connect(Chatter.Msg, lambda s: out(s.text.upper() + "!"))
    hub.connect(Chatter.Count, lambda s: out(f"even count: {s.value}"), when=lambda s: s.value % 2 == 0)

    chatter.say("hello")
    chatter.say("world")
    hub.wait_idle(timeout=5.0)
    hub.disconnect(shout)
    chatter.say("quiet now")
    hub.wait_idle(timeout=5.0)
    return lines
