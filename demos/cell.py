"""Reactive cell demo: one cell's change drives another's."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from core.emitter import SignalEmitter
from core.signal import declare_signal
from core.signal_hub import SignalHub

T = TypeVar("T")


class Cell(SignalEmitter, Generic[T]):
    """Wraps a value and emits ``ContentChanged`` whenever it changes.

    ``ContentChanged`` is declared per instance, so connecting to one cell's
    signal never receives another cell's changes.
    """

    def __init__(self, value: T, *, hub: SignalHub | None = None, name: str = "cell") -> None:
        super().__init__(hub=hub, label=name)
        self.value = value
        self.ContentChanged = declare_signal("ContentChanged", scope=self, value=(Any, ...))

    def set_value(self, new_value: T) -> bool:
        """Store ``new_value``; returns True if a change was emitted."""
        if self.value == new_value:
            return False
        self.value = new_value
        return self.emit(self.ContentChanged(value=new_value, owner=self._owner))


def run(hub: SignalHub, echo: Callable[[str], Any] = print) -> list[str]:
    """Wire intCell -> stringCell, set intCell to 5, and return the printed lines."""
    lines: list[str] = []

    def out(line: str) -> None:
        lines.append(line)
        echo(line)

    int_cell: Cell[int] = Cell(1, hub=hub, name="intCell")
    string_cell: Cell[str] = Cell("not set yet", hub=hub, name="stringCell")

    hub.connect(int_cell.ContentChanged, lambda s: string_cell.set_value(f"set to {s.value}"))
    hub.connect(int_cell.ContentChanged, lambda s: out(f"intCell's value changed to {s.value}"))
    hub.connect(
        string_cell.ContentChanged,
        lambda s: out(f'stringCell\'s value changed to "{s.value}"'),
    )

    int_cell.set_value(5)
    hub.wait_idle(timeout=5.0)
    return lines
