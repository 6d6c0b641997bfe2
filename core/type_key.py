"""Stable, collision-free keys for signal types."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Any

_serials = itertools.count(1)
_serial_lock = threading.Lock()

KEY_ATTRIBUTE = "__signal_key__"


@dataclass(frozen=True)
class SignalTypeKey:
    """Registry key for one declared signal class.

    Equality and hashing use only ``serial``, which is assigned once when the
    class is created. Two classes with the same module and qualname (for
    example a ``Changed`` declared by two different emitters) get distinct
    keys.
    """

    module: str = field(compare=False)
    qualname: str = field(compare=False)
    serial: int

    def describe(self) -> str:
        return f"{self.module}:{self.qualname}#{self.serial}"

    def __str__(self) -> str:
        return self.describe()


def new_key(cls: type) -> SignalTypeKey:
    """Allocate a fresh key for a newly created signal class."""
    with _serial_lock:
        serial = next(_serials)
    return SignalTypeKey(module=cls.__module__, qualname=cls.__qualname__, serial=serial)


def type_key(signal_or_type: Any) -> SignalTypeKey:
    """Return the key for a signal class or a signal instance."""
    cls = signal_or_type if isinstance(signal_or_type, type) else type(signal_or_type)
    # Only the class's own attribute counts; an inherited key belongs to the parent.
    key = cls.__dict__.get(KEY_ATTRIBUTE)
    if not isinstance(key, SignalTypeKey):
        raise TypeError(f"{cls.__qualname__} is not a declared signal type.")
    return key
