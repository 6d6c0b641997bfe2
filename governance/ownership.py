"""Ownership capability checks for signal emission."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class OwnershipToken:
    """Unforgeable emit capability held by one emitter instance.

    Tokens compare by identity only. The label is informational.
    """

    __slots__ = ("label", "__weakref__")

    def __init__(self, label: str = "") -> None:
        self.label = label

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"<OwnershipToken {self.label or '?'} at {id(self):#x}>"


@dataclass
class OwnershipDecision:
    """Represents allow/block decision for one emission."""

    allowed: bool
    reason: str


def check_ownership(signal: Any, owner: Any) -> OwnershipDecision:
    """Allow emission only through the token stamped on the signal."""
    if not isinstance(owner, OwnershipToken):
        return OwnershipDecision(False, "Emitter did not present an ownership token.")
    stamped = getattr(signal, "_owner", None)
    if stamped is None:
        return OwnershipDecision(False, "Signal carries no ownership token.")
    if stamped is not owner:
        return OwnershipDecision(False, f"Signal is owned by {stamped!r}, not {owner!r}.")
    return OwnershipDecision(True, "Owner matches.")
