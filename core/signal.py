"""Signal base model and runtime signal declaration."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr, create_model

from core.type_key import KEY_ATTRIBUTE, new_key, type_key
from governance.ownership import OwnershipToken


class Signal(BaseModel):
    """One occurrence of an event.

    Subclasses declare payload fields like any pydantic model. Every instance
    must be constructed with the ``owner`` token of the emitter that declares
    it; only that token can later emit it::

        class Changed(Signal):
            value: int

        Changed(value=5, owner=self._owner)

    The token is a private attribute: it never appears in ``model_dump()``,
    has no public accessor and cannot be reassigned after construction.
    ``model_validate`` goes through ``__init__`` and so also needs the token;
    ``model_construct`` skips it and yields a signal that cannot be emitted.
    """

    model_config = ConfigDict(frozen=True)

    _owner: OwnershipToken | None = PrivateAttr(default=None)

    def __init__(self, /, *, owner: OwnershipToken, **data: Any) -> None:
        if not isinstance(owner, OwnershipToken):
            raise TypeError(
                f"{type(self).__qualname__} requires an OwnershipToken, got {type(owner).__name__}."
            )
        super().__init__(**data)
        # Written straight into pydantic's private storage; __setattr__ refuses it.
        self.__pydantic_private__["_owner"] = owner

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        setattr(cls, KEY_ATTRIBUTE, new_key(cls))

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_owner":
            raise AttributeError(f"{type(self).__qualname__} owner is fixed at construction.")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name == "_owner":
            raise AttributeError(f"{type(self).__qualname__} owner is fixed at construction.")
        super().__delattr__(name)


def _scope_label(scope: Any) -> str:
    owner = getattr(scope, "_owner", None)
    if isinstance(owner, OwnershipToken) and owner.label:
        return owner.label
    return f"{type(scope).__qualname__}[{id(scope):#x}]"


def declare_signal(name: str, *, scope: Any = None, **fields: Any) -> type[Signal]:
    """Create a new Signal subclass at runtime.

    Each call returns a distinct type with its own key, so an emitter can
    declare signals per instance. Field specs follow ``pydantic.create_model``:
    a bare type means a required field, a ``(type, default)`` tuple sets a
    default.
    """
    definitions = {
        field_name: spec if isinstance(spec, tuple) else (spec, ...)
        for field_name, spec in fields.items()
    }
    module = type(scope).__module__ if scope is not None else __name__
    cls = create_model(name, __base__=Signal, __module__=module, **definitions)
    if scope is not None:
        cls.__qualname__ = f"{_scope_label(scope)}.{name}"
        setattr(cls, KEY_ATTRIBUTE, replace(type_key(cls), qualname=cls.__qualname__))
    return cls
