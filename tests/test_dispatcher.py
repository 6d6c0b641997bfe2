"""Dispatcher worker tests."""

from __future__ import annotations

import sys
import threading
from typing import Any

from core.dispatcher import Dispatcher, DispatcherState
from core.registry import ConnectionRegistry, PartialHandler
from core.type_key import SignalTypeKey

KEY = SignalTypeKey("tests", "Tick", 20_001)
OTHER_KEY = SignalTypeKey("tests", "Tock", 20_002)


def build(**kwargs: Any) -> tuple[ConnectionRegistry, Dispatcher]:
    registry = ConnectionRegistry()
    return registry, Dispatcher(registry, name="test-dispatcher", **kwargs)


def test_delivers_in_fifo_order_across_keys() -> None:
    registry, dispatcher = build()
    seen: list[tuple[str, int]] = []
    registry.connect(KEY, PartialHandler(lambda s: seen.append(("tick", s))))
    registry.connect(OTHER_KEY, PartialHandler(lambda s: seen.append(("tock", s))))

    for index in range(50):
        dispatcher.submit(KEY if index % 2 == 0 else OTHER_KEY, index)

    assert dispatcher.wait_idle(timeout=5.0)
    assert [value for _, value in seen] == list(range(50))
    dispatcher.request_stop()
    assert dispatcher.join(timeout=5.0)


def test_failing_handler_does_not_block_others() -> None:
    errors: list[BaseException] = []
    registry, dispatcher = build(error_hook=lambda signal, handler, exc: errors.append(exc))
    seen: list[str] = []

    def boom(signal: object) -> None:
        raise RuntimeError("handler exploded")

    registry.connect(KEY, PartialHandler(boom))
    registry.connect(KEY, PartialHandler(lambda s: seen.append("after")))
    registry.connect(OTHER_KEY, PartialHandler(lambda s: seen.append("other")))

    assert dispatcher.submit(KEY, "x") is True
    assert dispatcher.submit(OTHER_KEY, "y") is True
    assert dispatcher.wait_idle(timeout=5.0)

    assert seen == ["after", "other"]
    assert dispatcher.failure_count == 1
    assert dispatcher.delivered_count == 2
    assert [str(exc) for exc in errors] == ["handler exploded"]
    dispatcher.request_stop()


def test_failing_error_hook_is_contained() -> None:
    def bad_hook(signal: object, handler: PartialHandler, exc: BaseException) -> None:
        raise ValueError("hook exploded")

    registry, dispatcher = build(error_hook=bad_hook)
    seen: list[object] = []
    registry.connect(KEY, PartialHandler(lambda s: 1 / 0))
    registry.connect(KEY, PartialHandler(seen.append))

    dispatcher.submit(KEY, "x")
    assert dispatcher.wait_idle(timeout=5.0)
    assert seen == ["x"]
    assert dispatcher.state is DispatcherState.RUNNING
    dispatcher.request_stop()


def test_guarded_handler_is_skipped_without_side_effects() -> None:
    registry, dispatcher = build()
    seen: list[int] = []
    registry.connect(KEY, PartialHandler(seen.append, when=lambda s: s % 2 == 0))

    for value in range(5):
        dispatcher.submit(KEY, value)

    assert dispatcher.wait_idle(timeout=5.0)
    assert seen == [0, 2, 4]
    assert dispatcher.delivered_count == 3
    dispatcher.request_stop()


def test_unregistered_key_is_a_no_op() -> None:
    _, dispatcher = build()

    assert dispatcher.submit(KEY, "nobody listens") is True
    assert dispatcher.wait_idle(timeout=5.0)
    assert dispatcher.delivered_count == 0
    dispatcher.request_stop()


def test_stop_processes_earlier_messages_then_rejects() -> None:
    registry, dispatcher = build()
    seen: list[int] = []
    registry.connect(KEY, PartialHandler(seen.append))

    dispatcher.submit(KEY, 1)
    dispatcher.request_stop()
    assert dispatcher.join(timeout=5.0)

    assert dispatcher.state is DispatcherState.STOPPED
    assert dispatcher.submit(KEY, 2) is False
    assert seen == [1]
    assert dispatcher.wait_idle(timeout=1.0)


def test_messages_behind_the_sentinel_are_abandoned() -> None:
    registry, dispatcher = build()
    gate = threading.Event()
    seen: list[str] = []

    def blocker(signal: str) -> None:
        gate.wait(timeout=5.0)
        seen.append(signal)

    registry.connect(KEY, PartialHandler(blocker))
    dispatcher.submit(KEY, "first")
    dispatcher.request_stop()
    # Accepted while the sentinel is still queued, but sits behind it.
    assert dispatcher.submit(KEY, "late") is True
    gate.set()

    assert dispatcher.join(timeout=5.0)
    assert seen == ["first"]
    assert dispatcher.pending == 0


def test_wait_idle_times_out_while_handler_blocks() -> None:
    registry, dispatcher = build()
    gate = threading.Event()
    registry.connect(KEY, PartialHandler(lambda s: gate.wait(timeout=5.0)))

    dispatcher.submit(KEY, "x")
    assert dispatcher.wait_idle(timeout=0.05) is False
    gate.set()
    assert dispatcher.wait_idle(timeout=5.0) is True
    dispatcher.request_stop()


def test_request_stop_is_idempotent() -> None:
    _, dispatcher = build()

    dispatcher.request_stop()
    dispatcher.request_stop()

    assert dispatcher.join(timeout=5.0)
    dispatcher.request_stop()
    assert dispatcher.state is DispatcherState.STOPPED


def test_handler_calling_sys_exit_is_contained() -> None:
    registry, dispatcher = build()
    seen: list[int] = []

    def quitter(signal: int) -> None:
        sys.exit(1)

    registry.connect(KEY, PartialHandler(quitter))
    registry.connect(KEY, PartialHandler(seen.append))

    assert dispatcher.submit(KEY, 0) is True
    assert dispatcher.submit(KEY, 1) is True
    assert dispatcher.wait_idle(timeout=5.0)

    assert seen == [0, 1]
    assert dispatcher.failure_count == 2
    assert dispatcher.state is DispatcherState.RUNNING
    dispatcher.request_stop()


class BrokenRegistry(ConnectionRegistry):
    def handlers_for(self, key: SignalTypeKey) -> tuple[PartialHandler, ...]:
        raise SystemExit("registry gone")


def test_worker_that_dies_ends_stopped() -> None:
    dispatcher = Dispatcher(BrokenRegistry(), name="test-dispatcher")

    assert dispatcher.submit(KEY, "x") is True
    assert dispatcher.join(timeout=5.0)

    assert dispatcher.state is DispatcherState.STOPPED
    assert dispatcher.wait_idle(timeout=1.0) is True
    assert dispatcher.submit(KEY, "y") is False
