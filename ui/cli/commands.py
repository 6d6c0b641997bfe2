"""Typer command handlers."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer

from core.settings import configure_logging, load_effective_config
from core.signal_hub import SignalHub
from demos import cell, messages

DEMOS: dict[str, Callable[..., list[str]]] = {
    "cell": cell.run,
    "messages": messages.run,
}


def _hub(root: Path | None = None) -> SignalHub:
    config = load_effective_config(root)
    configure_logging(config)
    return SignalHub(settings=config)


def _run_demo(name: str, echo: Callable[[str], Any]) -> SignalHub:
    runner = DEMOS.get(name)
    if runner is None:
        raise typer.BadParameter(f"Unknown demo '{name}'. Choose from: {', '.join(sorted(DEMOS))}.")
    hub = _hub()
    with hub:
        runner(hub, echo=echo)
    return hub


def demo_cell() -> None:
    """Run the reactive cell demo."""
    _run_demo("cell", typer.echo)


def demo_messages() -> None:
    """Run the string/int signal demo."""
    _run_demo("messages", typer.echo)


def stats(demo: str = "messages") -> None:
    """Run a demo without output and print dispatcher statistics."""
    hub = _run_demo(demo, lambda _line: None)
    typer.echo(json.dumps(hub.stats(), indent=2))


def config_show() -> None:
    """Show effective runtime config."""
    typer.echo(json.dumps(load_effective_config(), indent=2))
