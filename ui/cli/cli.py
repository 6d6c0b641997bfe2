"""CLI entrypoint for sigslot."""

from __future__ import annotations

import typer

from ui.cli import commands

app = typer.Typer(help="In-process typed signal/slot hub")
demo_app = typer.Typer(help="Demonstration programs")
config_app = typer.Typer(help="Configuration commands")


@demo_app.command("cell")
def demo_cell_cmd() -> None:
    """Reactive cells: intCell drives stringCell."""
    commands.demo_cell()


@demo_app.command("messages")
def demo_messages_cmd() -> None:
    """String/int signals with a guarded handler and a disconnect."""
    commands.demo_messages()


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


@app.command("stats")
def stats_cmd(
    demo: str = typer.Option("messages", help="Demo to run before reporting: cell or messages"),
) -> None:
    """Run a demo quietly and print hub statistics."""
    commands.stats(demo=demo)


app.add_typer(demo_app, name="demo")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
