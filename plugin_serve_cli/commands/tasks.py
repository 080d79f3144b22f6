"""Task helpers: list, choose, and edit the available commands."""

import shlex
import subprocess
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..config import DEFAULT_CHOOSER

console = Console()


def _visible_commands(ctx: click.Context):
    """Return (name, command) pairs of the root group, hidden ones excluded."""
    group = ctx.find_root().command
    names = group.list_commands(ctx)
    commands = [(name, group.get_command(ctx, name)) for name in names]
    return [(name, cmd) for name, cmd in commands if cmd is not None and not cmd.hidden]


@click.command("list")
@click.pass_context
def list_command(ctx: click.Context):
    """Display this list of available commands."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Command", style="bold")
    table.add_column("Description", style="dim")

    for name, cmd in _visible_commands(ctx):
        table.add_row(name, cmd.get_short_help_str(limit=60))

    console.print("Available commands:")
    console.print(table)


@click.command("choose")
@click.pass_context
def choose_command(ctx: click.Context):
    """Open an interactive chooser of available commands.

    The chooser defaults to `fzf --tmux`; set PLUGIN_SERVE_CHOOSER (or
    JUST_CHOOSER) to use another one. It reads one command per line on
    stdin and prints the selection.
    """
    choices = [name for name, _ in _visible_commands(ctx) if name != "choose"]

    try:
        result = subprocess.run(
            shlex.split(DEFAULT_CHOOSER),
            input="\n".join(choices) + "\n",
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except OSError as e:
        console.print(f"[bold red]ERROR:[/bold red] could not run chooser '{DEFAULT_CHOOSER}': {e}")
        raise SystemExit(1)

    # Cancelled: exit quietly with the chooser's status
    if result.returncode != 0:
        raise SystemExit(result.returncode)

    selection = result.stdout.strip().split()
    if not selection:
        return

    group = ctx.find_root().command
    cmd = group.get_command(ctx, selection[0])
    if cmd is None:
        console.print(f"[bold red]ERROR:[/bold red] unknown command '{selection[0]}'")
        raise SystemExit(1)
    ctx.invoke(cmd)


@click.command("edit")
def edit_command():
    """Edit the command registry in $EDITOR."""
    from .. import cli

    click.edit(filename=str(Path(cli.__file__)))
