"""plugin-serve command-line entry point."""

import logging
import sys

import click

from . import __version__
from .commands import serve, tasks

# Short names accepted in place of a full command name
ALIASES = {
    "c": "choose",
    "e": "edit",
}


class AliasedGroup(click.Group):
    """Group that resolves the short aliases in ALIASES."""

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Log subprocess activity to stderr")
@click.version_option(__version__, prog_name="plugin-serve")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Developer commands for building and sharing the plugin."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(tasks.list_command)


cli.add_command(tasks.list_command)
cli.add_command(tasks.choose_command)
cli.add_command(tasks.edit_command)
cli.add_command(serve.check_command)
cli.add_command(serve.serve_command)


def main():
    cli()


if __name__ == "__main__":
    main()
