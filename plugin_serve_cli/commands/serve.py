"""plugin-serve serve — serve the built plugin over a public bore tunnel."""

import click
from rich.console import Console

from ..config import ARTIFACT_ROOT, DEFAULT_PORT, RELAY_HOST, SERVE_READY_TIMEOUT
from ..exceptions import PluginServeError
from ..serve.orchestrator import ServeOrchestrator
from ..serve.requirements import check_requirements

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"[bold red]ERROR:[/bold red] {error}", soft_wrap=True, highlight=False)
    raise SystemExit(1)


@click.command("check", hidden=True)
def check_command():
    """Verify the tools `serve` needs are installed."""
    try:
        check_requirements()
    except PluginServeError as e:
        _fail(e)


@click.command("serve")
@click.argument("port", type=click.IntRange(1, 65535), default=DEFAULT_PORT)
@click.option("--root", default=ARTIFACT_ROOT, show_default=True,
              type=click.Path(file_okay=False), help="Build output directory to search")
@click.option("--relay", default=RELAY_HOST, show_default=True, help="bore relay host")
@click.option("--ready-timeout", default=SERVE_READY_TIMEOUT, show_default=True,
              type=float, help="Seconds to wait for the local server to answer")
def serve_command(port: int, root: str, relay: str, ready_timeout: float):
    """Serve the plugin.

    Finds the built .wasm under ROOT, serves its directory on PORT with
    python3's http.server, and exposes it through a bore tunnel. Press
    Ctrl-C to stop.

    \b
    Examples:
      plugin-serve serve             # port 6969
      plugin-serve serve 8080
      plugin-serve serve --relay bore.example.com
    """
    try:
        check_requirements()
    except PluginServeError as e:
        _fail(e)

    orchestrator = ServeOrchestrator(
        port=port,
        root=root,
        relay_host=relay,
        ready_timeout=ready_timeout,
        emit=_announce,
    )

    try:
        artifact = orchestrator.discover()
        console.print(f"[dim]Found {artifact.path}[/dim]", soft_wrap=True)
        console.print(f"[dim]Starting local server on port {port}, tunnelling to {relay}...[/dim]")
        orchestrator.run()
    except PluginServeError as e:
        _fail(e)


def _announce(url: str) -> None:
    console.print(f"serving plugin @ {url}", soft_wrap=True, highlight=False)
