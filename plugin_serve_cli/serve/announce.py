"""Pick the public endpoint out of tunnel output and build the plugin URL."""

import re
from typing import Callable, Iterable, Iterator, Optional

# Colour codes bore emits when attached to a terminal-like stream
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def parse_public_port(line: str, relay_host: str) -> Optional[str]:
    """Return the port from a ``listening at <relay_host>:<port>`` line, else None."""
    clean = _ANSI_ESCAPE.sub("", line)
    match = re.search(r"listening at " + re.escape(relay_host) + r":(\d+)", clean)
    if match:
        return match.group(1)
    return None


def public_url(relay_host: str, port: str, artifact_name: str) -> str:
    return f"http://{relay_host}:{port}/{artifact_name}"


def scan_tunnel_output(
    lines: Iterable[str],
    relay_host: str,
    artifact_name: str,
    emit: Callable[[str], None],
) -> Iterator[str]:
    """Announce the public URL for every matching line of tunnel output.

    Every matching line produces a message, so a tunnel that reconnects and
    announces a new port is reported again. Ends when ``lines`` is exhausted.
    """
    for line in lines:
        port = parse_public_port(line, relay_host)
        if not port:
            continue
        url = public_url(relay_host, port, artifact_name)
        emit(url)
        yield url
