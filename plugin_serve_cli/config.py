"""Defaults for plugin-serve. Most can be overridden from the environment."""

import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to default when unset or invalid."""
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %s", name, raw, default)
        return default


# Serve
DEFAULT_PORT = _env_int("PLUGIN_SERVE_PORT", 6969)
RELAY_HOST = os.environ.get("PLUGIN_SERVE_RELAY", "bore.pub")

# Artifact discovery: target/<triple>/<profile>/<name>.wasm
ARTIFACT_ROOT = os.environ.get("PLUGIN_SERVE_ARTIFACT_ROOT", "target")
ARTIFACT_DEPTH = 3
ARTIFACT_EXTENSION = ".wasm"

# Local server lifecycle (seconds)
SERVE_STARTUP_GRACE = 1
SERVE_READY_TIMEOUT = 10
SERVE_STOP_TIMEOUT = 5

SERVER_COMMAND = ("python3", "-m", "http.server")
TUNNEL_COMMAND = "bore"

# Tools that must be on PATH before `serve` runs, with an install hint
REQUIRED_TOOLS = (
    ("python3", None),
    ("bore", "https://github.com/ekzhang/bore"),
)

# Interactive chooser used by `choose`
DEFAULT_CHOOSER = (
    os.environ.get("PLUGIN_SERVE_CHOOSER")
    or os.environ.get("JUST_CHOOSER")
    or "fzf --tmux"
)
