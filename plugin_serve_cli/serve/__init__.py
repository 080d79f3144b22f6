"""Serve package — find, serve, and tunnel the built plugin."""

from .announce import parse_public_port, public_url, scan_tunnel_output
from .artifact import Artifact, find_artifact, find_artifacts
from .local_server import LocalServer
from .orchestrator import ServeOrchestrator
from .requirements import check_requirements
from .tunnel_client import TunnelClient

__all__ = [
    "Artifact",
    "find_artifact",
    "find_artifacts",
    "LocalServer",
    "TunnelClient",
    "ServeOrchestrator",
    "check_requirements",
    "parse_public_port",
    "public_url",
    "scan_tunnel_output",
]
