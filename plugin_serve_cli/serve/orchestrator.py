"""Serve the plugin artifact through a public tunnel.

The sequence is linear:

1. find the artifact under the build output directory
2. start the local static file server on its directory
3. wait for the server to answer
4. install a SIGINT handler that tears the server down
5. start the tunnel to the relay
6. announce the public URL for every ``listening at`` line until the tunnel
   output closes
"""

import logging
import signal
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..config import (
    ARTIFACT_DEPTH,
    ARTIFACT_EXTENSION,
    ARTIFACT_ROOT,
    DEFAULT_PORT,
    RELAY_HOST,
    SERVE_READY_TIMEOUT,
    SERVE_STARTUP_GRACE,
)
from ..exceptions import ArtifactNotFoundError
from .announce import scan_tunnel_output
from .artifact import Artifact, find_artifact
from .local_server import LocalServer
from .tunnel_client import TunnelClient

logger = logging.getLogger(__name__)


class ServeOrchestrator:
    """Run one ``serve`` invocation end to end."""

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        root: Union[str, Path] = ARTIFACT_ROOT,
        depth: int = ARTIFACT_DEPTH,
        extension: str = ARTIFACT_EXTENSION,
        relay_host: str = RELAY_HOST,
        emit: Callable[[str], None] = print,
        grace: float = SERVE_STARTUP_GRACE,
        ready_timeout: float = SERVE_READY_TIMEOUT,
        server_factory: Callable[..., LocalServer] = LocalServer,
        tunnel_factory: Callable[..., TunnelClient] = TunnelClient,
    ):
        self.port = port
        self.root = Path(root)
        self.depth = depth
        self.extension = extension
        self.relay_host = relay_host
        self.emit = emit
        self.grace = grace
        self.ready_timeout = ready_timeout
        self._server_factory = server_factory
        self._tunnel_factory = tunnel_factory

        self.artifact: Optional[Artifact] = None
        self.server: Optional[LocalServer] = None
        self.tunnel: Optional[TunnelClient] = None

    def discover(self) -> Artifact:
        """Find the artifact to serve.

        Raises:
            ArtifactNotFoundError: If no file matched.
        """
        artifact = find_artifact(self.root, self.depth, self.extension)
        if artifact is None:
            raise ArtifactNotFoundError(
                f"no *{self.extension} found {self.depth} levels below {self.root}/"
            )
        self.artifact = artifact
        logger.info("Serving artifact %s", artifact.path)
        return artifact

    def run(self) -> List[str]:
        """Serve until the tunnel output closes. Returns the URLs announced."""
        artifact = self.artifact or self.discover()

        self.server = self._server_factory(artifact.directory, self.port)
        self.server.start()

        handler_installed = False
        previous_handler = None
        try:
            self.server.wait_until_ready(grace=self.grace, timeout=self.ready_timeout)

            previous_handler = signal.signal(signal.SIGINT, self._handle_interrupt)
            handler_installed = True

            self.tunnel = self._tunnel_factory(self.port, self.relay_host)
            self.tunnel.start()

            return list(scan_tunnel_output(
                self.tunnel.lines(), self.relay_host, artifact.name, self.emit,
            ))
        finally:
            if handler_installed:
                signal.signal(signal.SIGINT, previous_handler)
            self.shutdown()

    def shutdown(self) -> None:
        """Stop the tunnel and the local server. Safe to call repeatedly."""
        if self.tunnel is not None:
            self.tunnel.stop()
        if self.server is not None:
            self.server.stop()

    def _handle_interrupt(self, signum, frame) -> None:
        logger.info("Interrupted, shutting down")
        self.shutdown()
        raise SystemExit(0)
