"""Run the bore tunnel client and stream its output."""

import logging
import subprocess
from typing import Iterator, Optional

from ..config import RELAY_HOST, SERVE_STOP_TIMEOUT, TUNNEL_COMMAND
from ..exceptions import TunnelError

logger = logging.getLogger(__name__)


class TunnelClient:
    """Forward a local port to a public relay with ``bore``.

    bore announces the public endpoint on its log output::

        2024-05-01T10:00:00Z  INFO bore_cli::client: listening at bore.pub:41287

    :meth:`lines` hands that output (stdout and stderr merged) to the caller
    one line at a time, so the announcement can be picked out as it arrives.
    """

    def __init__(self, local_port: int, relay_host: str = None, command: str = TUNNEL_COMMAND):
        self.local_port = local_port
        self.relay_host = relay_host or RELAY_HOST
        self.command = command
        self._process: Optional[subprocess.Popen] = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self) -> None:
        """Spawn ``bore local <port> --to <relay>``.

        Raises:
            TunnelError: If the client cannot be executed.
        """
        cmd = [self.command, "local", str(self.local_port), "--to", self.relay_host]
        logger.debug("Starting tunnel: %s", " ".join(cmd))

        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise TunnelError(f"Failed to start {self.command}: {e}")

    def lines(self) -> Iterator[str]:
        """Yield output lines until the tunnel closes its output."""
        if not self._process or not self._process.stdout:
            raise TunnelError("Tunnel is not running")

        for line in self._process.stdout:
            line = line.rstrip("\r\n")
            logger.debug("bore: %s", line)
            yield line

        logger.info("Tunnel output closed")

    def stop(self) -> None:
        """Terminate the tunnel process if it is still alive."""
        if not self._process:
            return

        try:
            if self._process.poll() is None:
                self._process.terminate()
                try:
                    self._process.wait(timeout=SERVE_STOP_TIMEOUT)
                except subprocess.TimeoutExpired:
                    self._process.kill()
                    self._process.wait(timeout=2)
        except (ProcessLookupError, OSError):
            pass  # already dead
        finally:
            self._process = None
