"""Launch and manage the local static file server subprocess."""

import atexit
import logging
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence, Union

import requests

from ..config import (
    SERVE_READY_TIMEOUT,
    SERVE_STARTUP_GRACE,
    SERVE_STOP_TIMEOUT,
    SERVER_COMMAND,
)
from ..exceptions import ServeError

logger = logging.getLogger(__name__)


class LocalServer:
    """Context manager for starting/stopping ``python3 -m http.server``.

    Usage::

        with LocalServer("target/wasm32-wasip1/release", 6969) as server:
            server.wait_until_ready()
            # server.base_url is http://localhost:6969
            ...
        # server is stopped automatically
    """

    def __init__(
        self,
        directory: Union[str, Path],
        port: int,
        command: Sequence[str] = SERVER_COMMAND,
    ):
        self.directory = Path(directory)
        self.port = port
        self.command = tuple(command)
        self.base_url = f"http://localhost:{port}"
        self._process: Optional[subprocess.Popen] = None
        self._started = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def start(self) -> None:
        """Spawn the server in the background. Does not wait for it to listen."""
        cmd = [*self.command, str(self.port), "--directory", str(self.directory)]
        logger.debug("Starting local server: %s", " ".join(cmd))

        try:
            self._process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,  # own process group for clean kill
            )
        except OSError as e:
            raise ServeError(f"Failed to start server: {e}")

        # Register safety-net cleanup
        atexit.register(self._atexit_cleanup)
        self._started = True
        logger.info("Local server pid %s serving %s on port %s",
                    self._process.pid, self.directory, self.port)

    def wait_until_ready(
        self,
        grace: float = SERVE_STARTUP_GRACE,
        timeout: float = SERVE_READY_TIMEOUT,
    ) -> None:
        """Sleep the startup grace, then poll the server until it answers.

        Raises:
            ServeError: If the process exits or does not answer in time.
        """
        time.sleep(grace)

        deadline = time.time() + timeout
        interval = 0.25

        while True:
            # Check if process died
            if self._process and self._process.poll() is not None:
                raise ServeError(
                    f"Server exited with status {self._process.returncode} "
                    f"before accepting connections on port {self.port}"
                )

            try:
                resp = requests.get(f"{self.base_url}/", timeout=2)
                if resp.status_code < 500:
                    logger.debug("Local server answered %s", resp.status_code)
                    return
            except requests.ConnectionError:
                pass
            except requests.Timeout:
                pass

            if time.time() >= deadline:
                raise ServeError(
                    f"Server did not answer on {self.base_url} within {timeout}s"
                )
            time.sleep(interval)

    def stop(self) -> None:
        """Stop the server process and all children via process group kill."""
        if not self._process:
            return

        logger.debug("Stopping local server pid %s", self._process.pid)
        try:
            pgid = os.getpgid(self._process.pid)
            os.killpg(pgid, signal.SIGTERM)
            try:
                self._process.wait(timeout=SERVE_STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                os.killpg(pgid, signal.SIGKILL)
                self._process.wait(timeout=2)
        except (ProcessLookupError, OSError):
            pass  # already dead
        finally:
            self._process = None
            self._started = False

    def _atexit_cleanup(self) -> None:
        """Safety net: kill server on interpreter exit."""
        if self._started:
            self.stop()
