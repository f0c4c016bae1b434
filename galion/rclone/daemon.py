# Galion rclone Daemon
# Start and stop an 'rclone rcd' child process

import logging
import subprocess
import time
from typing import Any, Optional
from urllib.parse import urlparse

from galion.errors import RcloneError
from galion.rclone.client import RcloneClient

logger = logging.getLogger(__name__)


class RcloneDaemon:
    """
    An 'rclone rcd' server owned by galion.

    Use as a context manager: the server is started on enter and
    terminated on exit.
    """

    def __init__(
        self,
        url: str,
        *,
        binary: str = "rclone",
        config_path: Optional[str] = None,
        startup_timeout: float = 10.0,
    ):
        self.url = url
        self.binary = binary
        self.config_path = config_path
        self.startup_timeout = startup_timeout
        self._process: Optional[subprocess.Popen[bytes]] = None

    def command(self) -> list[str]:
        """Command line used to start the server."""
        parsed = urlparse(self.url)
        addr = f"{parsed.hostname or '127.0.0.1'}:{parsed.port or 5572}"
        cmd = [self.binary, "rcd", "--rc-no-auth", "--rc-addr", addr]
        if self.config_path:
            cmd.extend(["--config", self.config_path])
        return cmd

    def start(self, client: RcloneClient) -> None:
        """
        Start the server and wait until it answers.

        Raises:
            RcloneError: If rclone is missing, exits early or never answers.
        """
        cmd = self.command()
        logger.info("Starting %s", " ".join(cmd))
        try:
            self._process = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        except FileNotFoundError:
            raise RcloneError(f"{self.binary} command not found. Is rclone installed?")

        deadline = time.monotonic() + self.startup_timeout
        while True:
            if self._process.poll() is not None:
                stderr = self._process.stderr.read().decode(errors="replace") if self._process.stderr else ""
                raise RcloneError(f"rclone rcd exited with status {self._process.returncode}: {stderr.strip()}")
            try:
                client.noop()
                return
            except RcloneError:
                if time.monotonic() > deadline:
                    self.stop()
                    raise RcloneError(f"rclone rcd did not answer on {self.url}")
                time.sleep(0.1)

    def stop(self) -> None:
        """Terminate the server. Idempotent."""
        if self._process is None:
            return
        if self._process.poll() is None:
            self._process.terminate()
            try:
                self._process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
        logger.debug("rclone rcd stopped")
        self._process = None

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def __enter__(self) -> "RcloneDaemon":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
