# Galion Application
# Start-up sequence: configuration, rclone initialization and remote discovery

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from galion.config.loader import get_config_path, load_or_create_config
from galion.config.schema import GalionConfig
from galion.errors import GalionError, RcloneError
from galion.output.console import Console
from galion.output.history import SyncHistory
from galion.rclone.client import RcloneClient
from galion.rclone.daemon import RcloneDaemon
from galion.remotes.store import RemoteStore

logger = logging.getLogger(__name__)


@dataclass
class AppOptions:
    """Command line switches that shape the start-up."""

    config_path: Optional[Path] = None
    rclone_config: Optional[Path] = None
    rclone_ask_password: bool = False
    hide_banner: bool = False
    auto_update_config: bool = False
    ignore_duplicate_remote: bool = False
    rc_url: Optional[str] = None


class GalionApp:
    """
    The galion application.

    Owns the configuration, the remote store and the rclone client. Use as
    a context manager so a spawned rclone server is stopped on exit.
    """

    def __init__(
        self,
        config: GalionConfig,
        *,
        config_path: Path,
        options: Optional[AppOptions] = None,
        client: Optional[RcloneClient] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.config_path = config_path
        self.options = options or AppOptions()
        self.console = console or Console(colored=config.output.colored)
        if self.options.rc_url:
            config.rclone.url = self.options.rc_url.rstrip("/")
        self.client = client or RcloneClient(
            config.rclone.url,
            user=config.rclone.user,
            password=config.rclone.password,
            timeout=config.rclone.timeout,
        )
        self.store = RemoteStore.from_config(config, config_path)
        self.daemon: Optional[RcloneDaemon] = None

    @classmethod
    def from_options(cls, options: AppOptions, console: Optional[Console] = None) -> "GalionApp":
        """Load (or create) the configuration and build the app."""
        config_path = options.config_path or get_config_path()
        config, was_created = load_or_create_config(config_path)
        if was_created:
            logger.info("Created default configuration at %s", config_path)
        return cls(config, config_path=config_path, options=options, console=console)

    def __enter__(self) -> "GalionApp":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Stop a spawned rclone server and release the client."""
        if self.daemon is not None:
            self.daemon.stop()
            self.daemon = None
        self.client.close()

    @property
    def rclone_config_path(self) -> Optional[str]:
        if self.options.rclone_config:
            return str(self.options.rclone_config)
        return self.config.rclone.config_path

    @property
    def ask_password(self) -> bool:
        return self.options.rclone_ask_password or self.config.rclone.ask_password

    def start_rclone(self) -> None:
        """Spawn 'rclone rcd' if the configuration asks for it."""
        if not self.config.rclone.spawn or self.daemon is not None:
            return
        self.daemon = RcloneDaemon(
            self.config.rclone.url,
            binary=self.config.rclone.binary,
            config_path=self.rclone_config_path,
        )
        self.daemon.start(self.client)

    def init(self) -> None:
        """
        Prepare rclone and load the remotes.

        Raises:
            GalionError: If rclone cannot be set up or no remote is available.
        """
        if not (self.options.hide_banner or self.config.output.hide_banner):
            self.console.print_banner()

        self.start_rclone()

        if self.rclone_config_path:
            self.client.set_config_path(self.rclone_config_path)
        self.client.set_options({"main": {"LogLevel": "CRITICAL"}})
        if not self.ask_password:
            self.client.set_options({"main": {"AskPassword": False}})

        try:
            self.client.dump_config()
        except RcloneError as e:
            if self.ask_password:
                hint = "and the decryption failed"
            else:
                hint = "and you can retry with the --rclone-ask-password flag"
            raise GalionError(
                f"Failed to get the rclone configuration. Most likely the configuration is encrypted {hint}",
                cause=e,
            )

        self.discover_remotes()

        if self.options.auto_update_config:
            self.store.save()

        if len(self.store) == 0:
            raise GalionError(
                "No remote found in rclone 'config/listremotes' and in the galion config at "
                f"{self.config_path} - please add remote with rclone CLI"
            )

    def discover_remotes(self) -> int:
        """
        Add the remotes of the rclone configuration to the store.

        Returns:
            Number of remotes added.
        """
        names = self.client.list_remotes()
        added = self.store.merge_discovered(
            names,
            self.client.get_remote,
            ignore_duplicates=self.options.ignore_duplicate_remote,
        )
        logger.info("Discovered %d rclone remote(s)", len(added))
        return len(added)

    def history(self) -> Optional[SyncHistory]:
        """Sync history configured in the output section."""
        if self.config.output.sync_history:
            return SyncHistory(Path(self.config.output.sync_history))
        return None

    def run_tui(self) -> None:
        """Run the interactive front end until the user quits."""
        # Imported here: the terminal front end needs termios
        from galion.tui.app import TuiApp

        tui = TuiApp(
            self.store,
            self.client,
            poll_interval=self.config.jobs.poll_interval,
            refresh_interval=self.config.jobs.refresh_interval,
            history=self.history(),
            console=self.console.rich,
        )
        tui.run()
