# Galion Remote Store
# Ordered in-memory list of remote configurations

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any, Optional

import yaml

from galion.config.loader import save_config
from galion.config.schema import GalionConfig, RemoteRecord
from galion.errors import PersistenceError
from galion.remotes.model import ConfigOrigin, RemoteConfiguration


class RemoteStore:
    """
    Ordered list of remote configurations.

    Owned by the front end. User defined remotes are persisted to the
    galion configuration file; discovered remotes only live in memory.
    """

    def __init__(
        self,
        remotes: Optional[Iterable[RemoteConfiguration]] = None,
        *,
        config: Optional[GalionConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the store.

        Args:
            remotes: Initial remotes, in display order.
            config: Configuration the user defined remotes are written into.
            config_path: File the configuration is saved to.
        """
        self._remotes: list[RemoteConfiguration] = list(remotes or [])
        self.config = config or GalionConfig()
        self.config_path = config_path

    @classmethod
    def from_config(cls, config: GalionConfig, config_path: Optional[Path] = None) -> "RemoteStore":
        """Build a store from the remotes of a loaded configuration."""
        remotes = [
            RemoteConfiguration(
                remote_name=record.remote_name,
                source_locator=record.source_locator,
                destination_locator=record.destination_locator,
                origin=ConfigOrigin.USER_DEFINED,
            )
            for record in config.remotes
        ]
        return cls(remotes, config=config, config_path=config_path)

    def __len__(self) -> int:
        return len(self._remotes)

    def __iter__(self) -> Iterator[RemoteConfiguration]:
        return iter(self._remotes)

    @property
    def remotes(self) -> list[RemoteConfiguration]:
        """Snapshot of the remotes, in display order."""
        return list(self._remotes)

    def get(self, index: int) -> Optional[RemoteConfiguration]:
        """Get the remote at index, or None if out of range."""
        if 0 <= index < len(self._remotes):
            return self._remotes[index]
        return None

    def find(self, name: str) -> Optional[RemoteConfiguration]:
        """Get the first remote with the given name."""
        for remote in self._remotes:
            if remote.remote_name == name:
                return remote
        return None

    def contains_name(self, name: str) -> bool:
        """Check if any remote has the given name."""
        return self.find(name) is not None

    def insert_head(self, remote: RemoteConfiguration) -> None:
        """Insert a remote at the top of the list."""
        self._remotes.insert(0, remote)

    def append(self, remote: RemoteConfiguration) -> None:
        """Append a remote at the end of the list."""
        self._remotes.append(remote)

    def replace(self, index: int, remote: RemoteConfiguration) -> None:
        """Replace the remote at index."""
        self._remotes[index] = remote

    def remove(self, index: int) -> RemoteConfiguration:
        """Remove and return the remote at index."""
        return self._remotes.pop(index)

    def duplicate(self, index: int) -> RemoteConfiguration:
        """Insert a user defined copy of the remote at index at the top of the list."""
        clone = self._remotes[index].copy()
        clone.origin = ConfigOrigin.USER_DEFINED
        self.insert_head(clone)
        return clone

    def merge_discovered(
        self,
        names: Iterable[str],
        lookup: Callable[[str], dict[str, Any]],
        *,
        ignore_duplicates: bool = False,
    ) -> list[RemoteConfiguration]:
        """
        Append remotes found in the rclone configuration.

        Args:
            names: Remote names reported by rclone.
            lookup: Returns the rclone parameters of a remote.
            ignore_duplicates: Skip names already present in the store.

        Returns:
            The remotes that were added.
        """
        added: list[RemoteConfiguration] = []
        for name in names:
            if ignore_duplicates and self.contains_name(name):
                continue
            parameters = lookup(name) or {}
            destination = parameters.get("remote")
            if not isinstance(destination, str) or not destination:
                destination = f"{name}:"
            remote = RemoteConfiguration(
                remote_name=name,
                source_locator=None,
                destination_locator=destination,
                origin=ConfigOrigin.EXTERNALLY_DISCOVERED,
            )
            self._remotes.append(remote)
            added.append(remote)
        return added

    def user_defined(self) -> list[RemoteConfiguration]:
        """Remotes that belong to the galion configuration."""
        return [remote for remote in self._remotes if remote.origin == ConfigOrigin.USER_DEFINED]

    def save(self) -> Path:
        """
        Persist the user defined remotes.

        Returns:
            Path the configuration was written to.

        Raises:
            PersistenceError: If the configuration cannot be written.
        """
        self.config.remotes = [RemoteRecord(**remote.to_record()) for remote in self.user_defined()]
        try:
            return save_config(self.config, self.config_path)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError("Failed to save the remotes", cause=e)
