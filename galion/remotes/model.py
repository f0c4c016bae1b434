# Galion Remote Model
# Remote configurations shown in the remotes table

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class ConfigOrigin(str, Enum):
    """Where a remote configuration comes from."""

    USER_DEFINED = "user_defined"
    EXTERNALLY_DISCOVERED = "externally_discovered"


@dataclass
class RemoteConfiguration:
    """
    A named pairing of a source and a destination.

    Remotes discovered in the rclone configuration are owned by rclone:
    they are never deleted or duplicated, and editing one produces a new
    user defined entry.
    """

    remote_name: str
    source_locator: Optional[str] = None
    destination_locator: Optional[str] = None
    origin: ConfigOrigin = ConfigOrigin.USER_DEFINED

    @property
    def is_discovered(self) -> bool:
        """Check if the remote comes from the rclone configuration."""
        return self.origin == ConfigOrigin.EXTERNALLY_DISCOVERED

    def copy(self) -> "RemoteConfiguration":
        """Return an independent copy."""
        return replace(self)

    def to_record(self) -> dict[str, Any]:
        """Convert to the persisted record layout."""
        return {
            "remote_name": self.remote_name,
            "source_locator": self.source_locator,
            "destination_locator": self.destination_locator,
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "RemoteConfiguration":
        """Create a user defined remote from a persisted record."""
        return cls(
            remote_name=data.get("remote_name", ""),
            source_locator=data.get("source_locator"),
            destination_locator=data.get("destination_locator"),
        )

    def to_table_row(self) -> list[str]:
        """Translate to a row of the remotes table."""
        return [
            self.remote_name,
            self.source_locator or "",
            self.destination_locator or "",
        ]
