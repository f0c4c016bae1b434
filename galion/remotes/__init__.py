# Galion Remotes Module
# Remote configurations and their in-memory store

from galion.remotes.model import ConfigOrigin, RemoteConfiguration
from galion.remotes.store import RemoteStore

__all__ = [
    "ConfigOrigin",
    "RemoteConfiguration",
    "RemoteStore",
]
