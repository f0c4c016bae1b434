# Galion Output Module
# Rich console output and sync history

from galion.output.console import Console, create_console, logo
from galion.output.history import SyncHistory

__all__ = [
    "Console",
    "create_console",
    "logo",
    "SyncHistory",
]
