"""Galion - rclone sync remotes in the terminal.

Keeps a list of named sync targets and drives asynchronous rclone sync
jobs through the rclone remote control API while showing their progress.
"""

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "GalionApp",
    "GalionError",
    "RemoteConfiguration",
    "RemoteStore",
    "RcloneClient",
    "JobTracker",
    "InteractionStateMachine",
    "EditBuffer",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "GalionApp":
        from galion.app import GalionApp

        return GalionApp
    if name == "GalionError":
        from galion.errors import GalionError

        return GalionError
    if name in ("RemoteConfiguration", "RemoteStore"):
        from galion import remotes

        return getattr(remotes, name)
    if name == "RcloneClient":
        from galion.rclone.client import RcloneClient

        return RcloneClient
    if name == "JobTracker":
        from galion.jobs.tracker import JobTracker

        return JobTracker
    if name in ("InteractionStateMachine", "EditBuffer"):
        from galion import tui

        return getattr(tui, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
