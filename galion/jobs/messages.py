# Galion Job Messages
# Commands sent to the job tracker and events sent back to the front end

from dataclasses import dataclass
from typing import Union

from galion.jobs.model import JobsList, SyncJobIdentity


@dataclass(frozen=True)
class Submit:
    """Start a sync job. The identity carries the placeholder id."""

    identity: SyncJobIdentity


@dataclass(frozen=True)
class Shutdown:
    """Stop the job tracker."""


@dataclass(frozen=True)
class Snapshot:
    """Complete copy of the jobs list at the time it was taken."""

    jobs: JobsList


@dataclass(frozen=True)
class SubmitFailed:
    """rclone refused or never received a submission."""

    identity: SyncJobIdentity
    message: str


@dataclass(frozen=True)
class Terminated:
    """The job tracker stopped because of a fatal error."""

    reason: str


Command = Union[Submit, Shutdown]
Event = Union[Snapshot, SubmitFailed, Terminated]
