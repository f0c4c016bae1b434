# Galion Job Model
# Job identities, statuses and states tracked by the job tracker

from dataclasses import dataclass, replace
from typing import Union

# Job id used before rclone assigned one
PLACEHOLDER_JOB_ID = 0


@dataclass(frozen=True, order=True)
class SyncJobIdentity:
    """
    Identity of one submitted sync job.

    Ordered by job id first, then by the remaining fields.
    """

    job_id: int
    name: str
    source: str
    destination: str

    @classmethod
    def placeholder(cls, name: str, source: str, destination: str) -> "SyncJobIdentity":
        """Create an identity that has not been submitted yet."""
        return cls(job_id=PLACEHOLDER_JOB_ID, name=name, source=source, destination=destination)

    def with_job_id(self, job_id: int) -> "SyncJobIdentity":
        """Re-key the identity with the id assigned by rclone."""
        return replace(self, job_id=job_id)


@dataclass(frozen=True)
class JobStatus:
    """Status of a job as reported by rclone 'job/status'."""

    finished: bool = False
    success: bool = False
    duration_seconds: float = 0.0
    error: str = ""
    start_time: str = ""


@dataclass(frozen=True)
class Sent:
    """Submitted, no status received yet."""

    label = "sent"
    done = False


@dataclass(frozen=True)
class Pending:
    """rclone reports the job as not finished."""

    status: JobStatus
    label = "running"
    done = False


@dataclass(frozen=True)
class Done:
    """rclone reports the job as finished. Final for the session."""

    status: JobStatus
    label = "done"
    done = True


JobState = Union[Sent, Pending, Done]

JobsList = dict[SyncJobIdentity, JobState]


def next_state(current: JobState, status: JobStatus) -> JobState:
    """
    Compute the state following a status report.

    Done entries never change; otherwise the report decides between
    Pending and Done.
    """
    if isinstance(current, Done):
        return current
    if status.finished:
        return Done(status)
    return Pending(status)


def is_waiting(state: JobState) -> bool:
    """Check if a job still needs polling."""
    return not state.done


def snapshot(jobs: JobsList) -> JobsList:
    """Copy of the jobs list sorted by identity."""
    return dict(sorted(jobs.items()))
