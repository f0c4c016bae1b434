# Galion Job Tracker
# Background worker submitting sync jobs and polling their status

import logging
import threading
import time
from collections.abc import Callable
from queue import Empty
from typing import Optional, Protocol

from galion.errors import RcloneError, TrackerError
from galion.jobs.channels import ChannelClosed, Receiver, Sender, channel
from galion.jobs.messages import Command, Event, Shutdown, Snapshot, Submit, SubmitFailed, Terminated
from galion.jobs.model import Done, JobsList, JobStatus, Sent, SyncJobIdentity, next_state, snapshot

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5


class SyncClient(Protocol):
    """The part of the rclone client the tracker needs."""

    def submit_sync(self, source: str, destination: str, is_async: bool = True) -> int: ...

    def job_status(self, job_id: int) -> JobStatus: ...


class JobTracker:
    """
    Owner of the jobs list.

    Runs the poll-or-wait loop: while any job is sent or pending it polls
    every unfinished job, publishes a snapshot and checks for one command,
    sleeping between cycles; when nothing is outstanding it blocks on the
    command channel.

    The jobs list is never shared. The front end only sees the snapshots.
    """

    def __init__(
        self,
        client: SyncClient,
        commands: Receiver[Command],
        events: Sender[Event],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the tracker.

        Args:
            client: rclone client used for submissions and status polls.
            commands: Commands from the front end.
            events: Snapshots and notifications for the front end.
            poll_interval: Seconds to wait between poll cycles while jobs run.
            sleep: Sleep function, replaceable in tests.
        """
        self._client = client
        self._commands = commands
        self._events = events
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._jobs: JobsList = {}

    @property
    def jobs(self) -> JobsList:
        """Sorted copy of the jobs list."""
        return snapshot(self._jobs)

    def has_waiting(self) -> bool:
        """Check if any job is sent or pending."""
        return any(not state.done for state in self._jobs.values())

    def run(self) -> None:
        """
        Run until shut down or disconnected.

        Raises:
            RcloneDecodeError: If rclone answered with a malformed payload.
        """
        try:
            self._loop()
        except Exception as e:
            logger.error("Job tracker stopped: %s", e)
            self._notify_terminated(str(e))
            raise
        finally:
            self._events.close()

    def _loop(self) -> None:
        while True:
            if self.has_waiting():
                self.poll_jobs()
                try:
                    self._events.send(Snapshot(self.jobs))
                except ChannelClosed:
                    logger.debug("Front end closed the event channel")
                    return
                try:
                    command = self._commands.try_recv()
                except Empty:
                    self._sleep(self.poll_interval)
                    continue
                except ChannelClosed:
                    return
            else:
                try:
                    command = self._commands.recv()
                except ChannelClosed:
                    logger.debug("Front end closed the command channel")
                    return

            if not self.handle(command):
                return

    def handle(self, command: Command) -> bool:
        """
        Execute one command.

        Returns:
            False if the tracker must stop.
        """
        if isinstance(command, Shutdown):
            logger.debug("Shutdown requested")
            return False
        if isinstance(command, Submit):
            return self.submit(command.identity)
        logger.warning("Ignoring unknown command: %r", command)
        return True

    def submit(self, identity: SyncJobIdentity) -> bool:
        """
        Submit a sync job and start tracking it.

        Submission failures are reported to the front end and never retried.

        Returns:
            False if the front end is gone.
        """
        try:
            job_id = self._client.submit_sync(identity.source, identity.destination)
        except RcloneError as e:
            logger.warning("Failed to submit %s: %s", identity.name, e)
            try:
                self._events.send(SubmitFailed(identity, str(e)))
            except ChannelClosed:
                return False
            return True

        key = identity.with_job_id(job_id)
        self._jobs[key] = Sent()
        logger.info("Submitted job %d: %s -> %s", job_id, key.source, key.destination)
        return True

    def poll_jobs(self) -> None:
        """
        Refresh the state of every unfinished job.

        Transport errors leave the job untouched until the next cycle;
        decode errors propagate.
        """
        for identity, state in list(self._jobs.items()):
            if state.done:
                continue
            try:
                status = self._client.job_status(identity.job_id)
            except RcloneError as e:
                logger.debug("Status of job %d unavailable: %s", identity.job_id, e)
                continue
            new_state = next_state(state, status)
            if isinstance(new_state, Done):
                logger.info(
                    "Job %d finished (success=%s, %.1fs)",
                    identity.job_id,
                    status.success,
                    status.duration_seconds,
                )
            self._jobs[identity] = new_state

    def _notify_terminated(self, reason: str) -> None:
        try:
            self._events.send(Terminated(reason))
        except ChannelClosed:
            logger.debug("Front end gone, termination not delivered")


class TrackerThread(threading.Thread):
    """Runs a JobTracker and keeps the error it stopped with."""

    def __init__(self, tracker: JobTracker):
        super().__init__(name="galion-job-tracker", daemon=True)
        self.tracker = tracker
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.tracker.run()
        except Exception as e:
            self.error = e

    def join(self, timeout: Optional[float] = None) -> None:
        """
        Wait for the tracker to stop.

        Raises:
            TrackerError: If the tracker is still running after timeout or stopped with an error.
        """
        super().join(timeout)
        if self.is_alive():
            raise TrackerError("Job tracker did not stop")
        if self.error is not None:
            raise TrackerError("Job tracker failed", cause=self.error)


def start_tracker(
    client: SyncClient,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> tuple[TrackerThread, Sender[Command], Receiver[Event]]:
    """
    Wire up the channel pair and start a tracker thread.

    Returns:
        Tuple of (thread, command sender, event receiver).
    """
    command_tx, command_rx = channel()
    event_tx, event_rx = channel()
    tracker = JobTracker(client, command_rx, event_tx, poll_interval=poll_interval)
    thread = TrackerThread(tracker)
    thread.start()
    return thread, command_tx, event_rx
