# Galion Terminal UI
# Render/input loop of the front end and its link to the job tracker

import logging
from queue import Empty
from typing import Optional

from rich.console import Console
from rich.live import Live

from galion.errors import TrackerError
from galion.jobs.channels import ChannelClosed, Receiver, Sender
from galion.jobs.messages import Command, Event, Shutdown, Snapshot, SubmitFailed, Terminated
from galion.jobs.model import JobsList
from galion.jobs.tracker import DEFAULT_POLL_INTERVAL, SyncClient, start_tracker
from galion.output.history import SyncHistory
from galion.remotes.store import RemoteStore
from galion.tui.keys import KeyReader
from galion.tui.state import InteractionStateMachine
from galion.tui.view import render

logger = logging.getLogger(__name__)


class TuiApp:
    """
    Interactive front end.

    Each cycle drains the snapshot channel, redraws the screen and waits a
    bounded time for a key, so job progress shows up without user input.
    """

    def __init__(
        self,
        store: RemoteStore,
        client: SyncClient,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        refresh_interval: float = 1.0,
        history: Optional[SyncHistory] = None,
        console: Optional[Console] = None,
        join_timeout: float = 10.0,
    ):
        """
        Initialize the front end.

        Args:
            store: Remotes to show and edit.
            client: rclone client handed to the job tracker.
            poll_interval: Job tracker poll interval in seconds.
            refresh_interval: Longest wait for a key before redrawing.
            history: Optional sync history receiving finished jobs.
            console: Rich console to draw on.
            join_timeout: Seconds to wait for the job tracker on exit.
        """
        self.store = store
        self.client = client
        self.poll_interval = poll_interval
        self.refresh_interval = refresh_interval
        self.history = history
        self.console = console or Console()
        self.join_timeout = join_timeout
        self.jobs: JobsList = {}
        self.machine: Optional[InteractionStateMachine] = None

    def run(self) -> None:
        """
        Run until the user quits.

        Raises:
            TrackerError: If the job tracker failed or could not be stopped.
        """
        thread, commands, events = start_tracker(self.client, poll_interval=self.poll_interval)
        self.machine = InteractionStateMachine(self.store, commands)
        try:
            self._loop(events)
        finally:
            self._close_channels(commands, events)
        thread.join(self.join_timeout)

    def _loop(self, events: Receiver[Event]) -> None:
        if self.machine is None:
            return
        with KeyReader() as keys, Live(console=self.console, screen=True, auto_refresh=False) as live:
            while self.machine.running:
                self.drain_events(events)
                live.update(render(self.machine, self.jobs), refresh=True)
                key = keys.read_key(self.refresh_interval)
                if key is not None:
                    self.machine.handle_key(key)

    def drain_events(self, events: Receiver[Event]) -> None:
        """
        Apply every queued event from the job tracker.

        Raises:
            TrackerError: If the tracker terminated or vanished.
        """
        while True:
            try:
                event = events.try_recv()
            except Empty:
                return
            except ChannelClosed:
                raise TrackerError("Job tracker stopped unexpectedly")
            self.process_event(event)

    def process_event(self, event: Event) -> None:
        """Apply one event from the job tracker."""
        if isinstance(event, Snapshot):
            self.jobs = event.jobs
            self._record_history(event.jobs)
        elif isinstance(event, SubmitFailed) and self.machine is not None:
            self.machine.raise_error(f"Failed to start sync of {event.identity.name}: {event.message}")
        elif isinstance(event, Terminated):
            raise TrackerError(f"Job tracker terminated: {event.reason}")

    def _record_history(self, jobs: JobsList) -> None:
        if self.history is None:
            return
        try:
            self.history.record(jobs)
        except OSError as e:
            logger.warning("Cannot write sync history %s: %s", self.history.path, e)

    def _close_channels(self, commands: Sender[Command], events: Receiver[Event]) -> None:
        if self.machine is None or self.machine.running:
            # Leaving on an exception, the state machine did not say goodbye
            try:
                commands.send(Shutdown())
            except ChannelClosed:
                logger.debug("Job tracker already stopped")
        commands.close()
        events.close()
