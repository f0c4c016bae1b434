# Galion Job Tracker Tests
# Poll-or-wait loop, failure policy and the tracker thread

import pytest

from galion.errors import RcloneDecodeError, RcloneError, StatusDecodeError, TrackerError
from galion.jobs.channels import channel
from galion.jobs.messages import Shutdown, Snapshot, Submit, SubmitFailed, Terminated
from galion.jobs.model import Done, JobStatus, Pending, Sent, SyncJobIdentity
from galion.jobs.tracker import JobTracker, TrackerThread, start_tracker

RUNNING = JobStatus(finished=False, success=False, duration_seconds=3.0, start_time="2025-01-01T10:00:00Z")
FINISHED = JobStatus(finished=True, success=True, duration_seconds=12.5, start_time="2025-01-01T10:00:00Z")

BACKUP = SyncJobIdentity.placeholder("backup", "/data", "remote:bucket")


def _tracker(client, *, shutdown_after_sleeps: int | None = None):
    """Build a tracker wired to fresh channels; optionally shut down after N sleeps."""
    cmd_tx, cmd_rx = channel()
    evt_tx, evt_rx = channel()
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if shutdown_after_sleeps is not None and len(sleeps) == shutdown_after_sleeps:
            cmd_tx.send(Shutdown())

    tracker = JobTracker(client, cmd_rx, evt_tx, poll_interval=0.25, sleep=fake_sleep)
    return tracker, cmd_tx, evt_rx, sleeps


def _snapshots(evt_rx):
    return [event.jobs for event in evt_rx.drain() if isinstance(event, Snapshot)]


class TestSubmitAndPoll:
    """Tests for the main job lifecycle."""

    def test_backup_scenario(self, fake_client):
        """Submit, one pending poll, one finished poll, then nothing changes."""
        fake_client.next_job_id = 7
        fake_client.status_scripts[7] = [RUNNING, FINISHED]
        tracker, cmd_tx, evt_rx, sleeps = _tracker(fake_client, shutdown_after_sleeps=2)

        cmd_tx.send(Submit(BACKUP))
        tracker.run()

        assert fake_client.submitted == [("/data", "remote:bucket")]
        job7 = BACKUP.with_job_id(7)
        snapshots = _snapshots(evt_rx)
        assert snapshots == [
            {job7: Pending(RUNNING)},
            {job7: Done(FINISHED)},
        ]
        assert tracker.jobs == {job7: Done(FINISHED)}
        assert sleeps == [0.25, 0.25]

    def test_done_jobs_are_not_polled_again(self, fake_client):
        fake_client.next_job_id = 7
        fake_client.status_scripts[7] = [FINISHED]
        fake_client.status_scripts[8] = [FINISHED]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client, shutdown_after_sleeps=1)

        cmd_tx.send(Submit(BACKUP))
        cmd_tx.send(Submit(SyncJobIdentity.placeholder("other", "/a", "b:")))
        tracker.run()

        # job 7 is polled once, then only job 8
        assert fake_client.status_calls.count(7) == 1
        assert all(isinstance(state, Done) for state in tracker.jobs.values())

    def test_placeholder_is_rekeyed(self, fake_client):
        fake_client.next_job_id = 42
        tracker, _, _, _ = _tracker(fake_client)

        assert tracker.submit(BACKUP) is True

        assert list(tracker.jobs) == [BACKUP.with_job_id(42)]
        assert tracker.jobs[BACKUP.with_job_id(42)] == Sent()

    def test_one_command_per_cycle(self, fake_client):
        """Queued commands are consumed one per poll cycle."""
        fake_client.status_scripts[1] = [RUNNING]
        fake_client.status_scripts[2] = [RUNNING]
        tracker, cmd_tx, evt_rx, sleeps = _tracker(fake_client, shutdown_after_sleeps=1)

        cmd_tx.send(Submit(BACKUP))
        cmd_tx.send(Submit(SyncJobIdentity.placeholder("second", "/b", "r:b")))
        tracker.run()

        snapshots = _snapshots(evt_rx)
        assert len(snapshots[0]) == 1
        assert len(snapshots[1]) == 2

    def test_snapshots_are_sorted_by_identity(self, fake_client):
        fake_client.next_job_id = 5
        tracker, _, _, _ = _tracker(fake_client)
        tracker.submit(SyncJobIdentity.placeholder("zeta", "/z", "r:z"))
        fake_client.next_job_id = 2
        tracker.submit(SyncJobIdentity.placeholder("alpha", "/a", "r:a"))

        assert [identity.job_id for identity in tracker.jobs] == [2, 5]

    def test_snapshot_is_a_copy(self, fake_client):
        fake_client.status_scripts[1] = [RUNNING]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client, shutdown_after_sleeps=1)
        cmd_tx.send(Submit(BACKUP))
        tracker.run()

        snapshot = _snapshots(evt_rx)[0]
        snapshot.clear()
        assert len(tracker.jobs) == 1


class TestIdleAndShutdown:
    """Tests for blocking, shutdown and disconnection."""

    def test_shutdown_when_idle(self, fake_client):
        tracker, cmd_tx, evt_rx, sleeps = _tracker(fake_client)
        cmd_tx.send(Shutdown())

        tracker.run()

        assert sleeps == []
        assert evt_rx.drain() == []

    def test_closed_command_channel_when_idle(self, fake_client):
        tracker, cmd_tx, _, _ = _tracker(fake_client)
        cmd_tx.close()

        tracker.run()

    def test_receiver_disconnect_stops_loop(self, fake_client):
        fake_client.status_scripts[1] = [RUNNING]
        tracker, cmd_tx, evt_rx, sleeps = _tracker(fake_client)
        evt_rx.close()
        cmd_tx.send(Submit(BACKUP))

        tracker.run()

        assert sleeps == []
        assert fake_client.status_calls == [1]

    def test_event_channel_closed_on_exit(self, fake_client):
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client)
        cmd_tx.send(Shutdown())

        tracker.run()

        assert evt_rx.disconnected


class TestFailurePolicy:
    """Tests for transient and fatal errors."""

    def test_transport_error_leaves_state(self, fake_client):
        fake_client.status_scripts[1] = [RcloneError("connection refused"), FINISHED]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client, shutdown_after_sleeps=2)
        cmd_tx.send(Submit(BACKUP))

        tracker.run()

        job = BACKUP.with_job_id(1)
        assert _snapshots(evt_rx) == [{job: Sent()}, {job: Done(FINISHED)}]

    def test_pending_stays_pending_on_transport_error(self, fake_client):
        fake_client.status_scripts[1] = [RUNNING, RcloneError("timeout")]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client, shutdown_after_sleeps=2)
        cmd_tx.send(Submit(BACKUP))

        tracker.run()

        job = BACKUP.with_job_id(1)
        assert _snapshots(evt_rx) == [{job: Pending(RUNNING)}] * 3

    def test_decode_error_is_fatal(self, fake_client):
        fake_client.status_scripts[1] = [StatusDecodeError("missing 'finished'")]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client)
        cmd_tx.send(Submit(BACKUP))

        with pytest.raises(StatusDecodeError):
            tracker.run()

        events = evt_rx.drain()
        assert isinstance(events[-1], Terminated)
        assert "missing 'finished'" in events[-1].reason
        assert evt_rx.disconnected

    def test_decode_error_with_front_end_gone(self, fake_client):
        fake_client.status_scripts[1] = [StatusDecodeError("garbage")]
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client)
        evt_rx.close()
        cmd_tx.send(Submit(BACKUP))

        with pytest.raises(StatusDecodeError):
            tracker.run()

    def test_submit_failure_is_reported(self, fake_client):
        fake_client.submit_error = RcloneError("directory not found")
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client)
        cmd_tx.send(Submit(BACKUP))
        cmd_tx.send(Shutdown())

        tracker.run()

        events = evt_rx.drain()
        assert events == [SubmitFailed(BACKUP, "directory not found")]
        assert tracker.jobs == {}

    def test_submit_failure_is_not_retried(self, fake_client):
        fake_client.submit_error = RcloneError("down")
        tracker, cmd_tx, _, _ = _tracker(fake_client)
        cmd_tx.send(Submit(BACKUP))
        cmd_tx.send(Shutdown())

        tracker.run()

        assert fake_client.submitted == []
        assert tracker.jobs == {}

    def test_malformed_submit_response_is_fatal(self, fake_client):
        fake_client.submit_error = RcloneDecodeError("no job id")
        tracker, cmd_tx, evt_rx, _ = _tracker(fake_client)
        cmd_tx.send(Submit(BACKUP))

        with pytest.raises(RcloneDecodeError):
            tracker.run()

        assert isinstance(evt_rx.drain()[-1], Terminated)


class TestTrackerThread:
    """Tests for running the tracker in a thread."""

    def test_end_to_end(self, fake_client):
        fake_client.status_scripts[1] = [RUNNING, FINISHED]
        thread, commands, events = start_tracker(fake_client, poll_interval=0.01)

        commands.send(Submit(BACKUP))
        final = None
        for _ in range(200):
            event = events.recv(timeout=2)
            assert isinstance(event, Snapshot)
            if all(isinstance(state, Done) for state in event.jobs.values()):
                final = event.jobs
                break

        commands.send(Shutdown())
        thread.join(timeout=2)
        assert final == {BACKUP.with_job_id(1): Done(FINISHED)}

    def test_join_raises_tracker_error(self, fake_client):
        fake_client.status_scripts[1] = [StatusDecodeError("bad payload")]
        thread, commands, events = start_tracker(fake_client, poll_interval=0.01)
        commands.send(Submit(BACKUP))

        event = events.recv(timeout=2)
        while isinstance(event, Snapshot):
            event = events.recv(timeout=2)
        assert isinstance(event, Terminated)

        with pytest.raises(TrackerError) as exc_info:
            thread.join(timeout=2)
        assert isinstance(exc_info.value.cause, StatusDecodeError)

    def test_clean_join(self, fake_client):
        cmd_tx, cmd_rx = channel()
        evt_tx, _ = channel()
        thread = TrackerThread(JobTracker(fake_client, cmd_rx, evt_tx))
        thread.start()
        cmd_tx.send(Shutdown())

        thread.join(timeout=2)

        assert thread.error is None
