# Galion Jobs Module
# Job model, channels and the background job tracker

from galion.jobs.channels import ChannelClosed, Empty, Receiver, Sender, channel
from galion.jobs.messages import Command, Event, Shutdown, Snapshot, Submit, SubmitFailed, Terminated
from galion.jobs.model import (
    Done,
    JobState,
    JobStatus,
    JobsList,
    Pending,
    Sent,
    SyncJobIdentity,
)
from galion.jobs.tracker import JobTracker, TrackerThread, start_tracker

__all__ = [
    # Model
    "SyncJobIdentity",
    "JobStatus",
    "JobState",
    "JobsList",
    "Sent",
    "Pending",
    "Done",
    # Channels
    "channel",
    "Sender",
    "Receiver",
    "ChannelClosed",
    "Empty",
    # Messages
    "Command",
    "Event",
    "Submit",
    "Shutdown",
    "Snapshot",
    "SubmitFailed",
    "Terminated",
    # Tracker
    "JobTracker",
    "TrackerThread",
    "start_tracker",
]
