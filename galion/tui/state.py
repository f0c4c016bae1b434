# Galion Interaction State Machine
# Modes of the front end and the transitions between them

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from galion.errors import PersistenceError
from galion.jobs.channels import ChannelClosed, Sender
from galion.jobs.messages import Command, Shutdown, Submit
from galion.jobs.model import SyncJobIdentity
from galion.remotes.model import ConfigOrigin, RemoteConfiguration
from galion.remotes.store import RemoteStore
from galion.tui.edit import EditBuffer
from galion.tui.events import (
    CONFIRM_KEYS,
    EDIT_KEYS,
    ERROR_KEYS,
    NORMAL_KEYS,
    Action,
    InputEvent,
    translate,
)

logger = logging.getLogger(__name__)

MISSING_SOURCE = "Remote doesn't have a source - edit it to set one"
MISSING_DESTINATION = "Remote doesn't have a destination - edit it to set one"


@dataclass
class Normal:
    """Browsing the remotes table."""


@dataclass
class ErrorMode:
    """Modal error message, only dismiss is accepted."""

    message: str


@dataclass
class ConfirmDelete:
    """Modal yes/no before deleting the remote at index."""

    index: int


@dataclass
class EditString:
    """Modal editor for the remote at index."""

    index: int
    origin: ConfigOrigin
    buffer: EditBuffer = field(default_factory=EditBuffer)


Mode = Union[Normal, ErrorMode, ConfirmDelete, EditString]


class InteractionStateMachine:
    """
    Routes input events according to the current mode.

    Every accepted (mode, action) pair is listed in TRANSITIONS; any other
    event is ignored. Ctrl-C is accepted in every mode and stops the front
    end after asking the job tracker to shut down.
    """

    TRANSITIONS: dict[tuple[type, Action], str] = {
        (Normal, Action.SELECT_NEXT): "_select_next",
        (Normal, Action.SELECT_PREVIOUS): "_select_previous",
        (Normal, Action.TRIGGER_JOB): "_trigger_job",
        (Normal, Action.DELETE_REQUEST): "_delete_request",
        (Normal, Action.DUPLICATE_REQUEST): "_duplicate_request",
        (Normal, Action.EDIT_REQUEST): "_edit_request",
        (Normal, Action.QUIT): "_quit",
        (ConfirmDelete, Action.CONFIRM_YES): "_confirm_delete",
        (ConfirmDelete, Action.CONFIRM_NO): "_back_to_normal",
        (ConfirmDelete, Action.CANCEL): "_back_to_normal",
        (ErrorMode, Action.DISMISS): "_back_to_normal",
        (EditString, Action.NEXT_FIELD): "_next_field",
        (EditString, Action.PREV_FIELD): "_previous_field",
        (EditString, Action.CHARACTER): "_insert_char",
        (EditString, Action.BACKSPACE): "_backspace",
        (EditString, Action.CURSOR_LEFT): "_cursor_left",
        (EditString, Action.CURSOR_RIGHT): "_cursor_right",
        (EditString, Action.CANCEL): "_back_to_normal",
        (EditString, Action.COMMIT): "_commit",
    }

    KEYMAPS: dict[type, dict[str, Action]] = {
        Normal: NORMAL_KEYS,
        ConfirmDelete: CONFIRM_KEYS,
        ErrorMode: ERROR_KEYS,
        EditString: EDIT_KEYS,
    }

    def __init__(self, store: RemoteStore, commands: Sender[Command]):
        """
        Initialize in Normal mode with the first remote selected.

        Args:
            store: Remotes shown in the table.
            commands: Command channel of the job tracker.
        """
        self.store = store
        self.commands = commands
        self.mode: Mode = Normal()
        self.selected = 0
        self.running = True

    @property
    def selected_remote(self) -> Optional[RemoteConfiguration]:
        return self.store.get(self.selected)

    def handle_key(self, key: str) -> bool:
        """
        Translate a key for the current mode and handle it.

        Returns:
            False once the front end must stop.
        """
        event = translate(key, self.KEYMAPS[type(self.mode)], text_input=isinstance(self.mode, EditString))
        if event is None:
            return self.running
        return self.handle(event)

    def handle(self, event: Union[InputEvent, Action]) -> bool:
        """
        Handle one input event.

        Returns:
            False once the front end must stop.
        """
        if isinstance(event, Action):
            event = InputEvent(event)

        if event.action == Action.INTERRUPT:
            self._quit(event)
            return self.running

        handler = self.TRANSITIONS.get((type(self.mode), event.action))
        if handler is not None:
            getattr(self, handler)(event)
        return self.running

    def raise_error(self, message: str) -> None:
        """Show a modal error."""
        logger.debug("Error shown to user: %s", message)
        self.mode = ErrorMode(message)

    # Normal mode

    def _select_next(self, event: InputEvent) -> None:
        if len(self.store):
            self.selected = min(self.selected + 1, len(self.store) - 1)

    def _select_previous(self, event: InputEvent) -> None:
        self.selected = max(self.selected - 1, 0)

    def _trigger_job(self, event: InputEvent) -> None:
        remote = self.selected_remote
        if remote is None:
            return
        if not remote.source_locator:
            self.raise_error(MISSING_SOURCE)
            return
        if not remote.destination_locator:
            self.raise_error(MISSING_DESTINATION)
            return

        identity = SyncJobIdentity.placeholder(
            remote.remote_name,
            remote.source_locator,
            remote.destination_locator,
        )
        try:
            self.commands.send(Submit(identity))
        except ChannelClosed:
            self.raise_error("Job tracker is not running")

    def _delete_request(self, event: InputEvent) -> None:
        remote = self.selected_remote
        if remote is None:
            return
        if remote.is_discovered:
            self.raise_error(f"Remote {remote.remote_name} comes from the rclone configuration and cannot be deleted")
            return
        self.mode = ConfirmDelete(self.selected)

    def _duplicate_request(self, event: InputEvent) -> None:
        remote = self.selected_remote
        if remote is None:
            return
        if remote.is_discovered:
            self.raise_error(f"Remote {remote.remote_name} comes from the rclone configuration and cannot be duplicated")
            return
        self.store.duplicate(self.selected)
        self.selected = 0
        self._persist()

    def _edit_request(self, event: InputEvent) -> None:
        remote = self.selected_remote
        if remote is None:
            return
        self.mode = EditString(
            index=self.selected,
            origin=remote.origin,
            buffer=EditBuffer.from_remote(remote),
        )

    def _quit(self, event: InputEvent) -> None:
        try:
            self.commands.send(Shutdown())
        except ChannelClosed:
            logger.debug("Job tracker already stopped")
        self.running = False

    # Modal modes

    def _back_to_normal(self, event: InputEvent) -> None:
        self.mode = Normal()

    def _confirm_delete(self, event: InputEvent) -> None:
        if not isinstance(self.mode, ConfirmDelete):
            return
        removed = self.store.remove(self.mode.index)
        logger.info("Deleted remote %s", removed.remote_name)
        self.selected = max(min(self.selected, len(self.store) - 1), 0)
        self.mode = Normal()
        self._persist()

    def _next_field(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None:
            buffer.next_field()

    def _previous_field(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None:
            buffer.previous_field()

    def _insert_char(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None and event.char:
            buffer.insert(event.char)

    def _backspace(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None:
            buffer.delete_before_cursor()

    def _cursor_left(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None:
            buffer.move_left()

    def _cursor_right(self, event: InputEvent) -> None:
        buffer = self._edit_buffer()
        if buffer is not None:
            buffer.move_right()

    def _commit(self, event: InputEvent) -> None:
        if not isinstance(self.mode, EditString):
            return
        edited = self.mode.buffer.to_remote()
        if self.mode.origin == ConfigOrigin.USER_DEFINED:
            self.store.replace(self.mode.index, edited)
        else:
            # rclone owns the original, keep it and add ours on top
            self.store.insert_head(edited)
            self.selected = 0
        self.mode = Normal()
        self._persist()

    def _edit_buffer(self) -> Optional[EditBuffer]:
        """Buffer of the edit popup, None outside of it."""
        if isinstance(self.mode, EditString):
            return self.mode.buffer
        return None

    def _persist(self) -> None:
        try:
            self.store.save()
        except PersistenceError as e:
            self.raise_error(str(e))
