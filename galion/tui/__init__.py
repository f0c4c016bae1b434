# Galion TUI Module
# Interaction state machine, edit buffer and terminal front end

from galion.tui.edit import EditBuffer, EditField
from galion.tui.events import Action, InputEvent
from galion.tui.state import (
    ConfirmDelete,
    EditString,
    ErrorMode,
    InteractionStateMachine,
    Normal,
)

__all__ = [
    "EditBuffer",
    "EditField",
    "Action",
    "InputEvent",
    "InteractionStateMachine",
    "Normal",
    "ErrorMode",
    "ConfirmDelete",
    "EditString",
]
