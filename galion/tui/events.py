# Galion UI Events
# User actions and the key bindings of each mode

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Action(str, Enum):
    """Input events understood by the interaction state machine."""

    # Normal mode
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    TRIGGER_JOB = "trigger_job"
    DELETE_REQUEST = "delete_request"
    DUPLICATE_REQUEST = "duplicate_request"
    EDIT_REQUEST = "edit_request"
    QUIT = "quit"

    # Confirm delete
    CONFIRM_YES = "confirm_yes"
    CONFIRM_NO = "confirm_no"

    # Error
    DISMISS = "dismiss"

    # Edit string
    NEXT_FIELD = "next_field"
    PREV_FIELD = "prev_field"
    CHARACTER = "character"
    BACKSPACE = "backspace"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    CANCEL = "cancel"
    COMMIT = "commit"

    # Any mode
    INTERRUPT = "interrupt"


@dataclass(frozen=True)
class InputEvent:
    """An action, plus the typed character for Action.CHARACTER."""

    action: Action
    char: Optional[str] = None


# Names produced by the key reader for non printable keys
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_ENTER = "enter"
KEY_ESCAPE = "esc"
KEY_TAB = "tab"
KEY_BACKTAB = "backtab"
KEY_BACKSPACE = "backspace"
KEY_DELETE = "delete"
KEY_CTRL_C = "ctrl-c"

SPECIAL_KEYS = frozenset(
    {
        KEY_UP,
        KEY_DOWN,
        KEY_LEFT,
        KEY_RIGHT,
        KEY_ENTER,
        KEY_ESCAPE,
        KEY_TAB,
        KEY_BACKTAB,
        KEY_BACKSPACE,
        KEY_DELETE,
        KEY_CTRL_C,
    }
)

NORMAL_KEYS: dict[str, Action] = {
    "j": Action.SELECT_NEXT,
    KEY_DOWN: Action.SELECT_NEXT,
    "k": Action.SELECT_PREVIOUS,
    KEY_UP: Action.SELECT_PREVIOUS,
    "s": Action.TRIGGER_JOB,
    KEY_RIGHT: Action.TRIGGER_JOB,
    KEY_ENTER: Action.TRIGGER_JOB,
    "d": Action.DELETE_REQUEST,
    KEY_DELETE: Action.DELETE_REQUEST,
    "c": Action.DUPLICATE_REQUEST,
    "e": Action.EDIT_REQUEST,
    "q": Action.QUIT,
}

CONFIRM_KEYS: dict[str, Action] = {
    "y": Action.CONFIRM_YES,
    "Y": Action.CONFIRM_YES,
    "n": Action.CONFIRM_NO,
    "N": Action.CONFIRM_NO,
    KEY_ESCAPE: Action.CONFIRM_NO,
}

ERROR_KEYS: dict[str, Action] = {
    KEY_ENTER: Action.DISMISS,
    KEY_ESCAPE: Action.DISMISS,
    "q": Action.DISMISS,
}

EDIT_KEYS: dict[str, Action] = {
    KEY_TAB: Action.NEXT_FIELD,
    KEY_DOWN: Action.NEXT_FIELD,
    KEY_BACKTAB: Action.PREV_FIELD,
    KEY_UP: Action.PREV_FIELD,
    KEY_LEFT: Action.CURSOR_LEFT,
    KEY_RIGHT: Action.CURSOR_RIGHT,
    KEY_BACKSPACE: Action.BACKSPACE,
    KEY_ENTER: Action.COMMIT,
    KEY_ESCAPE: Action.CANCEL,
}


def translate(key: str, keymap: dict[str, Action], *, text_input: bool = False) -> Optional[InputEvent]:
    """
    Translate a key into an input event for one mode.

    Args:
        key: Key name or the typed character.
        keymap: Bindings of the current mode.
        text_input: Whether unbound printable characters are typed text.

    Returns:
        The event, or None if the key means nothing in this mode.
    """
    if key == KEY_CTRL_C:
        return InputEvent(Action.INTERRUPT)
    if key in keymap:
        return InputEvent(keymap[key])
    if text_input and key not in SPECIAL_KEYS and len(key) == 1 and key.isprintable():
        return InputEvent(Action.CHARACTER, key)
    return None
