# Galion Edit Buffer
# Cursor based text editing of a remote's name, source and destination

from dataclasses import dataclass
from enum import Enum

from galion.remotes.model import ConfigOrigin, RemoteConfiguration


class EditField(str, Enum):
    """Field of the edit popup, in tab order."""

    NAME = "name"
    SOURCE = "source"
    DESTINATION = "destination"

    def next(self) -> "EditField":
        members = list(EditField)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "EditField":
        members = list(EditField)
        return members[(members.index(self) - 1) % len(members)]


@dataclass
class EditBuffer:
    """
    Text of the three editable fields plus a cursor.

    The cursor is a character index into the active field, always within
    [0, len(text)]. Byte offsets are only derived when a caller needs them.
    """

    active_field: EditField = EditField.NAME
    cursor: int = 0
    name: str = ""
    source: str = ""
    destination: str = ""

    @classmethod
    def from_remote(cls, remote: RemoteConfiguration) -> "EditBuffer":
        """Populate a buffer from a remote, cursor at the end of the name."""
        buffer = cls(
            active_field=EditField.NAME,
            name=remote.remote_name,
            source=remote.source_locator or "",
            destination=remote.destination_locator or "",
        )
        buffer.reset_to_end()
        return buffer

    def to_remote(self) -> RemoteConfiguration:
        """Build a user defined remote. Empty locators become None."""
        return RemoteConfiguration(
            remote_name=self.name,
            source_locator=self.source or None,
            destination_locator=self.destination or None,
            origin=ConfigOrigin.USER_DEFINED,
        )

    @property
    def text(self) -> str:
        """Text of the active field."""
        return getattr(self, self.active_field.value)

    @text.setter
    def text(self, value: str) -> None:
        setattr(self, self.active_field.value, value)

    def char_count(self) -> int:
        return len(self.text)

    def byte_offset(self) -> int:
        """UTF-8 byte offset of the cursor in the active field."""
        return len(self.text[: self.cursor].encode("utf-8"))

    def insert(self, char: str) -> None:
        """Insert a character at the cursor and move past it."""
        if len(char) != 1:
            raise ValueError(f"expected a single character, got {char!r}")
        chars = list(self.text)
        chars.insert(self.cursor, char)
        self.text = "".join(chars)
        self.cursor += 1

    def delete_before_cursor(self) -> None:
        """Remove the character left of the cursor, if any."""
        if self.cursor == 0:
            return
        removed = self.cursor - 1
        self.text = "".join(c for i, c in enumerate(self.text) if i != removed)
        self.cursor = removed

    def move_left(self) -> None:
        self.cursor = max(self.cursor - 1, 0)

    def move_right(self) -> None:
        self.cursor = min(self.cursor + 1, self.char_count())

    def reset_to_end(self) -> None:
        """Put the cursor after the last character of the active field."""
        self.cursor = self.char_count()

    def next_field(self) -> None:
        self.active_field = self.active_field.next()
        self.reset_to_end()

    def previous_field(self) -> None:
        self.active_field = self.active_field.previous()
        self.reset_to_end()
