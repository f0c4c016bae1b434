# Galion Channels
# One-directional FIFO channels between the front end and the job tracker

import threading
from collections import deque
from queue import Empty
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

__all__ = ["ChannelClosed", "Empty", "Receiver", "Sender", "channel"]


class ChannelClosed(Exception):
    """Raised when the other end of a channel is gone."""


class _Channel:
    """Shared state of a channel: a FIFO plus open sender/receiver tracking."""

    def __init__(self) -> None:
        self.items: deque[Any] = deque()
        self.cond = threading.Condition()
        self.senders = 1
        self.receiver_open = True


class Sender(Generic[T]):
    """Sending end of a channel. Clone it for additional producers."""

    def __init__(self, chan: _Channel):
        self._chan = chan
        self._closed = False

    def send(self, item: T) -> None:
        """
        Queue an item for the receiver.

        Raises:
            ChannelClosed: If the receiver is closed or this sender was closed.
        """
        with self._chan.cond:
            if self._closed or not self._chan.receiver_open:
                raise ChannelClosed("receiver disconnected")
            self._chan.items.append(item)
            self._chan.cond.notify()

    def clone(self) -> "Sender[T]":
        """Create another sender for the same channel."""
        with self._chan.cond:
            if self._closed:
                raise ChannelClosed("sender closed")
            self._chan.senders += 1
        return Sender(self._chan)

    def close(self) -> None:
        """Close this sender. Idempotent."""
        with self._chan.cond:
            if self._closed:
                return
            self._closed = True
            self._chan.senders -= 1
            self._chan.cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "Sender[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class Receiver(Generic[T]):
    """Receiving end of a channel. Single consumer."""

    def __init__(self, chan: _Channel):
        self._chan = chan

    def recv(self, timeout: Optional[float] = None) -> T:
        """
        Wait for the next item.

        Args:
            timeout: Seconds to wait, None blocks until an item arrives.

        Raises:
            ChannelClosed: If no item is queued and every sender is closed.
            Empty: If the timeout expired.
        """
        with self._chan.cond:
            ready = self._chan.cond.wait_for(
                lambda: self._chan.items or self._chan.senders == 0,
                timeout=timeout,
            )
            if self._chan.items:
                return self._chan.items.popleft()
            if not ready:
                raise Empty
            raise ChannelClosed("all senders disconnected")

    def try_recv(self) -> T:
        """
        Take the next item without waiting.

        Raises:
            ChannelClosed: If no item is queued and every sender is closed.
            Empty: If no item is queued.
        """
        with self._chan.cond:
            if self._chan.items:
                return self._chan.items.popleft()
            if self._chan.senders == 0:
                raise ChannelClosed("all senders disconnected")
            raise Empty

    def drain(self) -> list[T]:
        """Take every queued item without waiting."""
        with self._chan.cond:
            items = list(self._chan.items)
            self._chan.items.clear()
            return items

    @property
    def disconnected(self) -> bool:
        """Check if every sender is closed. Queued items may remain."""
        with self._chan.cond:
            return self._chan.senders == 0

    def close(self) -> None:
        """Close the receiver; later sends fail. Idempotent."""
        with self._chan.cond:
            self._chan.receiver_open = False
            self._chan.items.clear()

    def __enter__(self) -> "Receiver[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def channel() -> tuple[Sender[Any], Receiver[Any]]:
    """Create a connected (sender, receiver) pair."""
    chan = _Channel()
    return Sender(chan), Receiver(chan)
