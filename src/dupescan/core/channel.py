"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/channel.py
Bounded, ordered handoff of duplicate groups from the scanner to a receiver.

TERMINATION CONTRACT
--------------------
The scanner sends EndOfScan after its last group and then closes the channel.
A receiver stops on whichever it sees first: the EndOfScan sentinel or the
closed channel (an abnormal end, e.g. the scanner thread died).

BACKPRESSURE
------------
send() blocks while the channel is full, messages are never dropped.
If the receiver disconnects, blocked and future senders get ChannelError.
"""

import logging
import queue
import threading
from typing import Iterator, Optional, Union

from dupescan.core.errors import ChannelError
from dupescan.core.models import DuplicateGroupMessage, EndOfScan

logger = logging.getLogger(__name__)

Message = Union[DuplicateGroupMessage, EndOfScan]

_CLOSED = object()  # queue marker put by close()


class DuplicateGroupChannel:
    """Multi-sender / single-consumer channel over a bounded queue.Queue."""

    POLL_INTERVAL = 0.1  # seconds between disconnect checks while blocked

    def __init__(self, capacity: int = 64):
        if capacity < 1:
            raise ValueError("Channel capacity must be at least 1")
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()
        self._disconnected = threading.Event()
        self._lock = threading.Lock()
        self.end_of_scan: Optional[EndOfScan] = None

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def disconnected(self) -> bool:
        return self._disconnected.is_set()

    # =============================
    # Sender side
    # =============================

    def send(self, message: Message) -> None:
        """Blocking send. Raises ChannelError if the channel is closed or the receiver has gone."""
        if self._closed.is_set():
            raise ChannelError("Cannot send on a closed channel")
        self._put(message)

    def close(self) -> None:
        """Sender-side close. Idempotent. Receivers drain pending messages, then stop."""
        with self._lock:
            if self._closed.is_set():
                return
            self._closed.set()
        if self._disconnected.is_set():
            return
        try:
            self._put(_CLOSED)
        except ChannelError:
            pass  # receiver went away meanwhile, nobody is waiting for the marker

    def _put(self, item: object) -> None:
        while True:
            if self._disconnected.is_set():
                raise ChannelError("Receiver disconnected from the channel")
            try:
                self._queue.put(item, timeout=self.POLL_INTERVAL)
            except queue.Full:
                continue
            # disconnect() may have drained the queue to let this put through
            if self._disconnected.is_set():
                raise ChannelError("Receiver disconnected from the channel")
            return

    # =============================
    # Receiver side
    # =============================

    def receive(self) -> Iterator[DuplicateGroupMessage]:
        """
        Yield duplicate groups in send order.
        Stops on EndOfScan (stored in `end_of_scan`) or on channel closure.
        """
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                if self.end_of_scan is None:
                    logger.warning("channel closed without end-of-scan marker")
                return
            if isinstance(item, EndOfScan):
                self.end_of_scan = item
                return
            yield item

    def disconnect(self) -> None:
        """Receiver-side close: senders fail with ChannelError from now on."""
        self._disconnected.set()
        # Unblock a sender waiting on a full queue
        try:
            while True:
                self._queue.get_nowait()
        except queue.Empty:
            pass

    def __iter__(self) -> Iterator[DuplicateGroupMessage]:
        return self.receive()

    def __repr__(self):
        return f"<DuplicateGroupChannel capacity={self.capacity}, closed={self.closed}>"
