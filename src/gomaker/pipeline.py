"""Producer/consumer hand-off between the Makefile renderer and the writer.

The producer runs on a worker thread and pushes lines through a
:class:`LineChannel`; the calling thread consumes them in order and writes
each to the sink.  The channel holds one item and ``send`` only returns once
the consumer is done with it, so the producer never runs more than one line
ahead.  The stream ends with :data:`EOT`.
"""

from __future__ import annotations

import contextlib
import queue
import threading
from collections.abc import Iterable
from typing import Any, TextIO

EOT = object()
"""End-of-transmission sentinel."""


class ChannelClosed(Exception):
    """The consumer stopped; the producer must not send anything else."""


class _Failure:
    """Wraps a producer exception so the consumer can re-raise it."""

    def __init__(self, error: BaseException) -> None:
        self.error = error


class LineChannel:
    """Single-slot synchronous channel for one producer and one consumer."""

    def __init__(self) -> None:
        self._slot: queue.Queue[Any] = queue.Queue(maxsize=1)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, item: Any) -> None:
        """Hand *item* to the consumer and wait until it has been handled."""
        if self.closed:
            raise ChannelClosed
        self._slot.put(item)
        self._slot.join()
        if self.closed:
            raise ChannelClosed

    def receive(self) -> Any:
        """Block until the producer sends the next item."""
        return self._slot.get()

    def done(self) -> None:
        """Mark the last received item handled, releasing the producer."""
        self._slot.task_done()

    def close(self) -> None:
        """Stop accepting items; a blocked ``send`` raises on wake-up."""
        self._closed.set()


def produce(lines: Iterable[str], channel: LineChannel) -> None:
    """Send every line of *lines*, then :data:`EOT`.

    Exceptions raised while generating lines are forwarded to the consumer.
    """
    try:
        for line in lines:
            channel.send(line)
        channel.send(EOT)
    except ChannelClosed:
        return
    except Exception as exc:
        with contextlib.suppress(ChannelClosed):
            channel.send(_Failure(exc))


def consume(channel: LineChannel, sink: TextIO) -> int:
    """Write received lines to *sink* until :data:`EOT`; return the count."""
    count = 0
    while True:
        item = channel.receive()
        try:
            if item is EOT:
                return count
            if isinstance(item, _Failure):
                raise item.error
            sink.write(item + "\n")
            count += 1
        except BaseException:
            channel.close()
            raise
        finally:
            channel.done()


def pump(lines: Iterable[str], sink: TextIO) -> int:
    """Stream *lines* into *sink* through a producer thread.

    Returns the number of lines written.  Errors from either side are
    raised in the calling thread.
    """
    channel = LineChannel()
    producer = threading.Thread(
        target=produce, args=(lines, channel), name="gomaker-producer", daemon=True
    )
    producer.start()
    try:
        return consume(channel, sink)
    finally:
        producer.join()
