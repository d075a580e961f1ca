"""Tests for the producer/consumer line pipeline."""

import io
import threading
from collections.abc import Iterator

import pytest

from gomaker.pipeline import EOT, ChannelClosed, LineChannel, consume, produce, pump


class _FailingSink(io.StringIO):
    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.writes = 0

    def write(self, s: str) -> int:
        if self.writes >= self.fail_after:
            raise OSError("disk full")
        self.writes += 1
        return super().write(s)


class TestPump:
    def test_writes_lines_in_order(self) -> None:
        sink = io.StringIO()
        count = pump(["a", "b", "c"], sink)
        assert count == 3
        assert sink.getvalue() == "a\nb\nc\n"

    def test_empty_stream(self) -> None:
        sink = io.StringIO()
        assert pump([], sink) == 0
        assert sink.getvalue() == ""

    def test_blank_lines_preserved(self) -> None:
        sink = io.StringIO()
        pump(["x", "", "y"], sink)
        assert sink.getvalue() == "x\n\ny\n"

    def test_generator_input(self) -> None:
        def gen() -> Iterator[str]:
            for i in range(100):
                yield f"line {i}"

        sink = io.StringIO()
        assert pump(gen(), sink) == 100
        assert sink.getvalue().splitlines()[-1] == "line 99"

    def test_producer_error_is_raised(self) -> None:
        def gen() -> Iterator[str]:
            yield "first"
            raise ValueError("bad line")

        sink = io.StringIO()
        with pytest.raises(ValueError, match="bad line"):
            pump(gen(), sink)
        assert sink.getvalue() == "first\n"

    def test_sink_error_is_raised_and_producer_stops(self) -> None:
        produced: list[str] = []

        def gen() -> Iterator[str]:
            for i in range(10):
                produced.append(str(i))
                yield str(i)

        sink = _FailingSink(fail_after=2)
        with pytest.raises(OSError, match="disk full"):
            pump(gen(), sink)
        assert sink.getvalue() == "0\n1\n"
        # The producer never ran more than one line past the failure.
        assert len(produced) == 3

    def test_producer_thread_finishes(self) -> None:
        before = threading.active_count()
        pump(["a"], io.StringIO())
        assert threading.active_count() == before


class TestLineChannel:
    def test_send_blocks_until_done(self) -> None:
        channel = LineChannel()
        sent = threading.Event()

        def sender() -> None:
            channel.send("x")
            sent.set()

        t = threading.Thread(target=sender)
        t.start()
        assert channel.receive() == "x"
        assert not sent.wait(0.05)
        channel.done()
        assert sent.wait(2)
        t.join()

    def test_send_after_close_raises(self) -> None:
        channel = LineChannel()
        channel.close()
        assert channel.closed
        with pytest.raises(ChannelClosed):
            channel.send("x")

    def test_produce_and_consume(self) -> None:
        channel = LineChannel()
        t = threading.Thread(target=produce, args=(["one", "two"], channel))
        t.start()
        sink = io.StringIO()
        assert consume(channel, sink) == 2
        t.join()
        assert sink.getvalue() == "one\ntwo\n"

    def test_eot_is_unique(self) -> None:
        sink = io.StringIO()
        pump(["EOT"], sink)
        assert sink.getvalue() == "EOT\n"
        assert EOT != "EOT"
