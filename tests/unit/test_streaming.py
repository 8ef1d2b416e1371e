"""Tests for the bounded handoff pipe and the cancel token."""

import threading
import time

import pytest
from ionzst.errors import PipelineCancelled, SinkError
from ionzst.streaming import CancelToken, Pipe


def start(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class TestCancelToken:
    def test_first_reason_wins(self):
        token = CancelToken()
        first = ValueError("first")

        assert token.cancel(first) is True
        assert token.cancel(ValueError("second")) is False
        assert token.cancelled
        assert token.reason is first

    def test_raise_if_cancelled(self):
        token = CancelToken()
        token.raise_if_cancelled()

        token.cancel()
        with pytest.raises(PipelineCancelled):
            token.raise_if_cancelled()


class TestPipe:
    def test_bytes_in_order(self):
        pipe = Pipe(maxsize=2)
        received = []

        def consume():
            while True:
                chunk = pipe.reader.read(3)
                if not chunk:
                    return
                received.append(chunk)

        consumer = start(consume)
        for i in range(50):
            pipe.writer.write(b"chunk-%02d;" % i)
        pipe.writer.close()
        consumer.join(timeout=5)

        assert not consumer.is_alive()
        assert b"".join(received) == b"".join(b"chunk-%02d;" % i for i in range(50))
        assert pipe.writer.bytes_written == 50 * 9

    def test_read_all(self):
        pipe = Pipe(maxsize=10)
        pipe.writer.write(b"abc")
        pipe.writer.write(b"def")
        pipe.writer.close()

        assert pipe.reader.read() == b"abcdef"
        assert pipe.reader.read() == b""

    def test_read_returns_partial_chunks(self):
        pipe = Pipe(maxsize=10)
        pipe.writer.write(b"abcdef")
        pipe.writer.close()

        assert pipe.reader.read(4) == b"abcd"
        assert pipe.reader.read(4) == b"ef"
        assert pipe.reader.read(4) == b""

    def test_empty_write_is_ignored(self):
        pipe = Pipe(maxsize=1)
        assert pipe.writer.write(b"") == 0
        pipe.writer.close()
        assert pipe.reader.read(10) == b""

    def test_writer_blocks_when_full(self):
        pipe = Pipe(maxsize=1)
        pipe.writer.write(b"first")
        done = threading.Event()

        def produce():
            pipe.writer.write(b"second")
            done.set()

        start(produce)
        assert not done.wait(0.2)

        assert pipe.reader.read(100) == b"first"
        assert done.wait(5)
        assert pipe.reader.read(100) == b"second"

    def test_close_with_error(self):
        pipe = Pipe(maxsize=4)
        pipe.writer.write(b"data")
        pipe.writer.close(error=ValueError("upstream failed"))

        assert pipe.reader.read(100) == b"data"
        with pytest.raises(ValueError, match="upstream failed"):
            pipe.reader.read(100)

    def test_write_after_close(self):
        pipe = Pipe()
        pipe.writer.close()

        with pytest.raises(SinkError, match="closed"):
            pipe.writer.write(b"late")

    def test_write_after_reader_closed(self):
        pipe = Pipe()
        pipe.reader.close()

        with pytest.raises(SinkError, match="read end closed"):
            pipe.writer.write(b"data")

    def test_reader_close_unblocks_writer(self):
        pipe = Pipe(maxsize=1)
        pipe.writer.write(b"fill")
        errors = []

        def produce():
            try:
                pipe.writer.write(b"blocked")
            except SinkError as e:
                errors.append(e)

        producer = start(produce)
        time.sleep(0.1)
        pipe.reader.close()
        producer.join(timeout=5)

        assert not producer.is_alive()
        assert len(errors) == 1


class TestPipeCancellation:
    def test_cancel_unblocks_reader(self):
        token = CancelToken()
        pipe = Pipe(token=token)
        errors = []

        def consume():
            try:
                pipe.reader.read(10)
            except PipelineCancelled as e:
                errors.append(e)

        consumer = start(consume)
        time.sleep(0.1)
        token.cancel(RuntimeError("boom"))
        consumer.join(timeout=5)

        assert not consumer.is_alive()
        assert len(errors) == 1

    def test_cancel_unblocks_writer(self):
        token = CancelToken()
        pipe = Pipe(maxsize=1, token=token)
        pipe.writer.write(b"fill")
        errors = []

        def produce():
            try:
                pipe.writer.write(b"blocked")
            except PipelineCancelled as e:
                errors.append(e)

        producer = start(produce)
        time.sleep(0.1)
        token.cancel()
        producer.join(timeout=5)

        assert not producer.is_alive()
        assert len(errors) == 1

    def test_close_does_not_block_after_cancel(self):
        token = CancelToken()
        pipe = Pipe(maxsize=1, token=token)
        pipe.writer.write(b"fill")
        token.cancel()

        pipe.writer.close(error=RuntimeError("failed"))
        assert pipe.writer.closed
