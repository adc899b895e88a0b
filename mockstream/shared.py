"""
Shared handles over a single :class:`~mockstream.stream.MockStream`.

A test usually keeps one handle for its assertions and gives a clone to the
code under test. Every handle refers to the same buffers; each call holds the
lock only for its own duration.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
import threading

from mockstream.abc import (
    ReadWriter,
)
from mockstream.exceptions import (
    PoisonedStreamError,
    StreamTimeoutError,
)
from mockstream.stream import (
    MockStream,
)
from mockstream.typing import (
    WritableBuffer,
)

logger = logging.getLogger(__name__)


class _SharedState:
    stream: MockStream
    lock: threading.Lock
    condition: threading.Condition
    poisoned: bool
    # SyncMockStream bookkeeping, shared by every handle
    expected_bytes: bytes | None
    wait_timeout: float | None

    def __init__(self) -> None:
        self.stream = MockStream()
        self.lock = threading.Lock()
        self.condition = threading.Condition(self.lock)
        self.poisoned = False
        self.expected_bytes = None
        self.wait_timeout = None


class SharedMockStream(ReadWriter):
    _state: _SharedState

    def __init__(self, _state: _SharedState | None = None) -> None:
        self._state = _state if _state is not None else _SharedState()

    def clone(self) -> SharedMockStream:
        """Return another handle to the same underlying stream."""
        return type(self)(self._state)

    def __copy__(self) -> SharedMockStream:
        return self.clone()

    def shares_state_with(self, other: SharedMockStream) -> bool:
        return self._state is other._state

    @contextmanager
    def _access(self) -> Iterator[MockStream]:
        state = self._state
        with state.lock:
            if state.poisoned:
                raise PoisonedStreamError(
                    "Shared mock stream was poisoned by an earlier failure"
                )
            try:
                yield state.stream
            except BaseException as error:
                state.poisoned = True
                state.condition.notify_all()
                logger.error(
                    "Poisoning shared mock stream after %s raised inside "
                    "the access window",
                    type(error).__name__,
                )
                raise

    def readinto(self, buffer: WritableBuffer) -> int:
        with self._access() as stream:
            return stream.readinto(buffer)

    def write(self, data: bytes) -> int:
        with self._access() as stream:
            return stream.write(data)

    def flush(self) -> None:
        with self._access() as stream:
            stream.flush()

    def push_bytes_to_read(self, data: bytes) -> None:
        with self._access() as stream:
            stream.push_bytes_to_read(data)

    def pop_bytes_written(self) -> bytes:
        with self._access() as stream:
            return stream.pop_bytes_written()

    def peek_bytes_written(self) -> bytes:
        with self._access() as stream:
            return stream.peek_bytes_written()

    @property
    def bytes_available(self) -> int:
        with self._access() as stream:
            return stream.bytes_available

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={id(self._state):#x}>"


class SyncMockStream(SharedMockStream):
    """
    Shared stream whose reads can be held back until the code under test has
    written an expected byte sequence.

    Useful when one thread plays the peer of a protocol: the test thread
    calls :meth:`wait_for` with the request it expects, and the reply pushed
    with :meth:`push_bytes_to_read` is not handed out until the request
    shows up in the written bytes.
    """

    def wait_for(self, expected: bytes, timeout: float | None = None) -> None:
        """
        Block reads on every handle until ``expected`` appears as a contiguous
        run in the bytes written (and not yet popped).

        If the bytes are already there, reads are not blocked. With a
        ``timeout``, a blocked read raises :class:`StreamTimeoutError` after
        that many seconds.
        """
        state = self._state
        with self._access() as stream:
            if expected in stream.write_buffer:
                state.expected_bytes = None
                return
            state.expected_bytes = bytes(expected)
            state.wait_timeout = timeout
        logger.debug("Holding reads until %r is written", expected)

    @property
    def waiting_for_write(self) -> bool:
        return self._state.expected_bytes is not None

    def readinto(self, buffer: WritableBuffer) -> int:
        state = self._state
        with self._access() as stream:
            released = state.condition.wait_for(
                lambda: state.poisoned or state.expected_bytes is None,
                timeout=state.wait_timeout,
            )
            if released and not state.poisoned:
                return stream.readinto(buffer)
            poisoned = state.poisoned
            expected = state.expected_bytes
        if poisoned:
            raise PoisonedStreamError(
                "Shared mock stream was poisoned while a read was waiting"
            )
        raise StreamTimeoutError(
            f"Timed out after {state.wait_timeout}s waiting for {expected!r} "
            "to be written"
        )

    def write(self, data: bytes) -> int:
        state = self._state
        with self._access() as stream:
            count = stream.write(data)
            if (
                state.expected_bytes is not None
                and state.expected_bytes in stream.write_buffer
            ):
                logger.debug("Expected bytes written, releasing readers")
                state.expected_bytes = None
                state.condition.notify_all()
            return count
