"""
In-memory read/write stream for tests.

A :class:`MockStream` owns two byte buffers: bytes queued by the test for
the code under test to read, and bytes the code under test has written for
the test to inspect.
"""

from mockstream.abc import (
    ReadWriter,
)
from mockstream.typing import (
    WritableBuffer,
)


class MockStream(ReadWriter):
    read_buffer: bytearray
    write_buffer: bytearray

    def __init__(self) -> None:
        self.read_buffer = bytearray()
        self.write_buffer = bytearray()

    def readinto(self, buffer: WritableBuffer) -> int:
        size = len(buffer)
        if size == 0:
            return 0
        count = min(size, len(self.read_buffer))
        if count == 0:
            return 0
        buffer[:count] = self.read_buffer[:count]
        del self.read_buffer[:count]
        return count

    def write(self, data: bytes) -> int:
        self.write_buffer.extend(data)
        return len(data)

    def flush(self) -> None:
        pass

    def push_bytes_to_read(self, data: bytes) -> None:
        """Queue ``data`` behind any unread bytes for future reads."""
        self.read_buffer.extend(data)

    def pop_bytes_written(self) -> bytes:
        """Return everything written so far and clear the write buffer."""
        written = bytes(self.write_buffer)
        self.write_buffer.clear()
        return written

    def peek_bytes_written(self) -> bytes:
        return bytes(self.write_buffer)

    @property
    def bytes_available(self) -> int:
        return len(self.read_buffer)

    def copy(self) -> "MockStream":
        """Return an independent stream holding copies of both buffers."""
        other = MockStream()
        other.read_buffer.extend(self.read_buffer)
        other.write_buffer.extend(self.write_buffer)
        return other

    def __repr__(self) -> str:
        return (
            f"<MockStream unread={len(self.read_buffer)} "
            f"written={len(self.write_buffer)}>"
        )
