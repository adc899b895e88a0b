import logging

import trio

from mockstream.abc import (
    ReadWriteCloser,
)
from mockstream.exceptions import (
    StreamClosedError,
)
from mockstream.shared import (
    SharedMockStream,
    SyncMockStream,
)

logger = logging.getLogger(__name__)


class TrioMockStream(ReadWriteCloser):
    """
    Async read/write facade over a :class:`SharedMockStream` handle.

    Lets trio-based code under test talk to a mock stream while the test
    keeps a synchronous handle for pushing input and popping output. Every
    call completes immediately; the only suspension is a trio checkpoint.

    A :class:`SyncMockStream` handle is rejected: its reads block the
    calling thread, which would stall the trio event loop.
    """

    stream: SharedMockStream
    # NOTE: Separate read and write locks, like a real socket stream wrapper
    read_lock: trio.Lock
    write_lock: trio.Lock
    _closed: bool

    def __init__(self, stream: SharedMockStream | None = None) -> None:
        if isinstance(stream, SyncMockStream):
            raise TypeError(
                "TrioMockStream cannot wrap a SyncMockStream; its reads block "
                "the event loop"
            )
        self.stream = stream if stream is not None else SharedMockStream()
        self.read_lock = trio.Lock()
        self.write_lock = trio.Lock()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> None:
        async with self.write_lock:
            if self._closed:
                raise StreamClosedError("Write attempted on closed mock stream")
            await trio.lowlevel.checkpoint()
            self.stream.write(data)

    async def read(self, n: int | None = None) -> bytes:
        async with self.read_lock:
            if self._closed:
                raise StreamClosedError("Read attempted on closed mock stream")
            await trio.lowlevel.checkpoint()
            if n is not None and n == 0:
                return b""
            return self.stream.read(-1 if n is None else n)

    async def close(self) -> None:
        if not self._closed:
            logger.debug("Closing %r", self)
        self._closed = True
        await trio.lowlevel.checkpoint()

    def get_remote_address(self) -> tuple[str, int] | None:
        return None
