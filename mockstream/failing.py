"""
A stream that fails a fixed number of times before behaving like an empty,
always-accepting stream.

Pair it with :func:`mockstream.chain.chain` to build transports that deliver
some data, hiccup, and then recover:

    >>> import io
    >>> from mockstream import ErrorKind, FailingMockStream, chain
    >>> from mockstream.utils.io import read_exactly
    >>> reader = chain(
    ...     io.BytesIO(b"abcd"),
    ...     FailingMockStream(ErrorKind.INTERRUPTED, "Interrupted", 5),
    ...     io.BytesIO(b"ABCD"),
    ... )
    >>> read_exactly(reader, 8)
    b'abcdABCD'
"""

from enum import Enum
import errno
import logging

from mockstream.abc import (
    ReadWriter,
)
from mockstream.exceptions import (
    InjectedIOError,
)
from mockstream.typing import (
    WritableBuffer,
)

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """
    Category of an injected failure.

    Each member carries a short description and, where one exists, the POSIX
    errno that an equivalent real failure would report.
    """

    NOT_FOUND = ("entity not found", errno.ENOENT)
    PERMISSION_DENIED = ("permission denied", errno.EACCES)
    CONNECTION_REFUSED = ("connection refused", errno.ECONNREFUSED)
    CONNECTION_RESET = ("connection reset", errno.ECONNRESET)
    CONNECTION_ABORTED = ("connection aborted", errno.ECONNABORTED)
    NOT_CONNECTED = ("not connected", errno.ENOTCONN)
    ADDR_IN_USE = ("address in use", errno.EADDRINUSE)
    ADDR_NOT_AVAILABLE = ("address not available", errno.EADDRNOTAVAIL)
    BROKEN_PIPE = ("broken pipe", errno.EPIPE)
    ALREADY_EXISTS = ("entity already exists", errno.EEXIST)
    WOULD_BLOCK = ("operation would block", errno.EAGAIN)
    INVALID_INPUT = ("invalid input parameter", errno.EINVAL)
    INVALID_DATA = ("invalid data", None)
    TIMED_OUT = ("timed out", errno.ETIMEDOUT)
    WRITE_ZERO = ("write zero", None)
    INTERRUPTED = ("operation interrupted", errno.EINTR)
    UNEXPECTED_EOF = ("unexpected end of file", None)
    OTHER = ("other error", None)

    def __init__(self, description: str, errno_code: int | None) -> None:
        self.description = description
        self.errno = errno_code


class FailingMockStream(ReadWriter):
    """
    Raise :class:`InjectedIOError` on ``repeat`` read or write calls, then
    succeed trivially forever.

    One counter is shared by reads and writes: with ``repeat=3``, two failed
    writes followed by a read use up the failures. Once exhausted, reads
    report end-of-stream (0 bytes) and writes accept every byte and discard
    it. ``repeat=0`` never fails; a negative ``repeat`` fails on every call.
    ``flush`` always succeeds.
    """

    kind: ErrorKind
    message: str
    _remaining_failures: int

    def __init__(self, kind: ErrorKind, message: str, repeat: int) -> None:
        self.kind = kind
        self.message = message
        self._remaining_failures = repeat

    @property
    def remaining_failures(self) -> int:
        return self._remaining_failures

    @property
    def exhausted(self) -> bool:
        return self._remaining_failures == 0

    def _maybe_fail(self, operation: str) -> None:
        if self._remaining_failures == 0:
            return
        if self._remaining_failures > 0:
            self._remaining_failures -= 1
        logger.debug(
            "Injecting %s failure on %s (%d remaining)",
            self.kind.name,
            operation,
            self._remaining_failures,
        )
        raise InjectedIOError(self.kind, self.message)

    def readinto(self, buffer: WritableBuffer) -> int:
        self._maybe_fail("read")
        return 0

    def write(self, data: bytes) -> int:
        self._maybe_fail("write")
        return len(data)

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return (
            f"<FailingMockStream kind={self.kind.name} "
            f"remaining_failures={self._remaining_failures}>"
        )
