from collections.abc import Iterator
import logging

from mockstream.abc import (
    DEFAULT_CHUNK_SIZE,
)
from mockstream.exceptions import (
    IncompleteReadError,
    InjectedIOError,
    WriteZeroError,
)
from mockstream.failing import (
    ErrorKind,
)
from mockstream.typing import (
    SupportsReadInto,
    SupportsWrite,
)

logger = logging.getLogger(__name__)


def _is_interrupted(error: InjectedIOError) -> bool:
    return error.kind is ErrorKind.INTERRUPTED


def read_exactly(reader: SupportsReadInto, n: int) -> bytes:
    """
    Read exactly n bytes from the reader.

    Reads are repeated until ``n`` bytes have arrived. Injected failures of
    kind :attr:`ErrorKind.INTERRUPTED` are retried, as a real stream
    consumer retries ``EINTR``; every other failure propagates to the
    caller.

    Args:
        reader: The reader to read from
        n: Number of bytes to read

    Returns:
        bytes: Exactly n bytes of data

    Raises:
        IncompleteReadError: If the reader reports end-of-stream before n
            bytes are received.

    """
    buffer = bytearray(n)
    view = memoryview(buffer)
    received = 0
    while received < n:
        try:
            count = reader.readinto(view[received:])
        except InjectedIOError as error:
            if not _is_interrupted(error):
                raise
            logger.debug(
                "read interrupted after %d of %d bytes, retrying", received, n
            )
            continue
        if count == 0:
            raise IncompleteReadError(
                f"Stream ended during read operation: expected {n} bytes but "
                f"received {received} bytes"
            )
        received += count
    return bytes(buffer)


def read_to_end(reader: SupportsReadInto) -> bytes:
    """Read until the reader reports zero bytes, retrying interruptions."""
    result = bytearray()
    chunk = bytearray(DEFAULT_CHUNK_SIZE)
    while True:
        try:
            count = reader.readinto(chunk)
        except InjectedIOError as error:
            if not _is_interrupted(error):
                raise
            continue
        if count == 0:
            return bytes(result)
        result.extend(chunk[:count])


def write_all(writer: SupportsWrite, data: bytes) -> None:
    """
    Write every byte of ``data``, retrying interruptions.

    Raises:
        WriteZeroError: If the writer accepts nothing while bytes remain.

    """
    view = memoryview(data)
    while view:
        try:
            count = writer.write(bytes(view))
        except InjectedIOError as error:
            if not _is_interrupted(error):
                raise
            continue
        if count == 0:
            raise WriteZeroError(
                f"failed to write whole buffer: {len(view)} bytes remaining"
            )
        view = view[count:]


def iter_bytes(reader: SupportsReadInto) -> Iterator[int]:
    """Yield the reader's bytes one at a time until end-of-stream."""
    one = bytearray(1)
    while True:
        try:
            count = reader.readinto(one)
        except InjectedIOError as error:
            if not _is_interrupted(error):
                raise
            continue
        if count == 0:
            return
        yield one[0]


def read_line(reader: SupportsReadInto, delimiter: bytes = b"\n") -> bytes:
    """
    Read up to and including ``delimiter``, or until end-of-stream.

    Bytes are read one at a time, so nothing past the delimiter is consumed.
    """
    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single byte, got {delimiter!r}")
    stop = delimiter[0]
    line = bytearray()
    for byte in iter_bytes(reader):
        line.append(byte)
        if byte == stop:
            break
    return bytes(line)
