"""In-memory mock byte streams for tests."""

from importlib.metadata import version as __version

from mockstream.abc import (
    Reader,
    ReadWriteCloser,
    ReadWriter,
    Writer,
)
from mockstream.chain import (
    ChainedReader,
    chain,
)
from mockstream.exceptions import (
    BaseMockStreamError,
    IncompleteReadError,
    InjectedIOError,
    IOException,
    PoisonedStreamError,
    StreamClosedError,
    StreamTimeoutError,
    WriteZeroError,
)
from mockstream.failing import (
    ErrorKind,
    FailingMockStream,
)
from mockstream.shared import (
    SharedMockStream,
    SyncMockStream,
)
from mockstream.stream import (
    MockStream,
)
from mockstream.trio import (
    TrioMockStream,
)
from mockstream.utils.logging import (
    setup_logging,
)

# Initialize logging configuration
setup_logging()

__version__ = __version("mockstream")

__all__ = [
    "BaseMockStreamError",
    "ChainedReader",
    "ErrorKind",
    "FailingMockStream",
    "IOException",
    "IncompleteReadError",
    "InjectedIOError",
    "MockStream",
    "PoisonedStreamError",
    "ReadWriteCloser",
    "ReadWriter",
    "Reader",
    "SharedMockStream",
    "StreamClosedError",
    "StreamTimeoutError",
    "SyncMockStream",
    "TrioMockStream",
    "WriteZeroError",
    "Writer",
    "chain",
]
