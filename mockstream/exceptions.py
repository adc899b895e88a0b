from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mockstream.failing import ErrorKind


class BaseMockStreamError(Exception):
    pass


class IOException(BaseMockStreamError):
    pass


class InjectedIOError(IOException, OSError):
    """
    A failure produced on purpose by a failing mock stream.

    The error is also an :class:`OSError`, so code that only knows about
    ordinary I/O errors catches it the same way it would catch a socket
    failure. ``errno`` is filled in from the error kind when the kind maps to
    a POSIX errno.
    """

    kind: ErrorKind
    message: str

    def __init__(self, kind: ErrorKind, message: str) -> None:
        if kind.errno is None:
            super().__init__(message)
        else:
            super().__init__(kind.errno, message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"[{self.kind.name}] {self.message}"


class IncompleteReadError(IOException):
    """Fewer bytes were read than requested."""


class WriteZeroError(IOException):
    """A writer accepted no bytes of a non-empty remainder."""


class StreamClosedError(IOException):
    pass


class StreamTimeoutError(IOException):
    pass


class PoisonedStreamError(BaseMockStreamError):
    """
    Shared stream state was left unusable by an error raised while the
    access lock was held. All handles refuse further use.
    """
