from abc import (
    ABC,
    abstractmethod,
)

from mockstream.typing import WritableBuffer

DEFAULT_CHUNK_SIZE = 4096


class Reader(ABC):
    @abstractmethod
    def readinto(self, buffer: WritableBuffer) -> int:
        """
        Fill the front of ``buffer`` and return how many bytes were copied.

        A return value of 0 means no data is available right now (or the
        buffer has no room); it is never an error.
        """
        ...

    def read(self, n: int = -1) -> bytes:
        """
        Read up to ``n`` bytes. A negative ``n`` reads until ``readinto``
        reports zero bytes.
        """
        if n >= 0:
            buffer = bytearray(n)
            count = self.readinto(buffer)
            return bytes(buffer[:count])

        chunks = bytearray()
        chunk = bytearray(DEFAULT_CHUNK_SIZE)
        while True:
            count = self.readinto(chunk)
            if count == 0:
                return bytes(chunks)
            chunks.extend(chunk[:count])


class Writer(ABC):
    @abstractmethod
    def write(self, data: bytes) -> int: ...

    @abstractmethod
    def flush(self) -> None: ...


class ReadWriter(Reader, Writer):
    pass


class Closer(ABC):
    @abstractmethod
    async def close(self) -> None: ...


class AsyncReader(ABC):
    @abstractmethod
    async def read(self, n: int | None = None) -> bytes: ...


class AsyncWriter(ABC):
    @abstractmethod
    async def write(self, data: bytes) -> None: ...


class ReadWriteCloser(AsyncReader, AsyncWriter, Closer):
    @abstractmethod
    def get_remote_address(self) -> tuple[str, int] | None:
        """
        Return the remote address of the connected peer.

        :return: A tuple of (host, port) or None if not available
        """
        ...
