from typing import Protocol, Union

WritableBuffer = Union[bytearray, memoryview]


class SupportsReadInto(Protocol):
    def readinto(self, buffer: WritableBuffer) -> int: ...


class SupportsWrite(Protocol):
    def write(self, data: bytes) -> int: ...
