from collections.abc import Sequence
import logging

from mockstream.abc import (
    Reader,
)
from mockstream.typing import (
    SupportsReadInto,
    WritableBuffer,
)

logger = logging.getLogger(__name__)


class ChainedReader(Reader):
    """
    Read from several sources one after another.

    The current source is used until it reports zero bytes, then the next
    one is consulted. An error raised by a source propagates without moving
    on, so a retried read asks the same source again.
    """

    sources: Sequence[SupportsReadInto]
    _index: int

    def __init__(self, *sources: SupportsReadInto) -> None:
        self.sources = sources
        self._index = 0

    @property
    def current(self) -> SupportsReadInto | None:
        if self._index < len(self.sources):
            return self.sources[self._index]
        return None

    def readinto(self, buffer: WritableBuffer) -> int:
        if len(buffer) == 0:
            return 0
        while self._index < len(self.sources):
            count = self.sources[self._index].readinto(buffer)
            if count:
                return count
            self._index += 1
            logger.debug(
                "Chained source %d exhausted, moving to %d of %d",
                self._index - 1,
                self._index,
                len(self.sources),
            )
        return 0


def chain(*sources: SupportsReadInto) -> ChainedReader:
    return ChainedReader(*sources)
