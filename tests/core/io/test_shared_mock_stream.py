import copy
import threading

import pytest

from mockstream import (
    PoisonedStreamError,
    SharedMockStream,
    StreamTimeoutError,
    SyncMockStream,
)
from mockstream.abc import ReadWriter
from mockstream.utils.io import (
    read_exactly,
    read_to_end,
    write_all,
)


class NetStream(ReadWriter):
    """Stand-in for the code under test's own transport wrapper."""

    def __init__(self, inner):
        self.inner = inner

    def readinto(self, buffer):
        return self.inner.readinto(buffer)

    def write(self, data):
        return self.inner.write(data)

    def flush(self):
        self.inner.flush()


def reverse4(stream):
    """Read 4 bytes from the network, reverse them and write them back."""
    data = read_exactly(stream, 4)
    return stream.write(data[::-1])


def test_shared_mock_stream():
    s = SharedMockStream()
    e = NetStream(s.clone())

    s.push_bytes_to_read(bytes([1, 2, 3, 4]))
    assert reverse4(e) == 4
    assert s.pop_bytes_written() == bytes([4, 3, 2, 1])

    # no more bytes in stream
    assert e.readinto(bytearray(4)) == 0


def test_clones_share_buffers(shared_mock_stream):
    a = shared_mock_stream
    b = a.clone()
    c = copy.copy(b)

    assert a.shares_state_with(b)
    assert a.shares_state_with(c)
    assert not a.shares_state_with(SharedMockStream())

    a.push_bytes_to_read(b"ping")
    assert b.bytes_available == 4
    assert c.read(4) == b"ping"
    assert a.read() == b""

    c.write(b"pong")
    assert a.peek_bytes_written() == b"pong"
    assert b.pop_bytes_written() == b"pong"
    assert c.pop_bytes_written() == b""


def test_clone_preserves_type():
    s = SyncMockStream()
    assert isinstance(s.clone(), SyncMockStream)


def test_concurrent_writers_lose_nothing():
    s = SharedMockStream()
    chunk = b"0123456789"
    writers = 8
    per_writer = 200

    def worker(handle):
        for _ in range(per_writer):
            handle.write(chunk)

    threads = [
        threading.Thread(target=worker, args=(s.clone(),)) for _ in range(writers)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    written = s.pop_bytes_written()
    assert len(written) == len(chunk) * writers * per_writer
    # each write lands whole
    assert written == chunk * (writers * per_writer)


def test_failure_inside_access_window_poisons_all_handles():
    s = SharedMockStream()
    other = s.clone()

    with pytest.raises(TypeError):
        s.write("not bytes")

    with pytest.raises(PoisonedStreamError):
        s.read(1)
    with pytest.raises(PoisonedStreamError):
        other.push_bytes_to_read(b"x")
    with pytest.raises(PoisonedStreamError):
        other.pop_bytes_written()

    # a fresh stream is unaffected
    fresh = SharedMockStream()
    fresh.write(b"ok")
    assert fresh.pop_bytes_written() == b"ok"


def test_sync_mock_stream_across_threads():
    s = SyncMockStream()
    s2 = s.clone()

    s.push_bytes_to_read(bytes([5, 6, 7, 8]))
    result = {}

    def peer():
        write_all(s2, bytes([1, 2, 3, 4]))
        result["read"] = read_to_end(s2)

    t = threading.Thread(target=peer)
    t.start()
    t.join(timeout=5)
    assert not t.is_alive()

    assert s.pop_bytes_written() == bytes([1, 2, 3, 4])
    assert result["read"] == bytes([5, 6, 7, 8])


def test_wait_for_holds_reads_until_request_written():
    s = SyncMockStream()
    client = s.clone()
    s.push_bytes_to_read(b"reply")
    s.wait_for(b"request")
    assert s.waiting_for_write

    reader_started = threading.Event()
    result = {}

    def read_reply():
        reader_started.set()
        result["data"] = read_exactly(client, 5)

    t = threading.Thread(target=read_reply)
    t.start()
    reader_started.wait(timeout=5)
    t.join(timeout=0.1)
    assert t.is_alive()
    assert "data" not in result

    client.write(b"req")
    t.join(timeout=0.1)
    assert t.is_alive()

    client.write(b"uest")
    t.join(timeout=5)
    assert not t.is_alive()
    assert result["data"] == b"reply"
    assert not s.waiting_for_write


def test_wait_for_already_written_does_not_block():
    s = SyncMockStream()
    s.write(b"hello world")
    s.wait_for(b"lo wo")
    assert not s.waiting_for_write

    s.push_bytes_to_read(b"x")
    assert s.read(1) == b"x"


def test_wait_for_timeout():
    s = SyncMockStream()
    s.push_bytes_to_read(b"x")
    s.wait_for(b"never", timeout=0.05)

    with pytest.raises(StreamTimeoutError):
        s.read(1)

    # a timeout does not poison the stream
    s.write(b"never")
    assert s.read(1) == b"x"


def test_poisoning_wakes_waiting_reader():
    s = SyncMockStream()
    client = s.clone()
    s.push_bytes_to_read(b"reply")
    s.wait_for(b"request")

    reader_started = threading.Event()
    result = {}

    def read_reply():
        reader_started.set()
        try:
            result["data"] = client.read(5)
        except PoisonedStreamError as error:
            result["error"] = error

    t = threading.Thread(target=read_reply)
    t.start()
    reader_started.wait(timeout=5)
    t.join(timeout=0.1)
    assert t.is_alive()

    with pytest.raises(TypeError):
        client.write("not bytes")

    t.join(timeout=5)
    assert not t.is_alive()
    assert "data" not in result
    assert isinstance(result["error"], PoisonedStreamError)
