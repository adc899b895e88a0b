import pytest

from mockstream import (
    MockStream,
    SharedMockStream,
)


@pytest.fixture
def mock_stream():
    return MockStream()


@pytest.fixture
def shared_mock_stream():
    return SharedMockStream()
