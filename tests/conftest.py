import pytest

from riakjson import Connection
from tests.helpers import RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def connection(transport: RecordingTransport) -> Connection:
    return Connection("riak.test", 8098, transport=transport)
