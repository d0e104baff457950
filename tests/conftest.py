import io
import pytest

from pcapng import FileScanner

from extcap_cli import ExtcapManager


class RecordingChannel(io.BytesIO):
    """In-memory capture pipe that keeps its bytes after being closed."""

    def __init__(self):
        super().__init__()
        self.data = b""
        self.close_calls = 0

    def close(self):
        if not self.closed:
            self.data = self.getvalue()
        self.close_calls += 1
        super().close()


class RecordingOpener:
    def __init__(self):
        self.opened = []

    def __call__(self, pipe_name):
        channel = RecordingChannel()
        self.opened.append((pipe_name, channel))
        return channel

    @property
    def channel(self):
        return self.opened[-1][1]


def decode_blocks(data: bytes):
    return list(FileScanner(io.BytesIO(data)))


@pytest.fixture
def channel():
    return RecordingChannel()

@pytest.fixture
def opener():
    return RecordingOpener()

@pytest.fixture
def manager(opener):
    return ExtcapManager(channel_opener=opener)

@pytest.fixture
def noop_producer():
    def produce(configuration, publisher):
        pass
    return produce
