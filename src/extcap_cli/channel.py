"""
Capture channel towards the host.

The host passes --fifo with a path it is reading from: a named pipe
(\\\\.\\pipe\\<name>) on Windows, a FIFO path elsewhere.
"""
import logging
import os
from typing import BinaryIO, Callable

logger = logging.getLogger(__name__)

WINDOWS_PIPE_PREFIX = "\\\\.\\pipe\\"

ChannelOpener = Callable[[str], BinaryIO]


def strip_pipe_prefix(path: str) -> str:
    if path.startswith(WINDOWS_PIPE_PREFIX):
        return path[len(WINDOWS_PIPE_PREFIX):]
    return path


def open_capture_channel(pipe_name: str) -> BinaryIO:
    """Open the write end of the host's capture pipe."""
    if os.name == "nt":
        path = WINDOWS_PIPE_PREFIX + pipe_name
    else:
        path = pipe_name
    logger.debug("Opening capture channel %s", path)
    return open(path, "wb")
