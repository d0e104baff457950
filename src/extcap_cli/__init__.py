# CLI package
"""
Extcap dispatcher and command line entry point.
"""

from .manager import (
    ExtcapManager,
    ExtcapError,
    DispatchOutcome,
    EXIT_OK,
    EXIT_NO_COMMAND,
    EXIT_MISSING_INTERFACE,
    EXIT_UNKNOWN_INTERFACE,
    EXIT_MISSING_FIFO,
)
from .settings import ExtcapSettings
from .channel import WINDOWS_PIPE_PREFIX, strip_pipe_prefix, open_capture_channel

__all__ = [
    'ExtcapManager',
    'ExtcapError',
    'DispatchOutcome',
    'ExtcapSettings',
    'EXIT_OK',
    'EXIT_NO_COMMAND',
    'EXIT_MISSING_INTERFACE',
    'EXIT_UNKNOWN_INTERFACE',
    'EXIT_MISSING_FIFO',
    'WINDOWS_PIPE_PREFIX',
    'strip_pipe_prefix',
    'open_capture_channel',
    'main',
]

def __getattr__(name):
    """Lazy import so the dispatcher is usable without the bundled producers."""
    if name == 'main':
        from .main import main
        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
