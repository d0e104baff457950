"""Logging setup for extcap processes."""
import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "PYEXTCAP_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Send log records to stderr.

    Stdout belongs to the extcap protocol, anything else printed there
    would be parsed by the host. Does nothing if logging is already set up.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
    )
