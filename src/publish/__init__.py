"""
Packet publishing towards the capture host.
"""

from .base import PacketsPublisher
from .pcapng_publisher import PcapngPublisher, split_timestamp
from .exceptions import (
    PublishError,
    UnknownLinkLayerError,
    EmptyPacketError,
    PublisherClosedError,
    NegativeTimestampError,
)

__all__ = [
    'PacketsPublisher',
    'PcapngPublisher',
    'split_timestamp',
    'PublishError',
    'UnknownLinkLayerError',
    'EmptyPacketError',
    'PublisherClosedError',
    'NegativeTimestampError',
]
