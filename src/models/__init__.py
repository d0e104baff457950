"""
Packet and link-layer data models.
"""

from .link_layer import LinkLayerType
from .packet import PacketToSend

__all__ = [
    'LinkLayerType',
    'PacketToSend',
]
