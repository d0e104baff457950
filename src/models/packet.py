# Packet data model
"""
Outgoing packet model.

A PacketToSend is built by a producer for every packet it hands to a
publisher. It is transient: the publisher encodes it immediately and
keeps no reference to it.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .link_layer import LinkLayerType


@dataclass(frozen=True)
class PacketToSend:
    """
    A single packet on its way to the capture host.

    Only ``data`` is mandatory. Everything else falls back to the
    publisher's defaults.
    """
    data: bytes
    """Raw packet bytes, starting at the link-layer header."""

    link_layer: Optional[LinkLayerType] = None
    """Link-layer type of ``data``. None means the interface's default link layer."""

    time_from_capture_start: Optional[timedelta] = None
    """Elapsed time since the capture started. None is encoded as zero."""

    comment: Optional[str] = None
    """Free text attached to the encoded record."""

    @property
    def elapsed(self) -> timedelta:
        return self.time_from_capture_start if self.time_from_capture_start is not None else timedelta(0)
