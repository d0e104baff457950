"""
Packets publisher interface definition.
"""
from abc import ABC, abstractmethod
from typing import Optional

from models import LinkLayerType, PacketToSend


class PacketsPublisher(ABC):
    """
    Passes packets from a producer to the capture host.

    Publishers own their output stream. Closing the publisher closes the
    stream; use it as a context manager to guarantee that on every path.
    """

    @abstractmethod
    def send(self, data: bytes, link_layer: Optional[LinkLayerType] = None) -> None:
        """Send with the given link layer (default link layer if None) and a zero timestamp."""
        pass

    @abstractmethod
    def send_packet(self, packet: PacketToSend) -> None:
        """Send a fully described packet."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the encoder and the underlying stream. Safe to call twice."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
