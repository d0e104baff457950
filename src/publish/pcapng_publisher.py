"""
PCAPNG packets publisher.

Reference: https://github.com/pcapng/pcapng

PCAPNG lets one section declare several interfaces, each with its own
Interface Description Block and link type. The publisher declares one
interface per supported link layer, so a single stream can carry packets
of different link layers: a packet is written as an Enhanced Packet Block
that points at the interface declared for its link layer.

Interface ids:
- 0 is always the default link layer
- 1..n follow the additional link layers in registration order
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import BinaryIO, Dict, Iterable, List, Optional

import pcapng.blocks as blocks
from pcapng import FileWriter

from models import LinkLayerType, PacketToSend
from .base import PacketsPublisher
from .exceptions import EmptyPacketError, NegativeTimestampError, PublisherClosedError, UnknownLinkLayerError

logger = logging.getLogger(__name__)

# Timestamps are written in if_tsresol's default resolution (10**-6 s)
_TS_UNITS_PER_SECOND = 1_000_000


def split_timestamp(elapsed: timedelta) -> tuple:
    """
    Encode elapsed capture time as (seconds, microseconds).

    Only millisecond precision is kept: whole seconds plus the
    millisecond remainder scaled to microseconds.

    Raises:
        NegativeTimestampError: If elapsed is negative
    """
    if elapsed < timedelta(0):
        raise NegativeTimestampError(f"Elapsed capture time must not be negative: {elapsed}")
    seconds = int(elapsed.total_seconds())
    remainder = elapsed - timedelta(seconds=seconds)
    milliseconds = remainder // timedelta(milliseconds=1)
    return seconds, milliseconds * 1000


class PcapngPublisher(PacketsPublisher):
    """Writes packets of one or more link layers into a PCAPNG stream."""

    def __init__(self,
                 stream: BinaryIO,
                 default_link_layer: LinkLayerType,
                 additional_link_layers: Iterable[LinkLayerType] = ()):
        """
        Declare all interfaces and write the section header right away.

        Args:
            stream: Binary stream towards the host (the capture pipe)
            default_link_layer: Link layer of packets sent without one
            additional_link_layers: Other link layers the producer may send
        """
        self._stream = stream
        self._closed = False
        self._link_layer_to_iface_id: Dict[int, int] = {}
        self._section = blocks.SectionHeader(options={
            "shb_userappl": "pyextcap",
        })

        for link_layer in [default_link_layer, *additional_link_layers]:
            link_layer = LinkLayerType(link_layer)
            if link_layer in self._link_layer_to_iface_id:
                logger.debug("Link layer %s declared twice, keeping interface %d",
                             link_layer.name, self._link_layer_to_iface_id[link_layer])
                continue
            idb = self._section.new_member(
                blocks.InterfaceDescription,
                link_type=int(link_layer),
                snaplen=0,
            )
            self._link_layer_to_iface_id[link_layer] = idb.interface_id

        self._default_link_layer = LinkLayerType(default_link_layer)
        self._default_iface_id = self._link_layer_to_iface_id[self._default_link_layer]

        # FileWriter writes the SHB and every IDB of the section immediately
        self._writer = FileWriter(self._stream, self._section)
        logger.debug("PCAPNG stream opened with interfaces %s", self.interface_ids)

    @property
    def default_link_layer(self) -> LinkLayerType:
        return self._default_link_layer

    @property
    def interface_ids(self) -> Dict[LinkLayerType, int]:
        """Link layer to pcapng interface id, in declaration order."""
        return {LinkLayerType(k): v for k, v in self._link_layer_to_iface_id.items()}

    @property
    def link_layers(self) -> List[LinkLayerType]:
        return list(self.interface_ids)

    @property
    def closed(self) -> bool:
        return self._closed

    def _resolve_interface(self, link_layer: Optional[LinkLayerType]) -> int:
        if link_layer is None:
            return self._default_iface_id
        try:
            return self._link_layer_to_iface_id[link_layer]
        except KeyError:
            raise UnknownLinkLayerError(
                f"A packet with unfamiliar link layer was passed to {self.__class__.__name__}. "
                f"Link layer: {link_layer!r}, supported: "
                f"{', '.join(ll.name for ll in self.link_layers)}"
            ) from None

    def _write(self, data: bytes, iface_id: int, elapsed: timedelta, comment: Optional[str]) -> None:
        if self._closed:
            raise PublisherClosedError("Cannot send packets through a closed publisher")
        if not data:
            raise EmptyPacketError("Cannot publish a packet without data")

        seconds, microseconds = split_timestamp(elapsed)
        ts = seconds * _TS_UNITS_PER_SECOND + microseconds
        options = {"opt_comment": comment} if comment is not None else {}
        epb = self._section.new_member(
            blocks.EnhancedPacket,
            interface_id=iface_id,
            timestamp_high=(ts >> 32) & 0xFFFFFFFF,
            timestamp_low=ts & 0xFFFFFFFF,
            packet_data=bytes(data),
            options=options,
        )
        self._writer.write_block(epb)
        self._stream.flush()

    def send(self, data: bytes, link_layer: Optional[LinkLayerType] = None) -> None:
        iface_id = self._resolve_interface(link_layer)
        self._write(data, iface_id, timedelta(0), None)

    def send_packet(self, packet: PacketToSend) -> None:
        iface_id = self._resolve_interface(packet.link_layer)
        self._write(packet.data, iface_id, packet.elapsed, packet.comment)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.flush()
        finally:
            self._stream.close()
        logger.debug("PCAPNG stream closed")
