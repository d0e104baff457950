"""
"Pcap Replay" interface: replays a capture file into the host.

Classic pcap files are read with scapy's RawPcapReader, pcapng files
with python-pcapng's FileScanner. Packets keep their original spacing
(scaled by the speed field) and are stamped relative to the first one.
"""
from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Callable, Collection, Iterator, Optional, Set, Tuple

import pcapng.blocks as blocks
from pcapng import FileScanner
from scapy.utils import RawPcapReader

from capture import BasicCaptureInterface
from extcap_config import CaptureConfigurationError, ConfigField, FieldType
from models import LinkLayerType, PacketToSend
from publish import PacketsPublisher
from .values import config_value, parse_bool

logger = logging.getLogger(__name__)

_PCAP_MAGIC = {
    b"\xa1\xb2\xc3\xd4",
    b"\xd4\xc3\xb2\xa1",
    b"\xa1\xb2\x3c\x4d",
    b"\x4d\x3c\xb2\xa1",
}
_PCAPNG_MAGIC = b"\x0a\x0d\x0d\x0a"

REPLAY_LINK_LAYERS = (
    LinkLayerType.RAW,
    LinkLayerType.LINUX_SLL,
    LinkLayerType.IEEE802_11,
    LinkLayerType.IEEE802_11_RADIOTAP,
    LinkLayerType.NULL,
    LinkLayerType.LOOP,
)

# (seconds since epoch, link type, packet bytes)
FileRecord = Tuple[float, int, bytes]


def _iter_pcap(filepath: str) -> Iterator[FileRecord]:
    with RawPcapReader(filepath) as reader:
        divisor = 1_000_000_000 if getattr(reader, "nano", False) else 1_000_000
        for data, meta in reader:
            yield meta.sec + meta.usec / divisor, reader.linktype, data


def _iter_pcapng(filepath: str) -> Iterator[FileRecord]:
    with open(filepath, "rb") as f:
        for block in FileScanner(f):
            if isinstance(block, blocks.EnhancedPacket):
                yield float(block.timestamp), block.interface.link_type, block.packet_data


def _pcap_link_types(filepath: str) -> Set[int]:
    with RawPcapReader(filepath) as reader:
        return {reader.linktype}


def _pcapng_link_types(filepath: str) -> Set[int]:
    with open(filepath, "rb") as f:
        return {block.link_type for block in FileScanner(f)
                if isinstance(block, blocks.InterfaceDescription)}


def _select_format(filepath: str) -> str:
    try:
        with open(filepath, "rb") as f:
            magic = f.read(4)
    except OSError as e:
        raise CaptureConfigurationError(f"Failed to open capture file: {e}") from e

    if magic == _PCAPNG_MAGIC:
        return "pcapng"
    if magic in _PCAP_MAGIC:
        return "pcap"
    raise CaptureConfigurationError(f"Unsupported capture file format: {filepath}")


def read_capture_file(filepath: str) -> Iterator[FileRecord]:
    if _select_format(filepath) == "pcapng":
        return _iter_pcapng(filepath)
    return _iter_pcap(filepath)


def capture_link_types(filepath: str) -> Set[int]:
    """Link types declared by the file header (pcap) or its interface blocks (pcapng)."""
    if _select_format(filepath) == "pcapng":
        return _pcapng_link_types(filepath)
    return _pcap_link_types(filepath)


def _link_type_name(link_type: int) -> str:
    try:
        return f"{LinkLayerType(link_type).name} ({link_type})"
    except ValueError:
        return str(link_type)


def to_link_layer(link_type: int,
                  supported: Optional[Collection[LinkLayerType]] = None) -> LinkLayerType:
    """
    Map a file's link type to a LinkLayerType the publisher can write.

    Raises:
        CaptureConfigurationError: Unknown code, or not in ``supported``
    """
    try:
        link_layer = LinkLayerType(link_type)
    except ValueError:
        link_layer = None
    if link_layer is None or (supported is not None and link_layer not in supported):
        names = ", ".join(ll.name for ll in supported) if supported is not None else "known LINKTYPE values"
        raise CaptureConfigurationError(
            f"Capture file uses link type {_link_type_name(link_type)} "
            f"which this interface can not replay. Supported: {names}")
    return link_layer


def check_capture_file(filepath: str, supported: Collection[LinkLayerType]) -> None:
    """Fail before anything is published when the file holds an unsupported link type."""
    for link_type in sorted(capture_link_types(filepath)):
        to_link_layer(link_type, supported)


def replay(records: Iterator[FileRecord],
           publisher: PacketsPublisher,
           speed: float = 1.0,
           sleep: Callable[[float], None] = time.sleep,
           link_layers: Optional[Collection[LinkLayerType]] = None) -> int:
    """
    Publish ``records`` keeping their original spacing divided by ``speed``.
    A speed of 0 or less sends as fast as possible. When ``link_layers``
    is given, a record of any other link layer raises
    CaptureConfigurationError instead of being published.

    Returns the number of packets sent.
    """
    first_ts = None
    started = 0.0
    sent = 0
    for timestamp, link_type, data in records:
        link_layer = to_link_layer(link_type, link_layers)
        if first_ts is None:
            first_ts = timestamp
            started = time.monotonic()
        offset = max(0.0, timestamp - first_ts)
        if speed > 0:
            delay = offset / speed - (time.monotonic() - started)
            if delay > 0:
                sleep(delay)
        publisher.send_packet(PacketToSend(
            data=data,
            link_layer=link_layer,
            time_from_capture_start=timedelta(seconds=offset),
        ))
        sent += 1
    return sent


def build_interface() -> BasicCaptureInterface:
    def produce(configuration, publisher: PacketsPublisher) -> None:
        filepath = configuration[interface.get_field(file_id)]
        speed = config_value(configuration, interface.get_field(speed_id), float, 1.0)
        loop = config_value(configuration, interface.get_field(loop_id), parse_bool, False)
        supported = [interface.default_link_layer, *interface.additional_link_layers]
        check_capture_file(filepath, supported)
        logger.info("Replaying %s (speed=%s, loop=%s)", filepath, speed, loop)
        while True:
            sent = replay(read_capture_file(filepath), publisher, speed=speed, link_layers=supported)
            logger.info("Replayed %d packets from %s", sent, filepath)
            if not loop or sent == 0:
                break

    interface = BasicCaptureInterface("Pcap Replay", produce, LinkLayerType.ETHERNET)
    file_id = interface.add_config_field(ConfigField("Capture File", FieldType.FILESELECT))
    speed_id = interface.add_config_field(lambda: ConfigField("Replay Speed", FieldType.FLOAT, required=False))
    loop_id = interface.add_config_field(lambda: ConfigField("Loop Forever", FieldType.BOOLEAN, required=False))
    for link_layer in REPLAY_LINK_LAYERS:
        interface.add_link_layer(link_layer)
    return interface
