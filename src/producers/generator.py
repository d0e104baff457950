"""
"Packet Generator" interface: synthesizes traffic with scapy.

Ethernet frames go out on the default sub-interface; when the link
layer option is "Raw IP" the Ethernet header is left off and packets go
out on the raw IP sub-interface instead.
"""
from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Optional

from scapy.layers.inet import ICMP, IP, TCP, UDP
from scapy.layers.l2 import Ether
from scapy.packet import Packet, Raw

from capture import BasicCaptureInterface
from extcap_config import ConfigField, ConfigOption, FieldType, MultiOptionsField
from models import LinkLayerType, PacketToSend
from publish import PacketsPublisher
from .values import config_value

logger = logging.getLogger(__name__)

PROTOCOL_OPTIONS = [
    ConfigOption("ICMP Echo", "icmp"),
    ConfigOption("UDP Datagram", "udp"),
    ConfigOption("TCP SYN", "tcp"),
]
LINK_LAYER_OPTIONS = [
    ConfigOption("Ethernet", "ethernet"),
    ConfigOption("Raw IP", "raw"),
]

SRC_IP = "192.0.2.1"
DST_IP = "192.0.2.2"


def build_packet(protocol: str, seq: int, raw_ip: bool = False) -> Packet:
    """One synthetic packet; ``seq`` varies ids and ports between packets."""
    ip = IP(src=SRC_IP, dst=DST_IP, id=seq & 0xFFFF)
    if protocol == "icmp":
        pkt = ip / ICMP(type="echo-request", id=0x4242, seq=seq & 0xFFFF) / Raw(load=b"pyextcap")
    elif protocol == "udp":
        pkt = ip / UDP(sport=40000 + (seq % 1000), dport=9) / Raw(load=b"pyextcap %d" % seq)
    elif protocol == "tcp":
        pkt = ip / TCP(sport=40000 + (seq % 1000), dport=80, flags="S", seq=seq)
    else:
        raise ValueError(f"Unknown protocol: {protocol}")
    if raw_ip:
        return pkt
    return Ether(src="02:00:00:00:00:01", dst="02:00:00:00:00:02") / pkt


def generate(publisher: PacketsPublisher,
             protocol: str,
             count: int,
             interval_ms: int,
             raw_ip: bool = False,
             comment: Optional[str] = None,
             sleep=time.sleep) -> int:
    """
    Publish ``count`` packets (0 means forever) spaced ``interval_ms`` apart.
    Returns the number of packets sent.
    """
    link_layer = LinkLayerType.RAW if raw_ip else LinkLayerType.ETHERNET
    started = time.monotonic()
    seq = 0
    while count == 0 or seq < count:
        if seq and interval_ms > 0:
            sleep(interval_ms / 1000.0)
        publisher.send_packet(PacketToSend(
            data=bytes(build_packet(protocol, seq, raw_ip)),
            link_layer=link_layer,
            time_from_capture_start=timedelta(seconds=time.monotonic() - started),
            comment=comment,
        ))
        seq += 1
    return seq


def build_interface() -> BasicCaptureInterface:
    def produce(configuration, publisher: PacketsPublisher) -> None:
        protocol = configuration[interface.get_field(protocol_id)]
        link = config_value(configuration, interface.get_field(link_id), str, "ethernet")
        count = config_value(configuration, interface.get_field(count_id), int, 10)
        interval_ms = config_value(configuration, interface.get_field(interval_id), int, 1000)
        comment = config_value(configuration, interface.get_field(comment_id), str)
        logger.info("Generating %s packets (count=%d, interval=%dms)", protocol, count, interval_ms)
        sent = generate(publisher, protocol, count, interval_ms, raw_ip=(link == "raw"), comment=comment)
        logger.info("Generated %d packets", sent)

    interface = BasicCaptureInterface("Packet Generator", produce, LinkLayerType.ETHERNET)
    protocol_id = interface.add_config_field(
        lambda: MultiOptionsField("Protocol", FieldType.SELECTOR, PROTOCOL_OPTIONS))
    link_id = interface.add_config_field(
        lambda: MultiOptionsField("Link Layer", FieldType.RADIO, LINK_LAYER_OPTIONS, required=False))
    count_id = interface.add_config_field(ConfigField("Packet Count", FieldType.UNSIGNED, required=False))
    interval_id = interface.add_config_field(ConfigField("Interval (ms)", FieldType.INTEGER, required=False))
    comment_id = interface.add_config_field(ConfigField("Packet Comment", FieldType.STRING, required=False))
    interface.add_link_layer(LinkLayerType.RAW)
    return interface
