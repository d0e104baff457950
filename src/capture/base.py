"""
Capture interface definition.
"""
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List

from extcap_config import ConfigField
from models import LinkLayerType
from publish import PacketsPublisher
from .producer import PacketsProducer

IDENTIFIER_PREFIX = "ExtcapNet_"


def derive_interface_identifier(display_name: str) -> str:
    """Identifier the host uses on the command line. Never shown to the user."""
    return IDENTIFIER_PREFIX + "".join(display_name.split())


class CaptureInterface(ABC):
    """A virtual interface the capture host can list, configure and capture from."""

    def __init__(self, display_name: str, producer: PacketsProducer, default_link_layer: LinkLayerType):
        """
        Args:
            display_name: Name of the interface shown by the host
            producer: Called to produce packets; runs until done or forever
            default_link_layer: Link layer of packets sent without an explicit one
        """
        if display_name is None:
            raise TypeError("display_name must not be None")
        if producer is None:
            raise TypeError("producer must not be None")
        self.display_name = display_name
        self.producer = producer
        self.default_link_layer = LinkLayerType(default_link_layer)
        self.identifier = derive_interface_identifier(display_name)

    def get_capture_configuration(self, args: List[str]) -> Dict[ConfigField, str]:
        """Empty by default so producers never have to handle a missing configuration."""
        return {}

    def get_dlts_query_response(self, args: List[str]) -> str:
        """Response to --extcap-dlts."""
        name = self.default_link_layer.name
        return f"dlt {{number={int(self.default_link_layer)}}}{{name={name}}}{{display={name}}}"

    @abstractmethod
    def get_packets_publisher(self, stream: BinaryIO) -> PacketsPublisher:
        """Build the publisher for one capture run, writing to ``stream``."""
        pass

    @abstractmethod
    def get_config_query_response(self, args: List[str]) -> str:
        """Response to --extcap-config."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.identifier!r})"
