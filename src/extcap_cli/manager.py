"""
Extcap command dispatcher.

The host runs the plugin once per query. Each run answers exactly one
of --extcap-interfaces, --extcap-config, --extcap-dlts or --capture and
exits with a status code the host interprets.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import click

from capture import BasicCaptureInterface, CaptureInterface, PacketsProducer
from models import LinkLayerType
from .channel import ChannelOpener, open_capture_channel, strip_pipe_prefix
from .settings import ExtcapSettings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_COMMAND = 1
EXIT_MISSING_INTERFACE = 2
EXIT_UNKNOWN_INTERFACE = 3
EXIT_MISSING_FIFO = 4


class ExtcapError(RuntimeError):
    """Raised when the manager itself is misconfigured."""
    pass


@dataclass(frozen=True)
class DispatchOutcome:
    exit_code: int
    output: str = ""


class ExtcapManager:
    """
    Answers the host's queries for a set of registered interfaces.

    Example:
        manager = ExtcapManager()
        iface = manager.register_interface("My Interface", producer, LinkLayerType.ETHERNET)
        manager.run(sys.argv[1:])
    """

    def __init__(self,
                 settings: Optional[ExtcapSettings] = None,
                 channel_opener: ChannelOpener = open_capture_channel):
        self.settings = settings or ExtcapSettings()
        self.channel_opener = channel_opener
        self._interfaces: List[CaptureInterface] = []

    @property
    def interfaces(self) -> List[CaptureInterface]:
        return list(self._interfaces)

    def register_interface(self,
                           interface: Union[str, CaptureInterface],
                           producer: Optional[PacketsProducer] = None,
                           default_link_layer: LinkLayerType = LinkLayerType.ETHERNET) -> CaptureInterface:
        """
        Register an interface the plugin exposes.

        Either pass a ready CaptureInterface, or a display name plus a
        producer to build a BasicCaptureInterface.
        """
        if not isinstance(interface, CaptureInterface):
            interface = BasicCaptureInterface(interface, producer, default_link_layer)
        elif producer is not None:
            raise TypeError("producer is only accepted together with a display name")

        if any(existing.identifier == interface.identifier for existing in self._interfaces):
            raise ExtcapError(f"An interface with identifier '{interface.identifier}' is already registered")
        self._interfaces.append(interface)
        return interface

    def find_interface(self, identifier: str) -> Optional[CaptureInterface]:
        for interface in self._interfaces:
            if interface.identifier == identifier:
                return interface
        return None

    def get_interfaces_query_response(self) -> str:
        lines = [f"extcap {{version={self.settings.version}}}{{help={self.settings.help_url}}}"]
        for interface in self._interfaces:
            lines.append(f"interface {{value={interface.identifier}}}{{display={interface.display_name}}}")
        return "\n".join(lines)

    def _usage_error(self, exit_code: int, *lines: str) -> DispatchOutcome:
        logger.warning("%s (exit %d)", lines[0], exit_code)
        return DispatchOutcome(exit_code, "\n".join(lines))

    def dispatch(self, args: Sequence[str]) -> DispatchOutcome:
        """
        Route one invocation.

        Only --capture does real work: it opens the host's pipe, runs the
        selected interface's producer until it returns, then releases
        the pipe. Producer and configuration errors propagate after the
        pipe is closed.
        """
        if args is None:
            raise TypeError("args must not be None")
        if not self._interfaces:
            raise ExtcapError("Can not run ExtcapManager without any registered interfaces. "
                              "Call register_interface before calling run")
        args = list(args)

        if "--extcap-interfaces" in args:
            return DispatchOutcome(EXIT_OK, self.get_interfaces_query_response())

        # Everything below targets one interface
        iface_index = args.index("--extcap-interface") if "--extcap-interface" in args else -1
        if iface_index == -1 or iface_index == len(args) - 1:
            return self._usage_error(EXIT_MISSING_INTERFACE,
                                     "ERROR: Command is missing --extcap-interface parameter.")
        identifier = args[iface_index + 1]
        interface = self.find_interface(identifier)
        if interface is None:
            return self._usage_error(EXIT_UNKNOWN_INTERFACE,
                                     f"ERROR: No interface found with the identifier '{identifier}'",
                                     f"Usage: See {self.settings.usage_url}")
        logger.debug("Selected interface %s", interface.identifier)

        if "--extcap-config" in args:
            return DispatchOutcome(EXIT_OK, interface.get_config_query_response(args))

        if "--extcap-dlts" in args:
            return DispatchOutcome(EXIT_OK, interface.get_dlts_query_response(args))

        if "--capture" in args:
            fifo_index = args.index("--fifo") if "--fifo" in args else -1
            if fifo_index == -1 or fifo_index == len(args) - 1:
                return self._usage_error(EXIT_MISSING_FIFO,
                                         "ERROR: Can not capture packets if --fifo flag or it's value are not specified.")
            self._capture(interface, args, strip_pipe_prefix(args[fifo_index + 1]))
            return DispatchOutcome(EXIT_OK)

        return self._usage_error(EXIT_NO_COMMAND, f"Usage: See {self.settings.usage_url}")

    def _capture(self, interface: CaptureInterface, args: List[str], pipe_name: str) -> None:
        with self.channel_opener(pipe_name) as channel:
            with interface.get_packets_publisher(channel) as publisher:
                configuration = interface.get_capture_configuration(args)
                logger.debug("Starting producer for %s", interface.identifier)
                # Might run indefinitely
                interface.producer(configuration, publisher)
        logger.debug("Producer for %s returned, capture channel released", interface.identifier)

    def run(self, args: Sequence[str]) -> None:
        """Dispatch ``args``, print the response and exit with its status code."""
        outcome = self.dispatch(args)
        if outcome.output:
            click.echo(outcome.output)
        sys.exit(outcome.exit_code)
