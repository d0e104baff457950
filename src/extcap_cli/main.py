"""Entry point of the bundled sample extcap plugin."""
from typing import Tuple

import click

from producers import generator, pcap_replay
from .log import configure_logging
from .manager import ExtcapManager


def build_manager() -> ExtcapManager:
    manager = ExtcapManager()
    manager.register_interface(pcap_replay.build_interface())
    manager.register_interface(generator.build_interface())
    return manager


@click.command(context_settings={
    "ignore_unknown_options": True,
    "allow_extra_args": True,
    "help_option_names": [],
})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(args: Tuple[str, ...]):
    """
    Extcap plugin exposing the "Pcap Replay" and "Packet Generator" interfaces.

    The host calls it with its own flags, e.g.:
      pyextcap --extcap-interfaces
      pyextcap --extcap-interface ExtcapNet_PacketGenerator --extcap-config
    """
    configure_logging()
    build_manager().run(list(args))


if __name__ == "__main__":
    main()
