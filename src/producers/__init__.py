"""
Sample producers bundled with the pyextcap plugin.
"""

from . import generator, pcap_replay

__all__ = [
    'generator',
    'pcap_replay',
]
