"""
Virtual capture interfaces.
"""

from .producer import PacketsProducer
from .base import CaptureInterface, IDENTIFIER_PREFIX, derive_interface_identifier
from .basic_interface import BasicCaptureInterface

__all__ = [
    'PacketsProducer',
    'CaptureInterface',
    'IDENTIFIER_PREFIX',
    'derive_interface_identifier',
    'BasicCaptureInterface',
]
