"""
Custom exceptions for packet publishing.
"""

class PublishError(Exception):
    """Base exception for all publisher errors."""
    pass

class UnknownLinkLayerError(PublishError, ValueError):
    """Raised when a packet's link layer was never declared to the publisher."""
    pass

class EmptyPacketError(PublishError, ValueError):
    """Raised for packets without payload; pcapng records cannot be empty here."""
    pass

class PublisherClosedError(PublishError):
    """Raised when sending through a publisher that was already closed."""
    pass

class NegativeTimestampError(PublishError, ValueError):
    """Raised for packets stamped before the start of the capture."""
    pass
