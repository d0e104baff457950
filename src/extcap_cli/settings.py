"""Dispatcher settings."""
from dataclasses import dataclass

@dataclass(frozen=True)
class ExtcapSettings:
    """Values printed in the extcap query responses."""
    version: str = "1.0.0.0"
    help_url: str = "http://127.0.0.1/"
    usage_url: str = "https://www.wireshark.org/docs/wsdg_html_chunked/ChCaptureExtcap.html"
