"""Producer callable type."""
from typing import Callable, Dict

from extcap_config import ConfigField
from publish import PacketsPublisher

# Called once per capture with the parsed configuration and a publisher.
# It keeps publishing until it runs out of packets, which for live
# traffic may mean it never returns.
PacketsProducer = Callable[[Dict[ConfigField, str], PacketsPublisher], None]
