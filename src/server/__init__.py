"""Dashboard page and websocket server."""

from .config import ServerConfigurationError, UIServerConfig
from .events import CommandParseError, StickyEventStore, make_event, parse_command
from .service import UIServer

__all__ = [
    "CommandParseError",
    "ServerConfigurationError",
    "StickyEventStore",
    "UIServerConfig",
    "UIServer",
    "make_event",
    "parse_command",
]
