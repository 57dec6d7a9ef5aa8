"""Resource kinds and the capabilities they implement."""
from .base import Action, ControllerResource, MonitorResource, NotifierResource, API_VERSION
from .discord_notifier import DiscordNotifier
from .http_monitor import HTTPMonitor
from .tcp_monitor import TCPMonitor
from .registry import MONITOR_KINDS, NOTIFIER_KINDS, RESOURCE_KINDS, get_kind, parse_resource

__all__ = [
    "Action",
    "API_VERSION",
    "ControllerResource",
    "MonitorResource",
    "NotifierResource",
    "TCPMonitor",
    "HTTPMonitor",
    "DiscordNotifier",
    "MONITOR_KINDS",
    "NOTIFIER_KINDS",
    "RESOURCE_KINDS",
    "get_kind",
    "parse_resource",
]
