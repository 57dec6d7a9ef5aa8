"""Data models for KastleWatch resources."""
from .meta import ObjectMeta
from .spec import (
    DiscordNotifierSpec,
    HTTPMethod,
    HTTPMonitorSpec,
    MonitorConfigSpec,
    SecretKeySelector,
    TCPMonitorSpec,
)
from .status import MonitorState, MonitorStatus

__all__ = [
    "ObjectMeta",
    "MonitorConfigSpec",
    "SecretKeySelector",
    "TCPMonitorSpec",
    "HTTPMethod",
    "HTTPMonitorSpec",
    "DiscordNotifierSpec",
    "MonitorState",
    "MonitorStatus",
]
