"""Static table of the resource kinds the operator knows about."""
from typing import Any, Dict, Mapping, Tuple, Type

from pydantic import ValidationError

from ..exceptions import InvalidResourceError
from .base import ControllerResource, MonitorResource, NotifierResource
from .discord_notifier import DiscordNotifier
from .http_monitor import HTTPMonitor
from .tcp_monitor import TCPMonitor

MONITOR_KINDS: Tuple[Type[MonitorResource], ...] = (TCPMonitor, HTTPMonitor)
NOTIFIER_KINDS: Tuple[Type[NotifierResource], ...] = (DiscordNotifier,)
RESOURCE_KINDS: Tuple[Type[ControllerResource], ...] = MONITOR_KINDS + NOTIFIER_KINDS

_KINDS_BY_NAME: Dict[str, Type[ControllerResource]] = {kind.KIND.lower(): kind for kind in RESOURCE_KINDS}


def get_kind(kind: str) -> Type[ControllerResource]:
    """Look up a kind by name, case-insensitively."""
    try:
        return _KINDS_BY_NAME[kind.lower()]
    except KeyError:
        raise InvalidResourceError(f"Unknown resource kind '{kind}'") from None


def parse_resource(body: Mapping[str, Any]) -> ControllerResource:
    """Parse a raw object into its typed resource."""
    kind = get_kind(str(body.get('kind', '')))
    try:
        return kind.model_validate(dict(body))
    except ValidationError as e:
        raise InvalidResourceError(f"Invalid {kind.KIND}: {e}") from e
