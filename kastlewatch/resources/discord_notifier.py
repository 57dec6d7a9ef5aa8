"""DiscordNotifier: posts state changes to a Discord webhook."""
import asyncio
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Literal, Optional

import aiohttp
from loguru import logger

from ..exceptions import NotificationError
from ..models import DiscordNotifierSpec, MonitorState
from .base import NotifierResource

if TYPE_CHECKING:
    from ..context import Context

STATE_COLORS = {
    MonitorState.HEALTHY: 0x00FF00,
    MonitorState.WARNING: 0xFFFF00,
    MonitorState.CRITICAL: 0xFF0000,
    MonitorState.NO_DATA: 0x808080,
}


def build_discord_payload(
    monitor_name: str,
    old_state: MonitorState,
    new_state: MonitorState,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the webhook payload: a single embed colored by the new state."""
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "embeds": [{
            "title": f"Monitor {monitor_name} is {new_state.value}",
            "description": f"State changed from {old_state.value} to {new_state.value}",
            "color": STATE_COLORS[new_state],
            "timestamp": timestamp.isoformat(),
        }]
    }


async def send_discord_notification(webhook_url: str, payload: Dict[str, Any], timeout: float = 10) -> None:
    """POST the payload to the webhook, raising NotificationError on any failure."""
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.post(webhook_url, json=payload) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise NotificationError(f"Discord API returned {response.status}: {body[:200]}")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise NotificationError(f"Failed to reach Discord webhook: {e!r}") from e


class DiscordNotifier(NotifierResource):
    """Notifier delivering to a Discord channel webhook."""

    KIND: ClassVar[str] = "DiscordNotifier"
    PLURAL: ClassVar[str] = "discordnotifiers"
    SHORT_NAMES: ClassVar[tuple] = ("discord",)

    kind: Literal["DiscordNotifier"] = "DiscordNotifier"
    spec: DiscordNotifierSpec

    async def notify(
        self,
        context: "Context",
        monitor_name: str,
        old_state: MonitorState,
        new_state: MonitorState,
    ) -> None:
        secret_ref = self.spec.webhook_secret_ref
        webhook_url = await context.kube.get_secret_value(self.namespace, secret_ref.name, secret_ref.key)

        payload = build_discord_payload(monitor_name, old_state, new_state)
        await send_discord_notification(webhook_url, payload, timeout=context.config.notification_timeout)
        logger.info(f"Sent Discord notification from {self.namespace}/{self.name} for {monitor_name}")
