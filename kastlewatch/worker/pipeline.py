"""Worker pipeline: run a check, persist the outcome, announce state transitions."""
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from ..context import Context
from ..models import MonitorState, MonitorStatus
from ..resources import MonitorResource
from .notifications import NotificationFanout

STATE_CHANGE_REASON = "StateChange"


class WorkerPipeline:
    """Processes one monitor instance at a time; instances may run concurrently."""

    def __init__(self, context: Context, fanout: Optional[NotificationFanout] = None):
        self.context = context
        self.fanout = fanout or NotificationFanout(context)

    async def process(self, monitor: MonitorResource) -> MonitorState:
        """
        Check a monitor and record the result.

        The status is always written. The event and the notifications are only
        emitted when the state differs from the previously recorded one.

        Returns:
            The new state of the monitor.
        """
        namespace = monitor.namespace
        name = monitor.name
        logger.info(f"Worker received {monitor.KIND} {namespace}/{name}")

        old_state = monitor.current_state()

        try:
            new_state = await monitor.check()
        except Exception as e:
            logger.error(f"Check failed for {monitor.KIND} {namespace}/{name}: {e}")
            new_state = MonitorState.NO_DATA

        await self._update_status(monitor, new_state)

        if old_state != new_state:
            await self._publish_state_change(monitor, old_state, new_state)
            await self.fanout.dispatch(
                namespace,
                monitor.monitor_config.notifiers_match_labels,
                name,
                old_state,
                new_state,
            )

        return new_state

    async def _update_status(self, monitor: MonitorResource, new_state: MonitorState) -> None:
        status = MonitorStatus(last_checked=datetime.now(timezone.utc), state=new_state)
        try:
            await self.context.kube.patch_status(
                type(monitor), monitor.namespace, monitor.name, status.model_dump(mode="json")
            )
            logger.info(f"Updated status for {monitor.namespace}/{monitor.name}: {new_state.value}")
        except Exception as e:
            logger.error(f"Failed to update status for {monitor.namespace}/{monitor.name}: {e}")

    async def _publish_state_change(
        self, monitor: MonitorResource, old_state: MonitorState, new_state: MonitorState
    ) -> None:
        message = f"Monitor state changed from {old_state.value} to {new_state.value}"
        event_type = "Normal" if new_state == MonitorState.HEALTHY else "Warning"
        involved_object = {
            'kind': monitor.KIND,
            'name': monitor.name,
            'apiVersion': monitor.api_version_string(),
            'uid': getattr(monitor.metadata, 'uid', None),
        }
        try:
            await self.context.kube.create_event(
                monitor.namespace, involved_object, STATE_CHANGE_REASON, message, event_type
            )
        except Exception as e:
            logger.error(f"Failed to publish event for {monitor.namespace}/{monitor.name}: {e}")
