"""Notification fan-out: find the notifiers matching a monitor and drive each of them."""
from typing import Dict, List, Optional, Sequence, Type

from loguru import logger
from pydantic import ValidationError

from ..context import Context
from ..models import MonitorState
from ..resources import NOTIFIER_KINDS, NotifierResource
from ..utils.helpers import labels_match


class NotificationFanout:
    """Resolves notifier instances by label selector and notifies each one independently."""

    def __init__(self, context: Context, notifier_kinds: Sequence[Type[NotifierResource]] = NOTIFIER_KINDS):
        self.context = context
        self.notifier_kinds = tuple(notifier_kinds)

    async def find_notifiers(self, namespace: str, selector: Dict[str, str]) -> List[NotifierResource]:
        """List the notifiers of every known kind in namespace whose labels match selector."""
        notifiers: List[NotifierResource] = []
        for kind in self.notifier_kinds:
            for item in await self.context.kube.list_resources(kind, namespace, selector):
                try:
                    notifier = kind.model_validate(item)
                except ValidationError as e:
                    name = item.get('metadata', {}).get('name')
                    logger.warning(f"Skipping invalid {kind.KIND} {namespace}/{name}: {e}")
                    continue

                if labels_match(selector, notifier.labels):
                    notifiers.append(notifier)
        return notifiers

    async def dispatch(
        self,
        namespace: str,
        selector: Optional[Dict[str, str]],
        monitor_name: str,
        old_state: MonitorState,
        new_state: MonitorState,
    ) -> int:
        """
        Notify every matching notifier about a state change.

        A missing selector means no notification is wanted. One notifier
        failing never prevents delivery to the others.

        Returns:
            The number of notifiers that were notified successfully.
        """
        if not selector:
            return 0

        try:
            notifiers = await self.find_notifiers(namespace, selector)
        except Exception as e:
            logger.error(f"Failed to list notifiers in {namespace} for {monitor_name}: {e}")
            return 0

        delivered = 0
        for notifier in notifiers:
            logger.info(f"Sending notification to {notifier.KIND} {notifier.name} for {monitor_name}")
            try:
                await notifier.notify(self.context, monitor_name, old_state, new_state)
                delivered += 1
            except Exception as e:
                logger.error(f"Failed to notify {notifier.KIND} {namespace}/{notifier.name}: {e}")

        return delivered
