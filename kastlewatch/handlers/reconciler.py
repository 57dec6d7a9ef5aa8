"""Reconciliation logic shared by every resource kind."""
import asyncio
from typing import Any, Mapping, Optional

import aiohttp
from loguru import logger

from ..context import Context
from ..exceptions import InvalidResourceError
from ..resources import Action, ControllerResource, MonitorResource, get_kind, parse_resource
from ..utils.helpers import build_worker_url


class Reconciler:
    """
    Validates instances and hands monitors over to the worker.

    The worker is reached over HTTP so slow checks never hold up the watch
    loop. A worker that cannot be reached is logged and otherwise ignored:
    the instance is still revisited after its normal poll interval.
    """

    def __init__(self, context: Context, session: Optional[aiohttp.ClientSession] = None):
        self.context = context
        self._timeout = aiohttp.ClientTimeout(total=context.config.dispatch_timeout)
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def reconcile(self, resource: ControllerResource, force: bool = False) -> Action:
        """
        Reconcile one instance and return when to revisit it.

        Args:
            resource: The instance to reconcile.
            force: Dispatch a monitor even if it was checked recently.

        Raises:
            InvalidResourceError: If the instance fails validation.
        """
        resource.validate_spec()

        if not isinstance(resource, MonitorResource):
            # Notifiers are passive, nothing to run.
            return resource.success_policy()

        if not force:
            remaining = int(resource.seconds_until_due())
            if remaining > 0:
                logger.debug(f"{resource.KIND} {resource.namespace}/{resource.name} checked recently, "
                             f"next check in {remaining}s")
                return Action.requeue(remaining)

        await self.dispatch(resource)
        return resource.success_policy()

    async def reconcile_body(self, body: Mapping[str, Any], force: bool = False) -> Action:
        """Parse a raw object and reconcile it, applying the kind's error policy on failure."""
        name = body.get('metadata', {}).get('name')
        try:
            kind = get_kind(str(body.get('kind', '')))
        except InvalidResourceError as e:
            logger.error(f"Cannot reconcile {name}: {e}")
            return Action.requeue(ControllerResource.ERROR_REQUEUE_SECONDS)

        try:
            resource = parse_resource(body)
        except InvalidResourceError as e:
            logger.error(f"Invalid {kind.KIND} {name}: {e}")
            return Action.requeue(kind.ERROR_REQUEUE_SECONDS)

        try:
            return await self.reconcile(resource, force=force)
        except InvalidResourceError as e:
            return resource.error_policy(e)

    async def dispatch(self, monitor: MonitorResource) -> bool:
        """Submit a monitor to the worker. Failures are logged, never raised."""
        worker_url = build_worker_url(
            self.context.config.controller_base_url, monitor.api_version_string(), monitor.KIND
        )
        logger.info(f"Dispatching {monitor.KIND} {monitor.namespace}/{monitor.name} to worker at {worker_url}")

        try:
            session = await self._get_session()
            async with session.post(worker_url, json=monitor.to_payload()) as response:
                if response.status == 200:
                    logger.debug("Successfully dispatched to worker")
                    return True
                body = await response.text()
                logger.error(f"Worker returned error: status={response.status}, body={body[:500]}")
        except asyncio.TimeoutError:
            logger.error(f"Timed out dispatching {monitor.namespace}/{monitor.name} to worker")
        except aiohttp.ClientError as e:
            logger.error(f"Failed to dispatch {monitor.namespace}/{monitor.name} to worker: {e}")

        return False
