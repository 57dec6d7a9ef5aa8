"""HTTPMonitor: checks that an URL answers with an accepted status code."""
import asyncio
import base64
import binascii
from typing import ClassVar, Literal, Optional

import aiohttp
from loguru import logger

from ..exceptions import CheckError, InvalidResourceError
from ..models import HTTPMonitorSpec, MonitorState
from .base import MonitorResource


class HTTPMonitor(MonitorResource):
    """Monitor for an HTTP endpoint."""

    KIND: ClassVar[str] = "HTTPMonitor"
    PLURAL: ClassVar[str] = "httpmonitors"
    SHORT_NAMES: ClassVar[tuple] = ("httpmon",)

    kind: Literal["HTTPMonitor"] = "HTTPMonitor"
    spec: HTTPMonitorSpec

    def validate_spec(self) -> None:
        self.decoded_body()

    def decoded_body(self) -> Optional[bytes]:
        """Decode the configured request body, if any."""
        if self.spec.base64_data is None:
            return None
        try:
            return base64.b64decode(self.spec.base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidResourceError(f"Invalid base64 data: {e}") from e

    def is_accepted_status(self, status: int) -> bool:
        """An explicit list of codes wins, otherwise any 2XX is accepted."""
        if self.spec.status_code is not None:
            return status in self.spec.status_code
        return 200 <= status < 300

    async def check(self) -> MonitorState:
        url = self.spec.url
        method = self.spec.method.value
        logger.info(f"Checking {method} {url}")

        try:
            body = self.decoded_body()
        except InvalidResourceError as e:
            raise CheckError(str(e)) from e

        timeout = aiohttp.ClientTimeout(total=self.monitor_config.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, data=body) as response:
                    status = response.status
            is_healthy = self.is_accepted_status(status)
            logger.debug(f"{method} {url} returned {status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.info(f"Check failed for {url}: {e!r}")
            is_healthy = False

        new_state = MonitorState.HEALTHY if is_healthy else MonitorState.CRITICAL
        logger.info(f"Check complete for {self.namespace}/{self.name}: {new_state.value} (healthy: {is_healthy})")
        return new_state
