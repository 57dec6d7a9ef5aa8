"""TCPMonitor: checks that a TCP port accepts connections."""
import asyncio
from typing import ClassVar, Literal

from loguru import logger

from ..models import MonitorState, TCPMonitorSpec
from .base import MonitorResource


async def check_tcp_connection(host: str, port: int, timeout: float) -> bool:
    """Try to open a TCP connection to host:port within timeout seconds."""
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Connection to {host}:{port} failed: {e!r}")
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return True


class TCPMonitor(MonitorResource):
    """Monitor for a TCP endpoint."""

    KIND: ClassVar[str] = "TCPMonitor"
    PLURAL: ClassVar[str] = "tcpmonitors"
    SHORT_NAMES: ClassVar[tuple] = ("tcpmon",)

    kind: Literal["TCPMonitor"] = "TCPMonitor"
    spec: TCPMonitorSpec

    async def check(self) -> MonitorState:
        host = self.spec.host
        port = self.spec.port
        logger.info(f"Checking {host}:{port}")

        is_open = await check_tcp_connection(host, port, self.monitor_config.timeout)

        new_state = MonitorState.HEALTHY if is_open else MonitorState.CRITICAL
        logger.info(f"Check complete for {self.namespace}/{self.name}: {new_state.value} (open: {is_open})")
        return new_state
