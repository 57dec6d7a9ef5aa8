"""Tests for the TCP and HTTP check executors against real local endpoints."""
import asyncio
import base64
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from kastlewatch.exceptions import CheckError, InvalidResourceError
from kastlewatch.models import MonitorState
from kastlewatch.resources import HTTPMonitor, TCPMonitor
from kastlewatch.resources.tcp_monitor import check_tcp_connection


def make_http_app():
    async def ok(request):
        return web.Response(text="ok")

    async def missing(request):
        return web.Response(status=404, text="missing")

    async def created(request):
        return web.Response(status=201)

    async def echo(request):
        body = await request.read()
        return web.Response(status=200 if body == b"hello" else 400)

    async def slow(request):
        await asyncio.sleep(3)
        return web.Response(text="late")

    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/missing", missing)
    app.router.add_get("/created", created)
    app.router.add_post("/echo", echo)
    app.router.add_get("/slow", slow)
    return app


def http_monitor(sample_httpmonitor, url, **spec):
    sample_httpmonitor["spec"]["url"] = url
    sample_httpmonitor["spec"].update(spec)
    return HTTPMonitor.model_validate(sample_httpmonitor)


class TestTCPCheck:
    """Tests for the TCP executor."""

    @pytest.mark.asyncio
    async def test_open_port_is_healthy(self, sample_tcpmonitor):
        server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            sample_tcpmonitor["spec"]["port"] = port
            monitor = TCPMonitor.model_validate(sample_tcpmonitor)
            assert await monitor.check() == MonitorState.HEALTHY
        finally:
            server.close()
            await server.wait_closed()

    @pytest.mark.asyncio
    async def test_closed_port_is_critical(self, sample_tcpmonitor, closed_port):
        sample_tcpmonitor["spec"]["port"] = closed_port
        monitor = TCPMonitor.model_validate(sample_tcpmonitor)
        assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_unresolvable_host_is_critical(self, sample_tcpmonitor):
        sample_tcpmonitor["spec"]["host"] = "does-not-exist.invalid"
        monitor = TCPMonitor.model_validate(sample_tcpmonitor)
        assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_connection_timeout(self):
        # 10.255.255.1 is not routable, the connection attempt hangs until the timeout.
        assert await check_tcp_connection("10.255.255.1", 81, timeout=0.2) is False


class TestHTTPCheck:
    """Tests for the HTTP executor."""

    @pytest.mark.asyncio
    async def test_2xx_is_healthy(self, sample_httpmonitor):
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/ok")))
            assert await monitor.check() == MonitorState.HEALTHY

            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/created")))
            assert await monitor.check() == MonitorState.HEALTHY

    @pytest.mark.asyncio
    async def test_404_is_critical(self, sample_httpmonitor):
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/missing")))
            assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_allowed_status_codes_override_2xx(self, sample_httpmonitor):
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/missing")), status_code=[404])
            assert await monitor.check() == MonitorState.HEALTHY

            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/ok")), status_code=[201, 204])
            assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_empty_status_code_list_accepts_nothing(self, sample_httpmonitor):
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/ok")), status_code=[])
            assert not monitor.is_accepted_status(200)
            assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_post_sends_decoded_body(self, sample_httpmonitor):
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(
                sample_httpmonitor,
                str(server.make_url("/echo")),
                method="POST",
                base64_data=base64.b64encode(b"hello").decode(),
            )
            assert await monitor.check() == MonitorState.HEALTHY

    @pytest.mark.asyncio
    async def test_timeout_is_critical(self, sample_httpmonitor):
        sample_httpmonitor["spec"]["monitor_config"]["timeout"] = 1
        async with TestServer(make_http_app()) as server:
            monitor = http_monitor(sample_httpmonitor, str(server.make_url("/slow")))
            assert await monitor.check() == MonitorState.CRITICAL

    @pytest.mark.asyncio
    async def test_connection_refused_is_critical(self, sample_httpmonitor, closed_port):
        monitor = http_monitor(sample_httpmonitor, f"http://127.0.0.1:{closed_port}/")
        assert await monitor.check() == MonitorState.CRITICAL

    def test_validate_rejects_invalid_base64(self, sample_httpmonitor):
        monitor = http_monitor(sample_httpmonitor, "http://example.com", method="POST", base64_data="invalid-base64!")
        with pytest.raises(InvalidResourceError):
            monitor.validate_spec()

    def test_validate_accepts_valid_base64(self, sample_httpmonitor):
        monitor = http_monitor(sample_httpmonitor, "http://example.com", method="POST", base64_data="aGVsbG8=")
        monitor.validate_spec()
        assert monitor.decoded_body() == b"hello"

    @pytest.mark.asyncio
    async def test_check_with_invalid_base64_is_an_execution_error(self, sample_httpmonitor):
        monitor = http_monitor(sample_httpmonitor, "http://example.com", method="POST", base64_data="%%%")
        with pytest.raises(CheckError):
            await monitor.check()
