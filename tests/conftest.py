"""Pytest configuration and fixtures for the test suite."""
import socket
import pytest
from unittest.mock import AsyncMock, Mock

from kastlewatch.clients import KubernetesClient
from kastlewatch.context import Context
from kastlewatch.utils.config import Config


@pytest.fixture
def test_config():
    """Test configuration."""
    return Config(
        controller_base_url="http://worker:3000",
        worker_host="127.0.0.1",
        worker_port=3000,
        dispatch_timeout=2,
        notification_timeout=2,
    )


@pytest.fixture
def mock_kube():
    """Mock Kubernetes client with every API call succeeding."""
    kube = Mock(spec=KubernetesClient)
    kube.patch_status = AsyncMock(return_value={})
    kube.create_event = AsyncMock(return_value=None)
    kube.list_resources = AsyncMock(return_value=[])
    kube.get_secret_value = AsyncMock(return_value="http://discord.invalid/webhook")
    kube.get_crd = AsyncMock(return_value=None)
    kube.create_crd = AsyncMock(return_value=None)
    kube.replace_crd = AsyncMock(return_value=None)
    return kube


@pytest.fixture
def context(test_config, mock_kube):
    """Context wired to the mock Kubernetes client."""
    return Context(config=test_config, kube=mock_kube)


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return port


@pytest.fixture
def monitor_config():
    """Sample monitor configuration block."""
    return {
        "timeout": 2,
        "retries": 3,
        "polling_frequency": 10,
    }


@pytest.fixture
def sample_tcpmonitor(monitor_config):
    """Complete TCPMonitor object."""
    return {
        "apiVersion": "kastlewatch.io/v1alpha1",
        "kind": "TCPMonitor",
        "metadata": {
            "name": "test-monitor",
            "namespace": "default",
            "uid": "test-uid-123",
        },
        "spec": {
            "host": "127.0.0.1",
            "port": 8080,
            "monitor_config": monitor_config,
        },
    }


@pytest.fixture
def sample_httpmonitor(monitor_config):
    """Complete HTTPMonitor object."""
    return {
        "apiVersion": "kastlewatch.io/v1alpha1",
        "kind": "HTTPMonitor",
        "metadata": {
            "name": "test-http-monitor",
            "namespace": "default",
        },
        "spec": {
            "url": "http://example.com",
            "method": "GET",
            "monitor_config": monitor_config,
        },
    }


@pytest.fixture
def sample_discordnotifier():
    """Complete DiscordNotifier object."""
    return {
        "apiVersion": "kastlewatch.io/v1alpha1",
        "kind": "DiscordNotifier",
        "metadata": {
            "name": "test-notifier",
            "namespace": "default",
            "labels": {"type": "discord"},
        },
        "spec": {
            "webhook_secret_ref": {"name": "discord-webhook", "key": "url"},
        },
    }
