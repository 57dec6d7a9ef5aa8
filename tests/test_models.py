"""Tests for Pydantic models and resource parsing."""
import pytest
from pydantic import ValidationError
from datetime import datetime, timedelta, timezone

from kastlewatch.exceptions import InvalidResourceError
from kastlewatch.models import MonitorConfigSpec, MonitorState, MonitorStatus, TCPMonitorSpec, HTTPMonitorSpec
from kastlewatch.resources import (
    Action,
    DiscordNotifier,
    HTTPMonitor,
    TCPMonitor,
    get_kind,
    parse_resource,
)


class TestMonitorConfigSpec:
    """Tests for MonitorConfigSpec model."""

    def test_valid_config(self):
        config = MonitorConfigSpec(timeout=5, retries=3, polling_frequency=30)
        assert config.polling_frequency == 30
        assert config.notifiers_match_labels is None

    def test_zero_polling_frequency(self):
        with pytest.raises(ValidationError):
            MonitorConfigSpec(timeout=5, retries=3, polling_frequency=0)

    def test_negative_retries(self):
        with pytest.raises(ValidationError):
            MonitorConfigSpec(timeout=5, retries=-1, polling_frequency=10)


class TestMonitorSpecs:
    """Tests for kind-specific spec models."""

    def test_port_out_of_range(self, monitor_config):
        with pytest.raises(ValidationError):
            TCPMonitorSpec(host="localhost", port=70000, monitor_config=monitor_config)

    def test_empty_host(self, monitor_config):
        with pytest.raises(ValidationError):
            TCPMonitorSpec(host="  ", port=80, monitor_config=monitor_config)

    def test_invalid_url(self, monitor_config):
        with pytest.raises(ValidationError):
            HTTPMonitorSpec(url="ftp://example.com", monitor_config=monitor_config)

    def test_method_defaults_to_get(self, monitor_config):
        spec = HTTPMonitorSpec(url="https://example.com", monitor_config=monitor_config)
        assert spec.method.value == "GET"
        assert spec.status_code is None


class TestMonitorStatus:
    """Tests for MonitorStatus model."""

    def test_defaults_to_no_data(self):
        status = MonitorStatus()
        assert status.state == MonitorState.NO_DATA
        assert status.last_checked is None

    def test_serializes_both_fields(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        status = MonitorStatus(last_checked=now, state=MonitorState.CRITICAL)
        assert status.model_dump(mode="json") == {
            "last_checked": "2024-01-01T00:00:00Z",
            "state": "Critical",
        }


class TestResources:
    """Tests for typed resources and the kind registry."""

    def test_parse_tcpmonitor(self, sample_tcpmonitor):
        monitor = parse_resource(sample_tcpmonitor)
        assert isinstance(monitor, TCPMonitor)
        assert monitor.name == "test-monitor"
        assert monitor.namespace == "default"
        assert monitor.current_state() == MonitorState.NO_DATA

    def test_parse_keeps_status(self, sample_httpmonitor):
        sample_httpmonitor["status"] = {"last_checked": "2024-01-01T00:00:00Z", "state": "Healthy"}
        monitor = parse_resource(sample_httpmonitor)
        assert isinstance(monitor, HTTPMonitor)
        assert monitor.current_state() == MonitorState.HEALTHY

    def test_parse_unknown_kind(self, sample_tcpmonitor):
        sample_tcpmonitor["kind"] = "PingMonitor"
        with pytest.raises(InvalidResourceError):
            parse_resource(sample_tcpmonitor)

    def test_parse_invalid_spec(self, sample_tcpmonitor):
        del sample_tcpmonitor["spec"]["port"]
        with pytest.raises(InvalidResourceError):
            parse_resource(sample_tcpmonitor)

    def test_kind_lookup_is_case_insensitive(self):
        assert get_kind("tcpmonitor") is TCPMonitor
        assert get_kind("HTTPMONITOR") is HTTPMonitor
        assert get_kind("DiscordNotifier") is DiscordNotifier

    def test_payload_round_trip_keeps_metadata(self, sample_tcpmonitor):
        monitor = TCPMonitor.model_validate(sample_tcpmonitor)
        payload = monitor.to_payload()
        assert payload["apiVersion"] == "kastlewatch.io/v1alpha1"
        assert payload["kind"] == "TCPMonitor"
        assert payload["metadata"]["uid"] == "test-uid-123"
        assert payload["spec"]["monitor_config"]["polling_frequency"] == 10

    def test_monitor_policies(self, sample_tcpmonitor):
        monitor = TCPMonitor.model_validate(sample_tcpmonitor)
        assert monitor.success_policy() == Action.requeue(10)
        assert monitor.error_policy(ValueError("boom")) == Action.requeue(5)

    def test_notifier_policies(self, sample_discordnotifier):
        notifier = DiscordNotifier.model_validate(sample_discordnotifier)
        assert notifier.success_policy() == Action.requeue(3600)
        assert notifier.error_policy(RuntimeError("boom")) == Action.requeue(60)
        assert notifier.labels == {"type": "discord"}

    def test_seconds_until_due(self, sample_tcpmonitor):
        now = datetime.now(timezone.utc)
        sample_tcpmonitor["status"] = {
            "last_checked": (now - timedelta(seconds=4)).isoformat(),
            "state": "Healthy",
        }
        monitor = TCPMonitor.model_validate(sample_tcpmonitor)
        assert monitor.seconds_until_due(now) == pytest.approx(6, abs=0.01)
        assert monitor.seconds_until_due(now + timedelta(seconds=30)) == 0
