"""Pydantic models for monitor and notifier specifications."""
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class MonitorConfigSpec(BaseModel):
    """Configuration for the monitoring behavior, shared by every monitor kind."""

    timeout: int = Field(..., gt=0, description="Timeout in seconds for a single check")
    retries: int = Field(..., ge=0, description="Number of retries before considering the check failed")
    polling_frequency: int = Field(..., gt=0, description="Frequency in seconds to poll the target")
    notifiers_match_labels: Optional[Dict[str, str]] = Field(None, description="Labels to match notifiers")


class SecretKeySelector(BaseModel):
    """Reference to a key inside a secret in the same namespace."""

    name: str = Field(..., min_length=1, description="The name of the secret")
    key: str = Field(..., min_length=1, description="The key of the secret to select")


class TCPMonitorSpec(BaseModel):
    """Specification for the TCPMonitor resource."""

    host: str = Field(..., description="The hostname or IP address of the target")
    port: int = Field(..., ge=1, le=65535, description="The port number to check")
    monitor_config: MonitorConfigSpec = Field(..., description="Configuration for the monitoring behavior")

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        if not v.strip():
            raise ValueError('Host cannot be empty')
        return v.strip()


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class HTTPMonitorSpec(BaseModel):
    """Specification for the HTTPMonitor resource."""

    url: str = Field(..., description="The URL to check")
    monitor_config: MonitorConfigSpec = Field(..., description="Configuration for the monitoring behavior")
    method: HTTPMethod = Field(HTTPMethod.GET, description="HTTP method, GET or POST")
    status_code: Optional[List[int]] = Field(
        None, description="HTTP status codes allowed for success. If not defined, any 2XX is allowed"
    )
    base64_data: Optional[str] = Field(None, description="Base64 encoded request body")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError('URL must start with http:// or https://')
        return v


class DiscordNotifierSpec(BaseModel):
    """Specification for the DiscordNotifier resource."""

    webhook_secret_ref: SecretKeySelector = Field(..., description="Reference to the secret containing the webhook URL")
    message_format: Optional[str] = Field(None, description="Reserved for custom message formats")
