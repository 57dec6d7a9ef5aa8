"""Configuration management for the operator and the worker."""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Configuration settings shared by the controller and the worker."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Controller Configuration
    controller_base_url: str = Field(default="http://localhost:3000", description="Base URL of the worker")
    dispatch_timeout: int = Field(default=10, gt=0, description="Seconds to wait for the worker to accept a check")

    # Worker Configuration
    worker_host: str = Field(default="0.0.0.0")
    worker_port: int = Field(default=3000, gt=0, le=65535)
    notification_timeout: int = Field(default=10, gt=0, description="Seconds to wait for a notification delivery")
    event_component: str = Field(default="kastlewatch")

    # Kubernetes Configuration
    kubeconfig: Optional[str] = Field(default=None)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
