"""Pydantic models for monitor status."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class MonitorState(str, Enum):
    """Health state of a monitored target."""

    HEALTHY = "Healthy"
    # Reserved: no check kind produces it yet.
    WARNING = "Warning"
    CRITICAL = "Critical"
    NO_DATA = "NoData"


class MonitorStatus(BaseModel):
    """Status of a monitor resource. Always written as a whole."""

    last_checked: Optional[datetime] = Field(None, description="Timestamp of the last check")
    state: MonitorState = Field(MonitorState.NO_DATA, description="Current state of the monitor")
