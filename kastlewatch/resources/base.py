"""
Capability model shared by every resource kind.

Every watched kind is a ``ControllerResource``: it knows how long to wait
before the next reconciliation and how to validate itself. Monitor kinds add
``check()``; notifier kinds add ``notify()``. The reconciler, the worker
pipeline and the notification fan-out are written against these classes only.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..models import MonitorConfigSpec, MonitorState, MonitorStatus, ObjectMeta

if TYPE_CHECKING:
    from ..context import Context

API_GROUP = "kastlewatch.io"
API_VERSION_NAME = "v1alpha1"
API_VERSION = f"{API_GROUP}/{API_VERSION_NAME}"


@dataclass(frozen=True)
class Action:
    """When the framework should reconcile the instance again."""

    requeue_after: float

    @classmethod
    def requeue(cls, seconds: float) -> "Action":
        return cls(requeue_after=float(seconds))


class ControllerResource(BaseModel, ABC):
    """A namespaced custom resource watched by the controller."""

    model_config = ConfigDict(populate_by_name=True)

    GROUP: ClassVar[str] = API_GROUP
    VERSION: ClassVar[str] = API_VERSION_NAME
    KIND: ClassVar[str]
    PLURAL: ClassVar[str]
    SHORT_NAMES: ClassVar[tuple] = ()

    # Fixed backoff after a failed reconciliation, whatever the error.
    ERROR_REQUEUE_SECONDS: ClassVar[int] = 5

    api_version: str = Field(API_VERSION, alias="apiVersion")
    metadata: ObjectMeta

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def labels(self) -> Dict[str, str]:
        return self.metadata.labels

    @classmethod
    def api_version_string(cls) -> str:
        return f"{cls.GROUP}/{cls.VERSION}"

    @classmethod
    def crd_name(cls) -> str:
        return f"{cls.PLURAL}.{cls.GROUP}"

    @abstractmethod
    def success_policy(self) -> Action:
        """Action to take after a successful reconciliation."""

    def error_policy(self, error: Exception) -> Action:
        """Action to take after a failed reconciliation."""
        logger.error(f"Reconciliation error for {self.KIND} {self.namespace}/{self.name}: {error}")
        return Action.requeue(self.ERROR_REQUEUE_SECONDS)

    def validate_spec(self) -> None:
        """Reject malformed configuration before any network activity.

        Raises:
            InvalidResourceError: If the configuration cannot be used.
        """

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the full instance (spec and status) as sent over the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MonitorResource(ControllerResource):
    """A resource whose target can be checked."""

    status: Optional[MonitorStatus] = None

    @abstractmethod
    async def check(self) -> MonitorState:
        """Run the check once and return the resulting state.

        Raises:
            CheckError: If the check could not be executed at all.
        """

    @property
    def monitor_config(self) -> MonitorConfigSpec:
        return self.spec.monitor_config

    def current_state(self) -> MonitorState:
        if self.status is None:
            return MonitorState.NO_DATA
        return self.status.state

    def success_policy(self) -> Action:
        return Action.requeue(self.monitor_config.polling_frequency)

    def seconds_until_due(self, now: Optional[datetime] = None) -> float:
        """Seconds left before the next check is due, 0 if it is due now."""
        if self.status is None or self.status.last_checked is None:
            return 0.0

        now = now or datetime.now(timezone.utc)
        last_checked = self.status.last_checked
        if last_checked.tzinfo is None:
            last_checked = last_checked.replace(tzinfo=timezone.utc)

        elapsed = (now - last_checked).total_seconds()
        return max(0.0, self.monitor_config.polling_frequency - elapsed)


class NotifierResource(ControllerResource):
    """A resource that delivers state change notifications."""

    ERROR_REQUEUE_SECONDS: ClassVar[int] = 60
    # Notifiers are passive, they only need an occasional revalidation.
    SUCCESS_REQUEUE_SECONDS: ClassVar[int] = 3600

    def success_policy(self) -> Action:
        return Action.requeue(self.SUCCESS_REQUEUE_SECONDS)

    @abstractmethod
    async def notify(
        self,
        context: "Context",
        monitor_name: str,
        old_state: MonitorState,
        new_state: MonitorState,
    ) -> None:
        """Deliver a notification about a monitor state change.

        Raises:
            SecretNotFoundError: If the delivery configuration cannot be resolved.
            NotificationError: If the delivery failed.
        """
