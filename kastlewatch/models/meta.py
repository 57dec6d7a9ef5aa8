"""Object metadata shared by all custom resources."""
from typing import Dict
from pydantic import BaseModel, ConfigDict, Field


class ObjectMeta(BaseModel):
    """The subset of Kubernetes object metadata the operator reads."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    namespace: str = Field("default")
    labels: Dict[str, str] = Field(default_factory=dict)
