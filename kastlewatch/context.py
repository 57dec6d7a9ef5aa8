"""Process-wide context handed to every component at construction time."""
from dataclasses import dataclass

from .clients.kubernetes import KubernetesClient
from .utils.config import Config


@dataclass(frozen=True)
class Context:
    """Immutable bundle of configuration and API clients."""

    config: Config
    kube: KubernetesClient
