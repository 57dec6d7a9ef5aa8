"""API clients used by the operator."""
from .kubernetes import KubernetesClient, load_kubernetes_config

__all__ = ["KubernetesClient", "load_kubernetes_config"]
