"""KastleWatch: a Kubernetes operator that monitors TCP and HTTP endpoints."""

__version__ = "0.1.0"
