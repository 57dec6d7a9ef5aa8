"""Helper utility functions."""
from typing import Mapping, Optional


def build_worker_url(base_url: str, api_version: str, kind: str) -> str:
    """Build the worker URL for a kind: ``{base}/{version}/{kind-lowercased}``."""
    version = api_version.split('/')[-1]
    return f"{base_url.rstrip('/')}/{version}/{kind.lower()}"


def build_label_selector(labels: Optional[Mapping[str, str]]) -> str:
    """Build a Kubernetes equality-based label selector string."""
    if not labels:
        return ""
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


def labels_match(selector: Optional[Mapping[str, str]], labels: Optional[Mapping[str, str]]) -> bool:
    """Check that every selector pair is present in labels with the same value."""
    labels = labels or {}
    return all(labels.get(key) == value for key, value in (selector or {}).items())
