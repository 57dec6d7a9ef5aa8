"""Utility modules for the operator."""
from .config import Config
from .helpers import build_worker_url, build_label_selector, labels_match

__all__ = ["Config", "build_worker_url", "build_label_selector", "labels_match"]
