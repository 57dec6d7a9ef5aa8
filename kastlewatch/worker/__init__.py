"""Worker side: check execution, status persistence and notifications."""
from .notifications import NotificationFanout
from .pipeline import WorkerPipeline
from .server import create_app, run_worker

__all__ = ["NotificationFanout", "WorkerPipeline", "create_app", "run_worker"]
