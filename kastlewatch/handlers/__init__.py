"""Handler modules for Kopf events."""
from .watch import register_handlers
from .startup import configure_operator, shutdown_operator

__all__ = ["register_handlers", "configure_operator", "shutdown_operator"]
