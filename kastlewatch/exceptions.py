"""Exceptions raised by KastleWatch components."""


class KastleWatchError(Exception):
    """Base class for all KastleWatch errors."""


class InvalidResourceError(KastleWatchError):
    """The resource configuration is malformed and cannot be checked."""


class CheckError(KastleWatchError):
    """The check could not be executed, so no verdict is available."""


class SecretNotFoundError(KastleWatchError):
    """The referenced secret or key does not exist."""

    def __init__(self, namespace: str, name: str, key: str):
        self.namespace = namespace
        self.name = name
        self.key = key
        super().__init__(f"Secret key '{key}' not found in secret {namespace}/{name}")


class NotificationError(KastleWatchError):
    """A notification could not be delivered."""
