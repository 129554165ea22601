"""
Result and error types for discovery sessions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DiscoveryError(Exception):
    """Base class for session-level discovery errors."""


class DiscoveryStopped(DiscoveryError):
    """The session was stopped by its caller."""

    def __init__(self, message: str = "Stopped"):
        super().__init__(message)


class SubscriptionFailed(DiscoveryError):
    """The broker rejected or failed the discovery subscription."""

    def __init__(self, topic: str, cause: BaseException):
        super().__init__(f"Subscription to {topic} failed: {cause!r}")
        self.topic = topic
        self.cause = cause
        self.__cause__ = cause


class SessionState(str, Enum):
    """Lifecycle of a discovery session."""
    CREATED = "created"
    SUBSCRIBING = "subscribing"
    RUNNING = "running"
    COMPLETED = "completed"


class DiscoveryStatus(str, Enum):
    """How a discovery window closed."""
    FINISHED = "finished"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass(frozen=True)
class DiscoveryResult:
    """
    Value a session's completion handle resolves with.

    FINISHED means the discovery window closed normally (deadline reached,
    or immediately after subscribing when no duration was given). STOPPED
    and FAILED carry the error describing why.
    """

    status: DiscoveryStatus
    error: Optional[DiscoveryError] = None

    @classmethod
    def finished(cls) -> "DiscoveryResult":
        return cls(DiscoveryStatus.FINISHED)

    @classmethod
    def stopped(cls) -> "DiscoveryResult":
        return cls(DiscoveryStatus.STOPPED, DiscoveryStopped())

    @classmethod
    def failed(cls, topic: str, cause: BaseException) -> "DiscoveryResult":
        return cls(DiscoveryStatus.FAILED, SubscriptionFailed(topic, cause))

    @property
    def ok(self) -> bool:
        return self.status is DiscoveryStatus.FINISHED

    def raise_for_status(self) -> None:
        """Raise the carried error unless the window closed normally."""
        if self.error is not None:
            raise self.error
