"""Notification data model."""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """How a notification should be presented."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Phase(Enum):
    """Presentation phase of a notification.

    ENTERING until ``enter_ms`` elapses, then ACTIVE. LEAVING while the
    collection is removing it, REMOVED once it is gone for good.
    """

    ENTERING = "entering"
    ACTIVE = "active"
    LEAVING = "leaving"
    REMOVED = "removed"


@dataclass(slots=True, eq=False)
class Notification:
    """An ephemeral message shown to the user.

    Compared and hashed by identity: two notifications with the same body
    and severity are still different notifications. Only the owning
    ``Notifications`` collection changes ``phase``.
    """

    body: str
    severity: Severity
    created_at: float
    ttl_ms: int
    phase: Phase = Phase.ENTERING
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl_ms / 1000
