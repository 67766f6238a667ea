"""Notifications: ephemeral messages with timed, identity-based eviction.

Usage::

    from perch.notifications import Notifications

    notifications = Notifications(ttl_ms=3000)
    notifications.notify("Could not delete message", "error")
"""

from perch.notifications.clock import Clock, LoopClock, TimerHandle
from perch.notifications.collection import NotificationChange, Notifications, NotificationsView
from perch.notifications.model import Notification, Phase, Severity

__all__ = [
    "Clock",
    "LoopClock",
    "Notification",
    "NotificationChange",
    "Notifications",
    "NotificationsView",
    "Phase",
    "Severity",
    "TimerHandle",
]
