"""
Notification service layer.

Every feature that informs a user goes through the dispatcher,
which persists the in-app notification and then best-effort
emails it.
"""

# =====================================================
# DISPATCH
# =====================================================
from .dispatch import (
    dispatch_notification,
    dispatch_to_many,
    mark_as_read,
    recent_notifications,
)

# =====================================================
# EMAIL
# =====================================================
from .email import (
    render_notification_email,
    send_notification_email,
)

__all__ = [
    # Dispatch
    "dispatch_notification",
    "dispatch_to_many",
    "mark_as_read",
    "recent_notifications",

    # Email
    "render_notification_email",
    "send_notification_email",
]
