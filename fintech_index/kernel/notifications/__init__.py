"""
Notification Dispatcher - best-effort email/SMS side effects.
"""

from fintech_index.kernel.notifications import messages
from fintech_index.kernel.notifications.dispatcher import (
    Channel,
    NotificationDispatcher,
    close_dispatcher,
    get_dispatcher,
    init_dispatcher,
)
from fintech_index.kernel.notifications.messages import Notice

__all__ = [
    "Channel",
    "NotificationDispatcher",
    "Notice",
    "messages",
    "init_dispatcher",
    "get_dispatcher",
    "close_dispatcher",
]
